# External collaborators: content-addressed store and settlement service
from .ipfs import IpfsClient
from .settlement import SettlementClient, settle_record
