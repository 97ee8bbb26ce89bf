# This file makes the access_control directory a Python package
from .ledger import AccessLedger
from .authorization import check_record_access, check_owner_listing, check_grant_listing
from .decorators import current_user_required
