# This file makes the services directory a Python package
from .record_store import RecordStore
from .user_directory import UserDirectory
