# Storage interfaces and their SQL / in-memory implementations
from .base import UserRepository, RecordRepository, GrantRepository
from .sql import SqlUserRepository, SqlRecordRepository, SqlGrantRepository
from .memory import MemoryUserRepository, MemoryRecordRepository, MemoryGrantRepository
