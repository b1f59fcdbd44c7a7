"""
Core infrastructure for the shortlink favorites service.
Provides the key-value store clients, exceptions and error handling.
"""

from .kv_store import KVStore, RedisKVStore, MemoryKVStore, create_kv_store
from .exceptions import ErrorCode, KVStoreError, ShortlinkException

__all__ = [
    "KVStore",
    "RedisKVStore",
    "MemoryKVStore",
    "create_kv_store",
    "ErrorCode",
    "KVStoreError",
    "ShortlinkException",
]
