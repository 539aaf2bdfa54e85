"""
Storage Module

Pluggable record storage: in-memory, Redis or SQL.
"""
from typing import Optional

from foodchop.config import Settings, get_settings
from .base import RecordMap, StorageBackend, StorageError
from .memory import MemoryBackend


def create_backend(settings: Optional[Settings] = None) -> StorageBackend:
    """
    Build the storage backend selected by ``STORAGE_BACKEND``.
    """
    settings = settings or get_settings()
    backend = settings.storage.backend
    
    if backend == "redis":
        from .redis_backend import RedisBackend
        return RedisBackend(settings)
    if backend == "sql":
        from .sql_backend import SqlBackend
        return SqlBackend(settings)
    return MemoryBackend()


__all__ = [
    "RecordMap",
    "StorageBackend",
    "StorageError",
    "MemoryBackend",
    "create_backend",
]
