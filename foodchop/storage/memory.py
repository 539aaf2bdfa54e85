"""
In-memory storage backend.

Keeps each collection as a dict of JSON strings. Data lives only as long as
the process; used for development, tests and single-worker deployments.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

import structlog

from foodchop.storage.base import M, RecordMap, StorageBackend

logger = structlog.get_logger(__name__)


class MemoryRecordMap(RecordMap[M]):

    def __init__(self, namespace: str, model: Type[M], entries: Dict[str, str]):
        super().__init__(namespace, model)
        self._entries = entries
    
    async def _read(self, key: str) -> Optional[str]:
        return self._entries.get(key)
    
    async def _write(self, key: str, raw: str) -> None:
        self._entries[key] = raw
    
    async def _delete(self, key: str) -> None:
        self._entries.pop(key, None)
    
    async def _exists(self, key: str) -> bool:
        return key in self._entries
    
    async def _scan(self) -> List[Tuple[str, str]]:
        return list(self._entries.items())
    
    async def _count(self) -> int:
        return len(self._entries)
    
    async def _compare_and_set(self, key: str, expected: Optional[str], raw: str) -> bool:
        if self._entries.get(key) != expected:
            return False
        self._entries[key] = raw
        return True


class MemoryBackend(StorageBackend):
    """Process-local storage backend"""
    
    name = "memory"
    
    def __init__(self) -> None:
        # namespace -> key -> JSON
        self._collections: Dict[str, Dict[str, str]] = {}
    
    async def connect(self) -> None:
        logger.info("Memory storage ready")
    
    async def close(self) -> None:
        self._collections.clear()
        logger.info("Memory storage cleared")
    
    async def health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "collections": {name: len(entries) for name, entries in self._collections.items()},
        }
    
    def collection(self, namespace: str, model: Type[M]) -> MemoryRecordMap[M]:
        entries = self._collections.setdefault(namespace, {})
        return MemoryRecordMap(namespace, model, entries)
