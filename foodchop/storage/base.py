"""
Record Map Abstraction

An ordered, string-keyed map of pydantic records, modelled on a stable
B-tree map. Records are serialized to JSON on write and parsed on read, so a
record returned by ``get`` is always a fresh copy: changing it has no effect
on the store until it is written back with ``insert``.

Read-modify-write goes through ``update``, which writes with a compare-and-set
against the value it read and starts over if another writer got there first.
This keeps updates from separate processes sharing one store from overwriting
each other.

Backends implement the raw string operations; this module owns
serialization and key ordering.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)


class StorageError(Exception):
    """Raised when a storage backend fails to read or write."""


class RecordMap(ABC, Generic[M]):
    """
    Async ordered map from string key to record.
    
    Iteration (``values``/``items``) is in ascending key order.
    """
    
    max_update_attempts: int = 10
    
    def __init__(self, namespace: str, model: Type[M]):
        self.namespace = namespace
        self.model = model
    
    # -------------------------------------------------------------------------
    # Backend primitives
    # -------------------------------------------------------------------------
    
    @abstractmethod
    async def _read(self, key: str) -> Optional[str]:
        ...
    
    @abstractmethod
    async def _write(self, key: str, raw: str) -> None:
        ...
    
    @abstractmethod
    async def _delete(self, key: str) -> None:
        ...
    
    @abstractmethod
    async def _exists(self, key: str) -> bool:
        ...
    
    @abstractmethod
    async def _scan(self) -> List[Tuple[str, str]]:
        """Return all (key, raw) pairs in any order."""
    
    @abstractmethod
    async def _count(self) -> int:
        ...
    
    @abstractmethod
    async def _compare_and_set(self, key: str, expected: Optional[str], raw: str) -> bool:
        """
        Write raw under key only if the stored value is still ``expected``.
        
        ``expected=None`` means the key must be absent. Returns False, without
        writing, when the stored value differs.
        """
    
    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------
    
    def _dump(self, record: M) -> str:
        return record.model_dump_json(by_alias=True)
    
    def _load(self, raw: str) -> M:
        return self.model.model_validate_json(raw)
    
    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    
    async def get(self, key: str) -> Optional[M]:
        """Get the record stored under key, or None."""
        raw = await self._read(key)
        if raw is None:
            return None
        return self._load(raw)
    
    async def insert(self, key: str, record: M) -> Optional[M]:
        """
        Store record under key.
        
        Returns:
            The record previously stored under key, or None
        """
        previous = await self.get(key)
        await self._write(key, self._dump(record))
        return previous
    
    async def create(self, key: str, record: M) -> bool:
        """Store record under key unless the key is taken. Returns False if it is."""
        return await self._compare_and_set(key, None, self._dump(record))
    
    async def update(
        self,
        key: str,
        change: Callable[[M], Optional[M]],
        default: Optional[M] = None,
    ) -> Optional[M]:
        """
        Replace the record under key with ``change(record)``.
        
        ``change`` may be called more than once, each time with the latest
        stored record, so it must not have side effects outside its argument.
        It returns None to leave the record as it is.
        
        Args:
            key: Record key
            change: Maps the current record to its replacement
            default: Record to start from when key is absent
        
        Returns:
            The record written, or None if key was absent (and no default
            given) or ``change`` returned None
        
        Raises:
            StorageError: If the write keeps losing to other writers
        """
        for _ in range(self.max_update_attempts):
            raw = await self._read(key)
            if raw is not None:
                current = self._load(raw)
            elif default is not None:
                current = default.model_copy(deep=True)
            else:
                return None
            
            replacement = change(current)
            if replacement is None:
                return None
            
            if await self._compare_and_set(key, raw, self._dump(replacement)):
                return replacement
        
        raise StorageError(f"Update of {self.namespace}/{key} kept conflicting with other writers")
    
    async def remove(self, key: str) -> Optional[M]:
        """Remove key, returning the record that was stored under it."""
        previous = await self.get(key)
        if previous is not None:
            await self._delete(key)
        return previous
    
    async def contains_key(self, key: str) -> bool:
        return await self._exists(key)
    
    async def items(self) -> List[Tuple[str, M]]:
        pairs = sorted(await self._scan(), key=lambda pair: pair[0])
        return [(key, self._load(raw)) for key, raw in pairs]
    
    async def values(self) -> List[M]:
        return [record for _, record in await self.items()]
    
    async def len(self) -> int:
        return await self._count()


class StorageBackend(ABC):
    """
    A storage engine holding any number of named record collections.
    """
    
    name: str = "abstract"
    
    async def connect(self) -> None:
        """Open connections. Called once at startup."""
    
    async def close(self) -> None:
        """Release connections. Called once at shutdown."""
    
    @abstractmethod
    async def health(self) -> Dict[str, Any]:
        """Return a health dict with at least a ``status`` key."""
    
    @abstractmethod
    def collection(self, namespace: str, model: Type[M]) -> RecordMap[M]:
        """Get the record map for a namespace."""
