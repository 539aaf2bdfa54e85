"""
SQL storage backend.

All collections share the ``kv_records`` table, one row per record.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from foodchop.config import Settings, get_settings
from foodchop.database.connection import (
    check_database_health,
    close_database,
    get_db,
    init_database,
)
from foodchop.database.models import KeyValueRecord
from foodchop.storage.base import M, RecordMap, StorageBackend, StorageError

logger = structlog.get_logger(__name__)


class SqlRecordMap(RecordMap[M]):

    def _where(self, key: str):
        return (KeyValueRecord.namespace == self.namespace) & (KeyValueRecord.key == key)
    
    async def _read(self, key: str) -> Optional[str]:
        try:
            async with get_db() as db:
                result = await db.execute(select(KeyValueRecord.value).where(self._where(key)))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Database read failed for {self.namespace}/{key}: {e}") from e
    
    async def _write(self, key: str, raw: str) -> None:
        try:
            async with get_db() as db:
                row = await db.get(KeyValueRecord, (self.namespace, key))
                if row is None:
                    db.add(KeyValueRecord(namespace=self.namespace, key=key, value=raw))
                else:
                    row.value = raw
        except SQLAlchemyError as e:
            raise StorageError(f"Database write failed for {self.namespace}/{key}: {e}") from e
    
    async def _delete(self, key: str) -> None:
        try:
            async with get_db() as db:
                await db.execute(delete(KeyValueRecord).where(self._where(key)))
        except SQLAlchemyError as e:
            raise StorageError(f"Database delete failed for {self.namespace}/{key}: {e}") from e
    
    async def _exists(self, key: str) -> bool:
        try:
            async with get_db() as db:
                result = await db.execute(
                    select(func.count()).select_from(KeyValueRecord).where(self._where(key))
                )
                return (result.scalar() or 0) > 0
        except SQLAlchemyError as e:
            raise StorageError(f"Database read failed for {self.namespace}/{key}: {e}") from e
    
    async def _scan(self) -> List[Tuple[str, str]]:
        try:
            async with get_db() as db:
                result = await db.execute(
                    select(KeyValueRecord.key, KeyValueRecord.value)
                    .where(KeyValueRecord.namespace == self.namespace)
                    .order_by(KeyValueRecord.key)
                )
                return [(row.key, row.value) for row in result.all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Database scan failed for {self.namespace}: {e}") from e
    
    async def _count(self) -> int:
        try:
            async with get_db() as db:
                result = await db.execute(
                    select(func.count())
                    .select_from(KeyValueRecord)
                    .where(KeyValueRecord.namespace == self.namespace)
                )
                return result.scalar() or 0
        except SQLAlchemyError as e:
            raise StorageError(f"Database count failed for {self.namespace}: {e}") from e
    
    async def _compare_and_set(self, key: str, expected: Optional[str], raw: str) -> bool:
        try:
            async with get_db() as db:
                if expected is None:
                    if await db.get(KeyValueRecord, (self.namespace, key)) is not None:
                        return False
                    db.add(KeyValueRecord(namespace=self.namespace, key=key, value=raw))
                    await db.flush()
                    return True
                
                result = await db.execute(
                    update(KeyValueRecord)
                    .where(self._where(key), KeyValueRecord.value == expected)
                    .values(value=raw)
                )
                return result.rowcount == 1
        except IntegrityError:
            # Inserted by another writer between the check and the flush
            return False
        except SQLAlchemyError as e:
            raise StorageError(f"Database write failed for {self.namespace}/{key}: {e}") from e


class SqlBackend(StorageBackend):
    """Storage backend on a SQL database (PostgreSQL or SQLite)"""
    
    name = "sql"
    
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
    
    async def connect(self) -> None:
        await init_database(self.settings)
    
    async def close(self) -> None:
        await close_database()
    
    async def health(self) -> Dict[str, Any]:
        return await check_database_health()
    
    def collection(self, namespace: str, model: Type[M]) -> SqlRecordMap[M]:
        return SqlRecordMap(namespace, model)
