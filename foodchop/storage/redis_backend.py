"""
Redis storage backend.

Each collection is a single Redis hash named ``<prefix>:<namespace>`` whose
fields are record ids and whose values are record JSON.
"""

import time
from typing import Any, Dict, List, Optional, Tuple, Type

import structlog
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError, WatchError

from foodchop.config import Settings, get_settings
from foodchop.storage.base import M, RecordMap, StorageBackend, StorageError

logger = structlog.get_logger(__name__)


class RedisRecordMap(RecordMap[M]):

    def __init__(self, namespace: str, model: Type[M], backend: "RedisBackend"):
        super().__init__(namespace, model)
        self._backend = backend
        self.hash_key = f"{backend.key_prefix}:{namespace}"
    
    async def _read(self, key: str) -> Optional[str]:
        try:
            return await self._backend.client.hget(self.hash_key, key)
        except RedisError as e:
            raise StorageError(f"Redis read failed for {self.hash_key}/{key}: {e}") from e
    
    async def _write(self, key: str, raw: str) -> None:
        try:
            await self._backend.client.hset(self.hash_key, key, raw)
        except RedisError as e:
            raise StorageError(f"Redis write failed for {self.hash_key}/{key}: {e}") from e
    
    async def _delete(self, key: str) -> None:
        try:
            await self._backend.client.hdel(self.hash_key, key)
        except RedisError as e:
            raise StorageError(f"Redis delete failed for {self.hash_key}/{key}: {e}") from e
    
    async def _exists(self, key: str) -> bool:
        try:
            return bool(await self._backend.client.hexists(self.hash_key, key))
        except RedisError as e:
            raise StorageError(f"Redis read failed for {self.hash_key}/{key}: {e}") from e
    
    async def _scan(self) -> List[Tuple[str, str]]:
        try:
            entries = await self._backend.client.hgetall(self.hash_key)
        except RedisError as e:
            raise StorageError(f"Redis scan failed for {self.hash_key}: {e}") from e
        return list(entries.items())
    
    async def _count(self) -> int:
        try:
            return int(await self._backend.client.hlen(self.hash_key))
        except RedisError as e:
            raise StorageError(f"Redis count failed for {self.hash_key}: {e}") from e
    
    async def _compare_and_set(self, key: str, expected: Optional[str], raw: str) -> bool:
        try:
            async with self._backend.client.pipeline(transaction=True) as pipe:
                await pipe.watch(self.hash_key)
                if await pipe.hget(self.hash_key, key) != expected:
                    return False
                pipe.multi()
                pipe.hset(self.hash_key, key, raw)
                await pipe.execute()
                return True
        except WatchError:
            return False
        except RedisError as e:
            raise StorageError(f"Redis write failed for {self.hash_key}/{key}: {e}") from e


class RedisBackend(StorageBackend):
    """
    Storage backend on a Redis server.
    
    Example:
        backend = RedisBackend(settings)
        await backend.connect()
        products = backend.collection("products", FoodProduct)
    """
    
    name = "redis"
    
    def __init__(self, settings: Optional[Settings] = None, client: Optional[Redis] = None):
        self.settings = settings or get_settings()
        self.key_prefix = self.settings.storage.key_prefix
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = client
    
    @property
    def client(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Redis not initialized. Call connect() first.")
        return self._client
    
    async def connect(self) -> None:
        """Initialize Redis connection pool"""
        if self._client is not None:
            return
        
        self._pool = ConnectionPool.from_url(
            self.settings.redis.get_url(),
            max_connections=self.settings.redis.max_connections,
            socket_timeout=self.settings.redis.socket_timeout,
            decode_responses=True,
        )
        self._client = Redis(connection_pool=self._pool)
        
        try:
            await self._client.ping()
            logger.info("Redis connection established")
        except RedisError as e:
            logger.error("Redis connection failed", error=str(e))
            await self.close()
            raise
    
    async def close(self) -> None:
        """Close Redis connection pool"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
        
        logger.info("Redis connection closed")
    
    async def health(self) -> Dict[str, Any]:
        try:
            start = time.perf_counter()
            await self.client.ping()
            latency_ms = (time.perf_counter() - start) * 1000
            return {"status": "healthy", "latency_ms": round(latency_ms, 2)}
        except (RedisError, RuntimeError) as e:
            return {"status": "unhealthy", "error": str(e)}
    
    def collection(self, namespace: str, model: Type[M]) -> RedisRecordMap[M]:
        return RedisRecordMap(namespace, model, self)
