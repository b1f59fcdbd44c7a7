"""
Key-value store clients for link records and the favorite index.

Every key holds a JSON value plus an optional JSON metadata object that is
stored next to it and returned verbatim. Two backends are provided:

- RedisKVStore: redis.asyncio, one Redis hash per key with the fields
  ``value`` and ``metadata``.
- MemoryKVStore: process-local dictionary, used for development and tests.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from redis import asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config.settings import KVBackend, KVStoreSettings
from app.core.exceptions import KVStoreError

VALUE_FIELD = "value"
METADATA_FIELD = "metadata"

logger = logging.getLogger(__name__)


def _decode(key: str, raw: Optional[str]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise KVStoreError(f"Value stored under '{key}' is not valid JSON: {e}", key=key) from e


class KVStore(ABC):
    """Interface shared by the key-value store backends."""

    backend_name = "abstract"

    def __init__(self, namespace: str = ""):
        self.namespace = namespace

    def _full_key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    async def connect(self) -> bool:
        return True

    async def disconnect(self) -> None:
        return None

    @abstractmethod
    async def ping(self) -> bool:
        ...

    @abstractmethod
    async def get(self, key: str) -> Any:
        """Return the decoded JSON value stored under ``key`` or None."""

    @abstractmethod
    async def get_with_metadata(self, key: str) -> Tuple[Any, Optional[Dict[str, Any]]]:
        """Return ``(value, metadata)``; both are None when the key is absent."""

    @abstractmethod
    async def put(self, key: str, value: Any, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Store ``value`` as JSON, replacing the metadata with ``metadata``."""


class RedisKVStore(KVStore):
    """
    Redis-backed store using redis.asyncio.

    Every Redis error is re-raised as KVStoreError with the key attached;
    there is no retry or fallback.
    """

    backend_name = KVBackend.REDIS.value

    def __init__(self, redis_url: str, namespace: str = "", socket_timeout: float = 5.0):
        super().__init__(namespace)
        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self.redis_client: Optional[Redis] = None
        self._connection_lock = asyncio.Lock()

    async def connect(self) -> bool:
        """
        Establish connection to Redis server.

        Returns:
            True if connection successful, False otherwise
        """
        async with self._connection_lock:
            if self.redis_client is not None:
                return True

            client = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_timeout,
                health_check_interval=30
            )
            try:
                logger.info(f"Connecting to Redis at {self.redis_url}")
                await client.ping()
            except RedisError as e:
                logger.error(f"Failed to connect to Redis: {e}")
                await client.aclose()
                return False

            self.redis_client = client
            logger.info("Successfully connected to Redis")
            return True

    async def disconnect(self) -> None:
        """Disconnect from Redis server."""
        async with self._connection_lock:
            if self.redis_client is None:
                return
            try:
                await self.redis_client.aclose()
                logger.info("Disconnected from Redis")
            except RedisError as e:
                logger.warning(f"Error during Redis disconnect: {e}")
            finally:
                self.redis_client = None

    def _client(self, key: str) -> Redis:
        if self.redis_client is None:
            raise KVStoreError("Redis client is not connected", key=key)
        return self.redis_client

    async def ping(self) -> bool:
        if self.redis_client is None:
            return False
        try:
            return await self.redis_client.ping() is True
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def get(self, key: str) -> Any:
        full_key = self._full_key(key)
        try:
            raw = await self._client(key).hget(full_key, VALUE_FIELD)
        except RedisError as e:
            logger.error(f"Error reading key '{full_key}': {e}")
            raise KVStoreError(f"Failed to read '{key}': {e}", key=key) from e
        return _decode(key, raw)

    async def get_with_metadata(self, key: str) -> Tuple[Any, Optional[Dict[str, Any]]]:
        full_key = self._full_key(key)
        try:
            raw_value, raw_metadata = await self._client(key).hmget(
                full_key, [VALUE_FIELD, METADATA_FIELD]
            )
        except RedisError as e:
            logger.error(f"Error reading key '{full_key}' with metadata: {e}")
            raise KVStoreError(f"Failed to read '{key}': {e}", key=key) from e

        if raw_value is None:
            return None, None
        return _decode(key, raw_value), _decode(key, raw_metadata)

    async def put(self, key: str, value: Any, metadata: Optional[Dict[str, Any]] = None) -> None:
        full_key = self._full_key(key)
        client = self._client(key)
        try:
            async with client.pipeline(transaction=True) as pipe:
                pipe.hset(full_key, VALUE_FIELD, json.dumps(value))
                if metadata is None:
                    pipe.hdel(full_key, METADATA_FIELD)
                else:
                    pipe.hset(full_key, METADATA_FIELD, json.dumps(metadata))
                await pipe.execute()
        except RedisError as e:
            logger.error(f"Error writing key '{full_key}': {e}")
            raise KVStoreError(f"Failed to write '{key}': {e}", key=key) from e
        logger.debug(f"Stored key: {full_key}")


class MemoryKVStore(KVStore):
    """
    In-process store with the same semantics as RedisKVStore.

    Entries are kept as JSON text so callers never share mutable objects
    with the store.
    """

    backend_name = KVBackend.MEMORY.value

    def __init__(self, namespace: str = ""):
        super().__init__(namespace)
        self._data: Dict[str, Dict[str, str]] = {}

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> Any:
        entry = self._data.get(self._full_key(key))
        if entry is None:
            return None
        return _decode(key, entry.get(VALUE_FIELD))

    async def get_with_metadata(self, key: str) -> Tuple[Any, Optional[Dict[str, Any]]]:
        entry = self._data.get(self._full_key(key))
        if entry is None:
            return None, None
        return _decode(key, entry.get(VALUE_FIELD)), _decode(key, entry.get(METADATA_FIELD))

    async def put(self, key: str, value: Any, metadata: Optional[Dict[str, Any]] = None) -> None:
        entry = {VALUE_FIELD: json.dumps(value)}
        if metadata is not None:
            entry[METADATA_FIELD] = json.dumps(metadata)
        self._data[self._full_key(key)] = entry


def create_kv_store(kv_settings: KVStoreSettings) -> KVStore:
    """Build the store selected by ``kv_settings.backend``."""
    if kv_settings.backend == KVBackend.MEMORY:
        logger.info("Using in-memory key-value store")
        return MemoryKVStore(namespace=kv_settings.namespace)
    return RedisKVStore(
        kv_settings.url,
        namespace=kv_settings.namespace,
        socket_timeout=float(kv_settings.socket_timeout),
    )
