"""
Unit tests for the key-value store backends
"""
from unittest.mock import AsyncMock, MagicMock, call

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.config.settings import KVBackend, KVStoreSettings
from app.core.exceptions import KVStoreError
from app.core import kv_store as kv_store_module
from app.core.kv_store import MemoryKVStore, RedisKVStore, create_kv_store


@pytest.mark.asyncio
async def test_memory_store_get_missing():
    store = MemoryKVStore()

    assert await store.get("link:none") is None
    assert await store.get_with_metadata("link:none") == (None, None)


@pytest.mark.asyncio
async def test_memory_store_round_trips_value_and_metadata():
    store = MemoryKVStore()
    await store.put("link:a", {"url": "https://example.com"}, metadata={"expiration": 10})

    assert await store.get("link:a") == {"url": "https://example.com"}
    assert await store.get_with_metadata("link:a") == (
        {"url": "https://example.com"},
        {"expiration": 10},
    )


@pytest.mark.asyncio
async def test_memory_store_put_without_metadata_clears_it():
    store = MemoryKVStore()
    await store.put("link:a", {"v": 1}, metadata={"m": 1})
    await store.put("link:a", {"v": 2})

    assert await store.get_with_metadata("link:a") == ({"v": 2}, None)


@pytest.mark.asyncio
async def test_memory_store_does_not_share_mutable_values():
    store = MemoryKVStore()
    value = {"tags": ["x"]}
    await store.put("link:a", value)
    value["tags"].append("y")

    fetched = await store.get("link:a")
    fetched["tags"].append("z")

    assert await store.get("link:a") == {"tags": ["x"]}


@pytest.mark.asyncio
async def test_memory_store_invalid_json_raises(kv_store):
    store = kv_store
    store.put_raw("link:a", "{not json")

    with pytest.raises(KVStoreError) as exc_info:
        await store.get("link:a")

    assert exc_info.value.key == "link:a"


@pytest.mark.asyncio
async def test_namespace_prefixes_keys(kv_store_factory):
    store = kv_store_factory(namespace="tenant1:")
    await store.put("link:a", {"v": 1})

    assert store.keys() == ["tenant1:link:a"]
    assert await store.get("link:a") == {"v": 1}


@pytest.mark.asyncio
async def test_redis_store_requires_connection():
    store = RedisKVStore("redis://localhost:6379/0")

    assert await store.ping() is False
    with pytest.raises(KVStoreError):
        await store.get("link:a")


def test_create_kv_store_selects_backend():
    memory = create_kv_store(KVStoreSettings(backend=KVBackend.MEMORY, namespace="ns:"))
    redis_store = create_kv_store(
        KVStoreSettings(backend=KVBackend.REDIS, host="kv.internal", port=6380, db=2)
    )

    assert isinstance(memory, MemoryKVStore)
    assert memory.namespace == "ns:"
    assert isinstance(redis_store, RedisKVStore)
    assert redis_store.redis_url == "redis://kv.internal:6380/2"


def _redis_store(namespace=""):
    """RedisKVStore wired to a mocked client whose pipeline records queued commands."""
    pipe = MagicMock()
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=False)
    pipe.execute = AsyncMock(return_value=[1, 1])

    client = MagicMock()
    client.pipeline.return_value = pipe
    client.ping = AsyncMock(return_value=True)

    store = RedisKVStore("redis://localhost:6379/0", namespace=namespace)
    store.redis_client = client
    return store, client, pipe


@pytest.mark.asyncio
async def test_redis_put_writes_value_and_metadata_in_one_transaction():
    store, client, pipe = _redis_store(namespace="ns:")

    await store.put("link:a", {"v": 1}, metadata={"expiration": 10})

    client.pipeline.assert_called_once_with(transaction=True)
    assert pipe.hset.call_args_list == [
        call("ns:link:a", "value", '{"v": 1}'),
        call("ns:link:a", "metadata", '{"expiration": 10}'),
    ]
    pipe.hdel.assert_not_called()
    pipe.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_redis_put_without_metadata_deletes_metadata_field():
    store, client, pipe = _redis_store()

    await store.put("link:a", {"v": 1})

    client.pipeline.assert_called_once_with(transaction=True)
    pipe.hset.assert_called_once_with("link:a", "value", '{"v": 1}')
    pipe.hdel.assert_called_once_with("link:a", "metadata")
    pipe.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_redis_get_with_metadata_reads_both_fields():
    store, client, _pipe = _redis_store(namespace="ns:")
    client.hmget = AsyncMock(return_value=['{"url": "https://example.com"}', '{"clicks": 3}'])

    value, metadata = await store.get_with_metadata("link:a")

    client.hmget.assert_awaited_once_with("ns:link:a", ["value", "metadata"])
    assert value == {"url": "https://example.com"}
    assert metadata == {"clicks": 3}


@pytest.mark.asyncio
async def test_redis_get_with_metadata_missing_key():
    store, client, _pipe = _redis_store()
    client.hmget = AsyncMock(return_value=[None, None])

    assert await store.get_with_metadata("link:none") == (None, None)


@pytest.mark.asyncio
async def test_redis_get_reads_value_field():
    store, client, _pipe = _redis_store()
    client.hget = AsyncMock(return_value='["a", "b"]')

    assert await store.get("favoriteLinks") == ["a", "b"]
    client.hget.assert_awaited_once_with("favoriteLinks", "value")


@pytest.mark.asyncio
async def test_redis_invalid_json_raises():
    store, client, _pipe = _redis_store()
    client.hget = AsyncMock(return_value="{not json")

    with pytest.raises(KVStoreError) as exc_info:
        await store.get("link:a")

    assert exc_info.value.key == "link:a"


@pytest.mark.asyncio
async def test_redis_read_errors_are_wrapped():
    store, client, _pipe = _redis_store()
    client.hget = AsyncMock(side_effect=RedisConnectionError("down"))
    client.hmget = AsyncMock(side_effect=RedisConnectionError("down"))

    with pytest.raises(KVStoreError) as get_exc:
        await store.get("link:a")
    with pytest.raises(KVStoreError) as meta_exc:
        await store.get_with_metadata("link:b")

    assert get_exc.value.key == "link:a"
    assert "down" in str(get_exc.value)
    assert meta_exc.value.key == "link:b"


@pytest.mark.asyncio
async def test_redis_write_errors_are_wrapped():
    store, _client, pipe = _redis_store()
    pipe.execute = AsyncMock(side_effect=RedisConnectionError("down"))

    with pytest.raises(KVStoreError) as exc_info:
        await store.put("link:a", {"v": 1})

    assert exc_info.value.key == "link:a"


@pytest.mark.asyncio
async def test_redis_ping_reports_client_state():
    store, client, _pipe = _redis_store()

    assert await store.ping() is True

    client.ping = AsyncMock(side_effect=RedisConnectionError("down"))
    assert await store.ping() is False


@pytest.mark.asyncio
async def test_redis_connect_failure_closes_client(monkeypatch):
    client = MagicMock()
    client.ping = AsyncMock(side_effect=RedisConnectionError("refused"))
    client.aclose = AsyncMock()
    monkeypatch.setattr(kv_store_module.aioredis, "from_url", lambda url, **kwargs: client)
    store = RedisKVStore("redis://localhost:6379/0")

    assert await store.connect() is False
    assert store.redis_client is None
    client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_redis_disconnect_closes_client():
    store, client, _pipe = _redis_store()
    client.aclose = AsyncMock()

    await store.disconnect()

    client.aclose.assert_awaited_once()
    assert store.redis_client is None
