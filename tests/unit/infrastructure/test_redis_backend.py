"""Tests for RedisCacheBackend against a mocked redis.asyncio client."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from marshalkv import ABSENT, BackendError, MarshallingStore
from marshalkv.infrastructure.backends.redis import RedisCacheBackend


@pytest.fixture
def client() -> AsyncMock:
    """Create a mocked redis client."""
    return AsyncMock()


@pytest.fixture
def redis_backend(client: AsyncMock) -> RedisCacheBackend:
    """Create a backend with a key prefix."""
    return RedisCacheBackend(key_prefix="app", client=client)


class TestRedisCacheBackend:
    """Tests for RedisCacheBackend."""

    @pytest.mark.asyncio
    async def test_get(self, redis_backend: RedisCacheBackend, client: AsyncMock) -> None:
        """Test get reads the prefixed key."""
        client.get.return_value = b"value"

        assert await redis_backend.get("key") == b"value"
        client.get.assert_awaited_once_with(b"app:key")

    @pytest.mark.asyncio
    async def test_unicode_key_is_utf8_encoded(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test multi-byte keys are sent as UTF-8 bytes."""
        client.get.return_value = None

        assert await redis_backend.get("좋") is None
        client.get.assert_awaited_once_with(b"app:" + "좋".encode("utf-8"))

    @pytest.mark.asyncio
    async def test_no_prefix(self, client: AsyncMock) -> None:
        """Test keys are left unprefixed when no prefix is configured."""
        backend = RedisCacheBackend(client=client)

        await backend.get(b"\x00raw")

        client.get.assert_awaited_once_with(b"\x00raw")

    @pytest.mark.asyncio
    async def test_set_without_ttl(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test permanent writes send no expiry."""
        await redis_backend.set("key", b"value")

        client.set.assert_awaited_once_with(b"app:key", b"value", px=None)

    @pytest.mark.asyncio
    async def test_set_with_ttl(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test TTL is sent in milliseconds."""
        await redis_backend.set("key", b"value", ttl=timedelta(minutes=1))

        client.set.assert_awaited_once_with(b"app:key", b"value", px=60000)

    @pytest.mark.asyncio
    async def test_set_if_absent(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test conditional set uses SET NX with the TTL in one command."""
        client.set.return_value = True

        stored = await redis_backend.set_if_absent(
            "key", b"value", ttl=timedelta(seconds=30)
        )

        assert stored is True
        client.set.assert_awaited_once_with(b"app:key", b"value", px=30000, nx=True)

    @pytest.mark.asyncio
    async def test_set_if_absent_existing(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test SET NX returning nil means not stored."""
        client.set.return_value = None

        assert await redis_backend.set_if_absent("key", b"value") is False

    @pytest.mark.asyncio
    async def test_mget(self, redis_backend: RedisCacheBackend, client: AsyncMock) -> None:
        """Test multi-get issues one MGET in request order."""
        client.mget.return_value = [b"1", None]

        assert await redis_backend.mget(["a", "b"]) == [b"1", None]
        client.mget.assert_awaited_once_with([b"app:a", b"app:b"])

    @pytest.mark.asyncio
    async def test_mget_empty(self, redis_backend: RedisCacheBackend, client: AsyncMock) -> None:
        """Test empty multi-get does not hit Redis."""
        assert await redis_backend.mget([]) == []
        client.mget.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete(self, redis_backend: RedisCacheBackend, client: AsyncMock) -> None:
        """Test delete of several keys."""
        client.delete.return_value = 1

        assert await redis_backend.delete("a", "b") == 1
        client.delete.assert_awaited_once_with(b"app:a", b"app:b")

    @pytest.mark.asyncio
    async def test_exists(self, redis_backend: RedisCacheBackend, client: AsyncMock) -> None:
        """Test exists converts the count to bool."""
        client.exists.return_value = 0

        assert await redis_backend.exists("key") is False

    @pytest.mark.asyncio
    async def test_expire(self, redis_backend: RedisCacheBackend, client: AsyncMock) -> None:
        """Test expire uses PEXPIRE."""
        client.pexpire.return_value = True

        assert await redis_backend.expire("key", timedelta(seconds=2)) is True
        client.pexpire.assert_awaited_once_with(b"app:key", 2000)

    @pytest.mark.asyncio
    async def test_clear_scans_prefix(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test clear deletes only keys under the prefix."""
        client.scan.side_effect = [(7, [b"app:a"]), (0, [b"app:b"])]
        client.delete.return_value = 1

        await redis_backend.clear()

        assert client.scan.await_count == 2
        client.scan.assert_any_await(0, match=b"app:*", count=100)
        client.scan.assert_any_await(7, match=b"app:*", count=100)

    @pytest.mark.asyncio
    async def test_clear_escapes_glob_characters_in_prefix(
        self, client: AsyncMock
    ) -> None:
        """Test a prefix with glob metacharacters only matches itself."""
        client.scan.return_value = (0, [])
        backend = RedisCacheBackend(key_prefix="a*b[1]?\\", client=client)

        await backend.clear()

        client.scan.assert_awaited_once_with(
            0, match=b"a\\*b\\[1\\]\\?\\\\:*", count=100
        )

    @pytest.mark.asyncio
    async def test_clear_without_prefix(self, client: AsyncMock) -> None:
        """Test clear without a prefix scans every key."""
        client.scan.return_value = (0, [])

        await RedisCacheBackend(client=client).clear()

        client.scan.assert_awaited_once_with(0, match=b"*", count=100)

    @pytest.mark.asyncio
    async def test_connection_error(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test client failures surface as BackendError."""
        client.get.side_effect = RedisConnectionError("connection refused")

        with pytest.raises(BackendError) as exc_info:
            await redis_backend.get("key")

        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_error_on_setnx(
        self, redis_backend: RedisCacheBackend, client: AsyncMock
    ) -> None:
        """Test timeouts surface as BackendError."""
        client.set.side_effect = RedisTimeoutError("timed out")

        with pytest.raises(BackendError):
            await redis_backend.set_if_absent("key", b"value")

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, client: AsyncMock) -> None:
        """Test the async context manager closes the client."""
        async with RedisCacheBackend(client=client):
            pass

        client.aclose.assert_awaited_once()


class TestMarshallingStoreOverRedis:
    """Tests for MarshallingStore wired to the Redis backend."""

    @pytest.mark.asyncio
    async def test_setnx_with_ttl_alias(self, client: AsyncMock) -> None:
        """Test a TTL alias reaches Redis as one atomic SET NX PX."""
        client.set.return_value = True
        store = MarshallingStore(RedisCacheBackend(client=client))

        await store.setnx("rabbit", "plain", raw=True, expire_in=60)

        client.set.assert_awaited_once_with(b"rabbit", b"plain", px=60000, nx=True)

    @pytest.mark.asyncio
    async def test_missing_key(self, client: AsyncMock) -> None:
        """Test a nil reply is ABSENT."""
        client.get.return_value = None
        store = MarshallingStore(RedisCacheBackend(client=client))

        assert await store.get("rabbit") is ABSENT

    @pytest.mark.asyncio
    async def test_backend_error_propagates(self, client: AsyncMock) -> None:
        """Test backend failures are not swallowed by the store."""
        client.mget.side_effect = RedisConnectionError("down")
        store = MarshallingStore(RedisCacheBackend(client=client))

        with pytest.raises(BackendError):
            await store.mget("a", "b")
