"""
Tests for the Redis-backed refresh token store and token rotation.
"""
import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from pricecheck.errors import UnauthenticatedError
from pricecheck.services import sessions
from pricecheck.services.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    issue_tokens,
    revoke_refresh_token,
    rotate_refresh_token,
)
from pricecheck.services.sessions import RefreshTokenStore


class InMemoryRedis:
    """Just enough of the async Redis API for the token store, yielding on every call."""

    def __init__(self):
        self.keys = {}

    async def setex(self, key, ttl, value):
        await asyncio.sleep(0)
        self.keys[key] = value

    async def delete(self, key):
        await asyncio.sleep(0)
        return 1 if self.keys.pop(key, None) is not None else 0

    async def aclose(self):
        pass


@pytest.fixture
def redis_client():
    client = AsyncMock()
    client.delete.return_value = 1
    return client


@pytest.fixture
def store(redis_client):
    return RefreshTokenStore(client=redis_client)


class TestRefreshTokenStore:
    def test_disabled_store_is_inert(self):
        store = RefreshTokenStore()

        assert not store.is_connected
        asyncio.run(store.register("abc", 1, timedelta(days=1)))
        assert asyncio.run(store.revoke("abc")) is None

    def test_connect_failure_falls_back(self):
        store = RefreshTokenStore()

        asyncio.run(store.connect("redis://localhost:1"))

        assert not store.is_connected
        assert asyncio.run(store.revoke("abc")) is None

    def test_connect_failure_closes_client(self, monkeypatch):
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("refused")
        monkeypatch.setattr(sessions.redis, "from_url", lambda *args, **kwargs: client)
        store = RefreshTokenStore()

        asyncio.run(store.connect("redis://cache:6379"))

        client.aclose.assert_awaited_once()
        assert not store.is_connected

    def test_register(self, store, redis_client):
        asyncio.run(store.register("abc", 7, timedelta(days=2)))

        redis_client.setex.assert_awaited_once_with("refresh:abc", 172800, "7")

    def test_revoke_reports_whether_token_was_live(self, store, redis_client):
        assert asyncio.run(store.revoke("abc")) is True
        redis_client.delete.assert_awaited_once_with("refresh:abc")

        redis_client.delete.return_value = 0
        assert asyncio.run(store.revoke("abc")) is False

    def test_revoke_error_means_unknown(self, store, redis_client):
        redis_client.delete.side_effect = RedisConnectionError("gone")

        assert asyncio.run(store.revoke("abc")) is None

    def test_disconnect(self, store, redis_client):
        asyncio.run(store.disconnect())

        redis_client.aclose.assert_awaited_once()
        assert not store.is_connected


class TestRotation:
    def test_rotate_revokes_old_token(self, test_db, settings, basic_user, store, redis_client):
        token, jti = create_refresh_token(basic_user, settings)

        user, access_token, new_refresh = asyncio.run(rotate_refresh_token(test_db, token, store, settings))

        assert user.id == basic_user.id
        assert decode_token(access_token, settings)["type"] == "access"
        assert decode_token(new_refresh, settings)["jti"] != jti
        redis_client.delete.assert_awaited_once_with(f"refresh:{jti}")
        redis_client.setex.assert_awaited_once()

    def test_revoked_token_is_rejected(self, test_db, settings, basic_user, store, redis_client):
        token, _ = create_refresh_token(basic_user, settings)
        redis_client.delete.return_value = 0

        with pytest.raises(UnauthenticatedError):
            asyncio.run(rotate_refresh_token(test_db, token, store, settings))

        redis_client.setex.assert_not_awaited()

    def test_concurrent_refreshes_rotate_once(self, test_db, settings, basic_user):
        store = RefreshTokenStore(client=InMemoryRedis())

        async def refresh_twice():
            _, refresh_token = await issue_tokens(basic_user, store, settings)
            return await asyncio.gather(
                rotate_refresh_token(test_db, refresh_token, store, settings),
                rotate_refresh_token(test_db, refresh_token, store, settings),
                return_exceptions=True,
            )

        results = asyncio.run(refresh_twice())

        assert sum(1 for r in results if isinstance(r, tuple)) == 1
        assert sum(1 for r in results if isinstance(r, UnauthenticatedError)) == 1

    def test_rotated_token_cannot_be_reused(self, test_db, settings, basic_user):
        store = RefreshTokenStore(client=InMemoryRedis())

        async def refresh_in_sequence():
            _, refresh_token = await issue_tokens(basic_user, store, settings)
            _, _, new_refresh = await rotate_refresh_token(test_db, refresh_token, store, settings)
            with pytest.raises(UnauthenticatedError):
                await rotate_refresh_token(test_db, refresh_token, store, settings)
            return await rotate_refresh_token(test_db, new_refresh, store, settings)

        user, _, _ = asyncio.run(refresh_in_sequence())

        assert user.id == basic_user.id

    def test_revoke_ignores_access_tokens(self, settings, basic_user, store, redis_client):
        asyncio.run(revoke_refresh_token(create_access_token(basic_user, settings), store, settings))

        redis_client.delete.assert_not_awaited()

    def test_revoke_refresh_token(self, settings, basic_user, store, redis_client):
        token, jti = create_refresh_token(basic_user, settings)

        asyncio.run(revoke_refresh_token(token, store, settings))

        redis_client.delete.assert_awaited_once_with(f"refresh:{jti}")
