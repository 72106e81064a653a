"""
Refresh Token Session Store

Keeps the ids (``jti``) of live refresh tokens in Redis so they can be
rotated and revoked. When Redis is unavailable the store is disabled and
refresh tokens are checked on signature and expiry alone.
"""
import logging
from datetime import timedelta
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

PREFIX_REFRESH = "refresh:"


class RefreshTokenStore:
    """Redis-backed registry of refresh tokens with fallback to stateless mode."""

    def __init__(self, client: Optional[redis.Redis] = None):
        self._client = client
        self._connected = client is not None

    async def connect(self, redis_url: str):
        """Initialize Redis connection."""
        if self._connected:
            return

        try:
            self._client = redis.from_url(
                redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            # Test connection
            await self._client.ping()
            self._connected = True
            logger.info("Refresh token store connected to Redis")
        except (RedisError, OSError) as e:
            logger.warning(f"Redis not available, refresh tokens will not be revocable: {e}")
            if self._client:
                await self._client.aclose()
            self._client = None
            self._connected = False

    async def disconnect(self):
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._connected = False

    @staticmethod
    def _key(jti: str) -> str:
        return f"{PREFIX_REFRESH}{jti}"

    async def register(self, jti: str, user_id: int, ttl: timedelta):
        """Record a freshly issued refresh token."""
        if not self._client:
            return

        try:
            await self._client.setex(self._key(jti), int(ttl.total_seconds()), str(user_id))
        except RedisError as e:
            logger.error(f"Refresh token register error: {e}")

    async def revoke(self, jti: str) -> Optional[bool]:
        """
        Forget a refresh token so it can no longer be exchanged.

        Returns whether the token was still live. Redis deletes atomically,
        so of several callers revoking the same token only one gets True.
        None means the store is disabled or unreachable and the caller has
        to rely on the token's own signature and expiry.
        """
        if not self._client:
            return None

        try:
            return await self._client.delete(self._key(jti)) > 0
        except RedisError as e:
            logger.error(f"Refresh token revoke error: {e}")
            return None

    @property
    def is_connected(self) -> bool:
        """Check if the store is available."""
        return self._connected
