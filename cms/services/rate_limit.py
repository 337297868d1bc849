"""
Redis Fixed-Window Rate Limiter

Counts requests per (scope, client) in fixed windows of
``rate_limit_window_seconds``.

Key Pattern:
    rl:{scope}:{identifier}:{window_index}

Provides graceful degradation when Redis is unavailable: the request is
allowed and a warning is logged.

Usage:
    limiter = await get_rate_limiter()
    result = await limiter.hit("login", client_ip, limit=5, window=900)
    if not result.allowed:
        ...
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import redis.asyncio as redis

from cms.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int
    key: Optional[str] = None


class RateLimiter:
    """
    Fixed-window counter on top of Redis INCR/EXPIRE.

    Attributes:
        redis: Async Redis client, created lazily
    """

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self.redis: Optional[redis.Redis] = None

    async def _ensure_connected(self) -> Optional[redis.Redis]:
        if self.redis is None:
            try:
                self.redis = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
            except Exception as e:
                logger.warning(f"Failed to connect to Redis: {e}")
                return None
        return self.redis

    async def hit(self, scope: str, identifier: str, limit: int, window: int) -> RateLimitResult:
        """
        Count one request and report whether it is within ``limit``.

        Args:
            scope: Limit bucket, e.g. "api" or "login"
            identifier: Client key, usually the remote address
            limit: Requests allowed per window
            window: Window length in seconds

        Returns:
            RateLimitResult; always allowed when Redis fails
        """
        now = int(time.time())
        window_index = now // window
        reset_after = window - (now % window)

        try:
            client = await self._ensure_connected()
            if not client:
                return RateLimitResult(True, limit, limit, reset_after)

            key = f"rl:{scope}:{identifier}:{window_index}"
            count = await client.incr(key)
            if count == 1:
                await client.expire(key, window)

        except Exception as e:
            logger.warning(f"Redis rate limit error ({scope}): {e}")
            return RateLimitResult(True, limit, limit, reset_after)

        return RateLimitResult(
            allowed=count <= limit,
            limit=limit,
            remaining=max(limit - count, 0),
            reset_after=reset_after,
            key=key,
        )

    async def release(self, result: RateLimitResult) -> None:
        """Give back the request counted by ``result``, e.g. a login that succeeded."""
        if not result.key:
            return
        try:
            client = await self._ensure_connected()
            if client:
                await client.decr(result.key)
        except Exception as e:
            logger.warning(f"Redis rate limit release failed: {e}")

    async def health_check(self) -> bool:
        try:
            client = await self._ensure_connected()
            if not client:
                return False
            await client.ping()
            return True
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        if self.redis:
            await self.redis.aclose()
            self.redis = None


_limiter_instance: Optional[RateLimiter] = None


async def get_rate_limiter(redis_url: Optional[str] = None) -> RateLimiter:
    """Get or create the rate limiter singleton."""
    global _limiter_instance

    if _limiter_instance is None:
        url = redis_url or get_settings().redis_url
        _limiter_instance = RateLimiter(redis_url=url)

    return _limiter_instance
