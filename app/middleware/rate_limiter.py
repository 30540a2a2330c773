"""
Rate Limiter - Redis sliding-window request limits.

Scopes:
- ``user``: authenticated caller (keyed by email)
- ``ip``: client address
- ``token``: token issuance per IP
- ``payment``: payment-intent creation and contact requests per caller

Requests are allowed when Redis is unavailable if ``RATE_LIMIT_FAIL_OPEN``
is set.

Usage:
    allowed, info = await rate_limiter.check_scope("payment", caller.email)
    if not allowed:
        raise HTTPException(429, detail="Rate limit exceeded")
"""

import time

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.services.redis_client import RedisClient, redis_client

logger = get_logger(__name__)

SCOPE_LIMIT_KEYS = {
    "user": "user_per_minute",
    "ip": "ip_per_minute",
    "token": "token_per_minute",
    "payment": "payment_per_minute",
}


class RateLimiter:
    """
    Sliding window over a Redis sorted set of request timestamps.

    The check-and-add runs as one Lua script so concurrent requests for the
    same key cannot both take the last slot.
    """

    # Returns: {allowed (0 or 1), current_count, oldest_timestamp or 0}
    RATE_LIMIT_LUA_SCRIPT = """
    local key = KEYS[1]
    local limit = tonumber(ARGV[1])
    local window_seconds = tonumber(ARGV[2])
    local current_time = tonumber(ARGV[3])
    local unique_id = ARGV[4]

    redis.call('ZREMRANGEBYSCORE', key, 0, current_time - window_seconds)

    local current_count = redis.call('ZCARD', key)
    if current_count >= limit then
        local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
        local oldest_timestamp = 0
        if #oldest > 0 then
            oldest_timestamp = tonumber(oldest[2])
        end
        return {0, current_count, oldest_timestamp}
    end

    redis.call('ZADD', key, current_time, unique_id)
    redis.call('EXPIRE', key, window_seconds * 2)
    return {1, current_count + 1, 0}
    """

    def __init__(
        self,
        redis: RedisClient,
        default_limit: int = 60,
        window_seconds: int = 60,
        fail_open: bool = True,
    ):
        self.redis = redis
        self.default_limit = default_limit
        self.window_seconds = window_seconds
        self.fail_open = fail_open

    async def check_rate_limit(
        self,
        key: str,
        limit: int | None = None,
        window_seconds: int | None = None,
    ) -> tuple[bool, dict]:
        """
        Count this request against ``key`` and report whether it may proceed.

        Returns:
            Tuple of (allowed, info) where info carries limit, remaining and
            retry_after (seconds, only when blocked).
        """
        limit = limit or self.default_limit
        window_seconds = window_seconds or self.window_seconds
        current_time = int(time.time())

        client = self.redis.client
        if client is None:
            logger.warning("Redis not initialized for rate limiting", fail_open=self.fail_open)
            return self._unavailable(limit, "redis_not_initialized")

        try:
            result = await client.eval(
                self.RATE_LIMIT_LUA_SCRIPT,
                1,
                f"ratelimit:{key}",
                limit,
                window_seconds,
                current_time,
                f"{current_time}:{time.time_ns()}",
            )
        except Exception as e:
            logger.error(
                "Rate limiter Redis error",
                error=str(e),
                error_type=type(e).__name__,
                key=key,
                limit=limit,
            )
            return self._unavailable(limit, "rate_limiter_error")

        allowed = bool(result[0])
        current_count = int(result[1])
        oldest_timestamp = int(result[2]) if result[2] else 0

        if not allowed:
            if oldest_timestamp > 0:
                retry_after = max(1, (oldest_timestamp + window_seconds) - current_time)
            else:
                retry_after = window_seconds
            return False, self._create_info_dict(
                allowed=False,
                limit=limit,
                remaining=0,
                retry_after=retry_after,
                window_seconds=window_seconds,
            )

        return True, self._create_info_dict(
            allowed=True,
            limit=limit,
            remaining=max(0, limit - current_count),
            window_seconds=window_seconds,
        )

    async def check_scope(self, scope: str, identifier: str, limit: int | None = None) -> tuple[bool, dict]:
        """Check ``identifier`` against the configured per-minute limit for ``scope``."""
        if limit is None:
            limit = settings.get_rate_limits()[SCOPE_LIMIT_KEYS[scope]]
        return await self.check_rate_limit(
            key=f"{scope}:{identifier}",
            limit=limit,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )

    async def check_user_rate_limit(self, email: str, limit: int | None = None) -> tuple[bool, dict]:
        return await self.check_scope("user", email, limit)

    async def check_ip_rate_limit(self, ip_address: str, limit: int | None = None) -> tuple[bool, dict]:
        return await self.check_scope("ip", ip_address, limit)

    def _unavailable(self, limit: int, error: str) -> tuple[bool, dict]:
        if self.fail_open:
            return True, self._create_info_dict(allowed=True, limit=limit, remaining=limit, error=error)
        return False, self._create_info_dict(allowed=False, limit=limit, remaining=0, error=error)

    @staticmethod
    def _create_info_dict(
        allowed: bool,
        limit: int,
        remaining: int,
        retry_after: int | None = None,
        window_seconds: int | None = None,
        error: str | None = None,
    ) -> dict:
        info = {
            "allowed": allowed,
            "limit": limit,
            "remaining": remaining,
            "retry_after": retry_after,
        }
        if window_seconds is not None:
            info["window_seconds"] = window_seconds
        if error:
            info["error"] = error
        return info


# Global singleton
rate_limiter = RateLimiter(
    redis_client,
    default_limit=settings.RATE_LIMIT_USER_PER_MINUTE,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    fail_open=settings.RATE_LIMIT_FAIL_OPEN,
)
