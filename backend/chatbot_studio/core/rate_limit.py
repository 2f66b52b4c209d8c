"""
Rate limiting for the public chat endpoint using Redis.
"""
import logging
import time
from typing import Optional

from fastapi import Request, HTTPException, status

from chatbot_studio.core.redis import RedisClient
from chatbot_studio.core.config import settings

logger = logging.getLogger(__name__)


class RateLimitExceeded(HTTPException):
    """Rate limit exceeded exception."""

    def __init__(self, retry_after: int = 60):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many messages. Please slow down.",
            headers={"Retry-After": str(retry_after)},
        )


class RateLimiter:
    """Fixed-window rate limiter using Redis counters."""

    def __init__(
        self,
        requests_per_minute: int = 30,
        requests_per_hour: int = 500,
        prefix: str = "rate_limit",
    ):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.prefix = prefix

    def _get_client_id(self, request: Request) -> str:
        """Get client identifier from request."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
        else:
            client_ip = request.client.host if request.client else "unknown"

        return f"ip:{client_ip}"

    async def is_allowed(self, request: Request) -> tuple[bool, Optional[int]]:
        """
        Check if request is allowed.

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
        """
        client_id = self._get_client_id(request)
        current_time = int(time.time())

        try:
            redis = await RedisClient.get_client()
            if not redis:
                # If Redis is unavailable, allow the request
                logger.warning("Redis unavailable for rate limiting")
                return True, None

            minute_key = f"{self.prefix}:{client_id}:minute:{current_time // 60}"
            minute_count = await redis.incr(minute_key)

            if minute_count == 1:
                await redis.expire(minute_key, 60)

            if minute_count > self.requests_per_minute:
                retry_after = 60 - (current_time % 60)
                return False, retry_after

            hour_key = f"{self.prefix}:{client_id}:hour:{current_time // 3600}"
            hour_count = await redis.incr(hour_key)

            if hour_count == 1:
                await redis.expire(hour_key, 3600)

            if hour_count > self.requests_per_hour:
                retry_after = 3600 - (current_time % 3600)
                return False, retry_after

            return True, None

        except Exception as e:
            logger.error(f"Rate limit check failed: {e}")
            # Allow request if rate limiting fails
            return True, None


_chat_rate_limiter: Optional[RateLimiter] = None


def get_chat_rate_limiter() -> RateLimiter:
    """Get or create the chat rate limiter instance."""
    global _chat_rate_limiter
    if _chat_rate_limiter is None:
        _chat_rate_limiter = RateLimiter(
            requests_per_minute=settings.chat_rate_limit_per_minute,
            requests_per_hour=settings.chat_rate_limit_per_hour,
            prefix="rate_limit:chat",
        )
    return _chat_rate_limiter


async def chat_rate_limit(request: Request) -> None:
    """Route dependency enforcing the chat rate limit."""
    if not settings.rate_limit_enabled:
        return

    is_allowed, retry_after = await get_chat_rate_limiter().is_allowed(request)
    if not is_allowed:
        logger.warning(
            f"Rate limit exceeded for {request.url.path} - "
            f"retry after {retry_after}s"
        )
        raise RateLimitExceeded(retry_after=retry_after or 60)
