"""
Redis client used for request rate limiting.
"""
from typing import Optional

import redis.asyncio as redis

from chatbot_studio.core.config import settings


class RedisClient:
    """Async Redis client holder."""

    _client: Optional[redis.Redis] = None

    @classmethod
    async def connect(cls) -> None:
        """Initialize Redis connection."""
        if cls._client is None:
            cls._client = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            # Verify connectivity
            await cls._client.ping()

    @classmethod
    async def close(cls) -> None:
        """Close Redis connection."""
        if cls._client is not None:
            await cls._client.close()
            cls._client = None

    @classmethod
    async def get_client(cls) -> redis.Redis:
        """Get Redis client instance."""
        if cls._client is None:
            await cls.connect()
        return cls._client

    @classmethod
    async def ping(cls) -> bool:
        client = await cls.get_client()
        return bool(await client.ping())
