"""
Redis client initialization and connection management.

The client is used for token revocation.
"""

import redis.asyncio as redis
from egzit.app.core.config import settings


redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


def get_redis():
    """Return the module-level client (tests swap it for an in-memory stand-in)."""
    return redis_client


async def ping_redis() -> bool:
    try:
        return await get_redis().ping()
    except (redis.RedisError, OSError):
        return False
