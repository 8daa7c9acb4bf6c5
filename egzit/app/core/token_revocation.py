"""
Token Revocation System using Redis.

Logged-out tokens are blacklisted until they would have expired anyway.
Redis outages fail open: the request proceeds and a warning is logged.
"""

import logging

from redis.exceptions import RedisError

from egzit.app.core.redis_client import get_redis
from egzit.app.core.config import settings

logger = logging.getLogger("egzit.auth")

TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        ttl_seconds = settings.access_token_expire_minutes * 60
        await get_redis().setex(f"{TOKEN_BLACKLIST_PREFIX}{token}", ttl_seconds, str(user_id))
        return True
    except (RedisError, OSError) as e:
        logger.warning("Token revocation failed", extra={"user_id": user_id, "error": str(e)})
        return False


async def is_token_revoked(token: str) -> bool:
    try:
        exists = await get_redis().exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except (RedisError, OSError) as e:
        logger.warning("Token revocation check failed", extra={"error": str(e)})
        return False

