"""
Redis client initialization and connection management.

Redis holds the active role chosen by each signed-in user.
"""

import redis.asyncio as redis
from coop_backend.app.core.config import settings


# Create async Redis client
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Get Redis client instance.
    
    Used as a FastAPI dependency so tests can swap the client.
    """
    return redis_client


async def ping_redis(client=None) -> bool:
    """
    Test Redis connection (the shared client unless one is given).
    
    Returns:
        True if connection successful, False otherwise
    """
    try:
        return bool(await (client or redis_client).ping())
    except Exception:
        return False
