"""
Redis client initialization.

Redis holds short-lived dispatch locks (one notification run per trip).
"""

import redis.asyncio as redis
from shuttle_backend.app.core.config import settings


redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """FastAPI dependency returning the shared Redis client."""
    return redis_client
