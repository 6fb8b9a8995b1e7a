"""
Redis client initialization and connection management.

The client is created once in the application lifespan and kept on
`app.state.redis`.
"""

import logging

import redis.asyncio as redis
from fastapi import Request

from transport_admin.app.core.config import Settings

logger = logging.getLogger("transport_admin.redis")


def create_redis_client(settings: Settings):
    """Create async Redis client from settings."""
    return redis.from_url(
        settings.redis_url,
        decode_responses=settings.redis_decode_responses,
    )


async def get_redis(request: Request):
    """
    Get Redis client instance.

    FastAPI dependency.
    """
    return request.app.state.redis


async def ping_redis(client) -> bool:
    """
    Test Redis connection.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        return await client.ping()
    except Exception as exc:
        logger.warning("Redis ping failed: %s", exc)
        return False
