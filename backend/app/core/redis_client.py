"""Redis client for caching stock quotes."""

import json
import logging
from typing import Optional

import redis.asyncio as aioredis

from app.core.config import settings

logger = logging.getLogger(__name__)

# Async Redis client singleton
_redis: Optional[aioredis.Redis] = None


async def get_redis() -> aioredis.Redis:
    global _redis
    if _redis is None:
        _redis = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=2,
            socket_connect_timeout=2,
        )
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


async def get_cached_json(key: str) -> Optional[dict]:
    """Get a cached JSON document, None on miss or Redis failure."""
    try:
        r = await get_redis()
        data = await r.get(key)
        if data:
            return json.loads(data)
    except Exception as e:
        logger.debug("Redis cache miss for %s: %s", key, e)
    return None


async def cache_json(key: str, value: dict, ttl: int) -> None:
    """Cache a JSON document with a TTL; failures are logged and ignored."""
    try:
        r = await get_redis()
        await r.setex(key, ttl, json.dumps(value, default=str))
    except Exception as e:
        logger.debug("Redis cache write failed for %s: %s", key, e)
