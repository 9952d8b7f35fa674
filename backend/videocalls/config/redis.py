from typing import Optional
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from videocalls.config.settings import settings

logger = logging.getLogger(__name__)

_redis: Optional[redis.Redis] = None


def _redis_url() -> str:
    if settings.REDIS_PASSWORD:
        return f"redis://:{settings.REDIS_PASSWORD}@{settings.REDIS_HOST}:{settings.REDIS_PORT}"
    return f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}"


async def get_redis() -> redis.Redis:
    """Lazily create the shared client used for notification publishing."""
    global _redis
    if _redis is None:
        _redis = redis.Redis.from_url(_redis_url(), decode_responses=True)
    return _redis


async def redis_is_up() -> bool:
    try:
        client = await get_redis()
        return bool(await client.ping())
    except RedisError as e:
        logger.warning(f"[Redis] Ping failed: {e}")
        return False


async def close_redis():
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None
