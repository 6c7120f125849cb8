"""
Redis caching service for the public venue catalogue.

What we cache:
  - The unscoped venue listing (``GET /venues`` for anyone who is not a
    venue owner), JSON-serialized under "venues:list:all".

Invalidation:
  - Any venue write (creation, availability change, review append)
    deletes every "venues:list:*" key.
  - TTL-based expiry as safety net (5 minutes).

Owner-scoped listings and venue detail are never cached: they are small
and must reflect the owner's own writes immediately.

Redis is advisory. Every Redis failure is logged and treated as a cache
miss so a Redis outage never fails a request.
"""

import json
from typing import Optional

import redis.asyncio as redis
from venue_booking.core.config import get_settings
from venue_booking.core.logging import get_logger
from venue_booking.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

VENUE_LIST_KEY = "venues:list:all"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            # Test connection
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cached_venues() -> Optional[list[dict]]:
    """Retrieve the cached public venue listing."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(VENUE_LIST_KEY)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=VENUE_LIST_KEY)
            return json.loads(data)
        logger.debug("cache_miss", key=VENUE_LIST_KEY)
    except Exception as e:
        logger.error("cache_get_error", key=VENUE_LIST_KEY, error=str(e))

    return None


async def set_cached_venues(data: list[dict]) -> None:
    """Cache the public venue listing with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(VENUE_LIST_KEY, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=VENUE_LIST_KEY, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=VENUE_LIST_KEY, error=str(e))


async def invalidate_venue_cache() -> None:
    """
    Invalidate all cached venue listings.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match="venues:list:*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
