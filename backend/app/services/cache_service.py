"""
Redis caching service for per-room booking lists.

CACHING STRATEGY
================

What we cache:
  - The serialized booking list of one room
  - Cache key pattern: "bookings:room:{room_id}"

Why:
  - The booking form asks for a room's bookings every time it opens, to
    grey out taken dates
  - A room's list only changes when a booking for that room is created

Invalidation strategy:
  - On booking creation: delete that room's key (a single DEL, no SCAN)
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

Redis is optional. With REDIS_ENABLED=False, or when the server can't be
reached, every function here degrades to a no-op / cache miss and the
database answers instead. Cache errors are logged, never raised.
"""

import json
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        try:
            await client.ping()
        except RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            await client.aclose()
            return None
        _redis_client = client
        logger.info("redis_connected", url=settings.REDIS_URL)

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _room_bookings_key(room_id: int) -> str:
    return f"bookings:room:{room_id}"


async def get_cached_room_bookings(room_id: int) -> Optional[list[dict]]:
    """Cached booking list for a room, or None on a miss."""
    client = await get_redis()
    if not client:
        return None

    key = _room_bookings_key(room_id)
    try:
        data = await client.get(key)
    except RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        record_cache_operation("get", "error")
        return None

    if data is None:
        logger.debug("cache_miss", key=key)
        record_cache_operation("get", "miss")
        return None

    logger.debug("cache_hit", key=key)
    record_cache_operation("get", "hit")
    return json.loads(data)


async def set_cached_room_bookings(room_id: int, bookings: list[dict]) -> None:
    """Cache a room's booking list with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _room_bookings_key(room_id)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(bookings, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
        record_cache_operation("set", "ok")
    except RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))
        record_cache_operation("set", "error")


async def invalidate_room_bookings(room_id: int) -> None:
    """Drop a room's cached booking list after a booking was added to it."""
    client = await get_redis()
    if not client:
        return

    key = _room_bookings_key(room_id)
    try:
        await client.delete(key)
        logger.info("cache_invalidated", key=key)
        record_cache_operation("invalidate", "ok")
    except RedisError as e:
        logger.error("cache_invalidation_error", key=key, error=str(e))
        record_cache_operation("invalidate", "error")


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
