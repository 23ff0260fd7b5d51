"""
Fixed-window rate limiting for the public authentication endpoints.
Counters live in Redis when REDIS_URL is configured and in process memory otherwise.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

from . import config

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None
_redis_unavailable = False

# Format: {key: (count, reset_time)}
memory_counters: dict[str, tuple[int, int]] = {}
counters_lock = Lock()
COUNTER_CLEANUP_INTERVAL = 60
last_cleanup_time = 0


def get_redis_client() -> Optional[redis.Redis]:
    """Get or create the Redis client; None when Redis is not configured or unreachable"""
    global redis_client, _redis_unavailable

    if redis_client is not None or _redis_unavailable:
        return redis_client

    redis_url = config.REDIS_URL
    if not redis_url:
        _redis_unavailable = True
        logger.info("REDIS_URL not set - rate limiting uses in-memory counters")
        return None

    try:
        client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        client.ping()
        redis_client = client
        logger.info("Redis connected successfully for rate limiting")
    except redis.RedisError as e:
        _redis_unavailable = True
        logger.error(f"❌ Failed to connect to Redis: {str(e)}")
        logger.warning("⚠️ Falling back to in-memory rate limit counters")

    return redis_client


def evict_expired_counters(now: int) -> None:
    """Drop in-memory counters whose window has ended, at most once per interval"""
    global last_cleanup_time

    if now - last_cleanup_time < COUNTER_CLEANUP_INTERVAL:
        return

    with counters_lock:
        expired = [k for k, (_, reset_time) in memory_counters.items() if now >= reset_time]
        for k in expired:
            del memory_counters[k]

    if expired:
        logger.debug(f"🧹 Evicted {len(expired)} expired rate limit counters")
    last_cleanup_time = now


def _hit_memory(key: str, window_seconds: int) -> tuple[int, int]:
    now = int(time.time())
    evict_expired_counters(now)
    with counters_lock:
        count, reset_time = memory_counters.get(key, (0, now + window_seconds))
        if now >= reset_time:
            count, reset_time = 0, now + window_seconds
        count += 1
        memory_counters[key] = (count, reset_time)
    return count, max(0, reset_time - now)


def _hit_redis(client: redis.Redis, key: str, window_seconds: int) -> tuple[int, int]:
    pipe = client.pipeline()
    pipe.incr(key)
    pipe.ttl(key)
    count, ttl = pipe.execute()
    if ttl is None or ttl < 0:
        client.expire(key, window_seconds)
        ttl = window_seconds
    return int(count), int(ttl)


def check_rate_limit(key: str, limit: int, window_seconds: int) -> tuple[bool, int, int]:
    """
    Count one request against `key`.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    client = get_redis_client()
    if client is not None:
        try:
            count, ttl = _hit_redis(client, key, window_seconds)
            return count <= limit, count, ttl
        except redis.RedisError as e:
            logger.warning(f"⚠️ Redis rate limit check failed, using memory: {e}")

    count, ttl = _hit_memory(key, window_seconds)
    return count <= limit, count, ttl


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a per-IP rate limiter dependency

    Example usage:
        rate_limit_login = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(rate_limit_login)):
            ...
    """

    async def rate_limiter(request: Request):
        if not config.RATE_LIMIT_ENABLED:
            return

        key = f"{key_prefix}:{client_ip(request)}"
        is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds)
        if not is_allowed:
            logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit} requests used")
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                headers={"Retry-After": str(ttl)},
            )

    return rate_limiter
