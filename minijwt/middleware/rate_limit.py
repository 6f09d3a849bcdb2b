# minijwt/middleware/rate_limit.py
from __future__ import annotations

import logging
import time

from fastapi import Depends, HTTPException, Request, status
from redis.asyncio import Redis

from minijwt.config import Settings, get_settings

log = logging.getLogger(__name__)

# In-memory store: key -> (count, window_start_epoch_seconds)
_inmem: dict[str, tuple[int, float]] = {}

# sweep expired windows once the store grows past this many keys
_SWEEP_THRESHOLD = 1024


def _inmem_hit(key: str, limit: int, window_seconds: int) -> bool:
    """Count one request against ``key``; True once the window's limit is exceeded."""
    now = time.time()
    if len(_inmem) >= _SWEEP_THRESHOLD:
        _sweep(now, window_seconds)
    count, start = _inmem.get(key, (0, now))
    if now - start >= window_seconds:
        count, start = 0, now
    count += 1
    _inmem[key] = (count, start)
    return count > limit


def _sweep(now: float, window_seconds: int) -> None:
    stale = [key for key, (_, start) in _inmem.items() if now - start >= window_seconds]
    for key in stale:
        del _inmem[key]


def get_redis(url: str | None) -> Redis | None:
    if url:
        return Redis.from_url(url, encoding="utf-8", decode_responses=True)
    return None


async def _redis_hit(r: Redis, key: str, limit: int, window_seconds: int) -> bool:
    try:
        pipe = r.pipeline()
        pipe.incr(key)
        pipe.expire(key, window_seconds)
        count, _ = await pipe.execute()
    finally:
        await r.aclose()
    return int(count) > limit


async def rate_limit(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """
    Fixed-window limit per client host on the routes that check signatures.
    Uses Redis when REDIS_URL is configured, otherwise process memory.
    """
    client = request.client.host if request.client else "anon"
    key = f"rl:{client}"
    limit = settings.RATE_LIMIT_REQUESTS
    window = settings.RATE_LIMIT_WINDOW_SECONDS

    r = get_redis(settings.REDIS_URL)
    if r is None:
        exceeded = _inmem_hit(key, limit, window)
    else:
        exceeded = await _redis_hit(r, key, limit, window)

    if exceeded:
        log.warning(f"Rate limit exceeded for {client}")
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Rate limit exceeded")
