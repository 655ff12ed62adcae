"""Process-wide async Redis client, created on first use."""

from __future__ import annotations

from typing import Optional

import redis.asyncio as aioredis

from app.core.config import settings
from app.core.logging import get_logger


logger = get_logger(__name__)

_client: Optional[aioredis.Redis] = None

PROBE_KEY = "test_key"
PROBE_VALUE = "Redis is working!"


async def get_redis_client() -> aioredis.Redis:
    global _client
    if _client is None:
        client = aioredis.from_url(str(settings.redis.dsn), decode_responses=True)
        # Published before the first await so concurrent callers share it.
        _client = client
        try:
            await client.ping()
        except Exception:
            if _client is client:
                _client = None
            await client.aclose()
            raise
        logger.info("Redis connected successfully")
    return _client


async def close_redis_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def probe() -> None:
    """Write the fixed diagnostic key; raises on any connection problem."""
    client = await get_redis_client()
    await client.set(PROBE_KEY, PROBE_VALUE)
