"""
Redis async connection pool and the snapshot version marker.

The import job bumps ``settings.snapshot_version_key`` after it finishes
writing ``points_of_interest``; every API process polls the key and reloads
its in-memory snapshot only when the value changes.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as aioredis

from poifinder.config import settings

_pool = aioredis.ConnectionPool.from_url(
    settings.redis_url, decode_responses=True
)


async def get_redis() -> aioredis.Redis:
    """Return a Redis client backed by the shared connection pool."""
    return aioredis.Redis(connection_pool=_pool)


async def get_snapshot_version(client: aioredis.Redis) -> Optional[str]:
    value = await client.get(settings.snapshot_version_key)
    return str(value) if value is not None else None


async def bump_snapshot_version(client: aioredis.Redis) -> str:
    """Atomically increment the marker and return the new version."""
    return str(await client.incr(settings.snapshot_version_key))
