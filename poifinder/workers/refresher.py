"""
Background Snapshot Refresher
=============================

Runs every ``SNAPSHOT_REFRESH_INTERVAL_SECONDS`` (default 300 s).

Consistency
-----------
* The import job bumps a **Redis version key** once it has finished writing
  ``points_of_interest``.  A cycle whose version matches what every store
  already holds does nothing.
* A reload reads every kind in one session and only then publishes the new
  snapshots.  A failed read leaves all stores exactly as they were.
* Publishing is a reference swap inside ``EntityStore.replace``; queries
  already running keep the snapshot they started with.

Algorithm per cycle
-------------------
1. Read the version marker from Redis.
2. Skip if unchanged and all stores are loaded (unless forced).  With no
   marker set at all, every cycle reloads.
3. Load all rows, group by kind.
4. Replace each kind's snapshot (an absent kind gets an empty snapshot,
   which queries report as ``DataUnavailable``).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping

from poifinder.config import settings
from poifinder.domain.enums import EntityKind
from poifinder.domain.store import EntityStore
from poifinder.infrastructure.database import async_session_factory
from poifinder.infrastructure.redis_client import get_redis, get_snapshot_version
from poifinder.infrastructure.repositories import PointOfInterestRepository

logger = logging.getLogger(__name__)

_task: asyncio.Task | None = None
_stop_event: asyncio.Event | None = None


# ── Public API ────────────────────────────────────────────────────────


async def start_refresh_loop(stores: Mapping[EntityKind, EntityStore]) -> None:
    global _task, _stop_event
    _stop_event = asyncio.Event()
    _task = asyncio.create_task(_loop(stores))
    logger.info(
        "Snapshot refresher started (interval=%ds)",
        settings.snapshot_refresh_interval_seconds,
    )


async def stop_refresh_loop() -> None:
    if _stop_event:
        _stop_event.set()
    if _task:
        _task.cancel()
        try:
            await _task
        except asyncio.CancelledError:
            pass
    logger.info("Snapshot refresher stopped")


# ── Internals ─────────────────────────────────────────────────────────


async def _loop(stores: Mapping[EntityKind, EntityStore]) -> None:
    """Periodic loop: sleep then run a refresh cycle.

    The first cycle comes one interval after start; the lifespan has just
    done the initial load.
    """
    assert _stop_event is not None
    while not _stop_event.is_set():
        # Wait for the interval or until stop is signalled
        try:
            await asyncio.wait_for(
                _stop_event.wait(),
                timeout=settings.snapshot_refresh_interval_seconds,
            )
            break
        except asyncio.TimeoutError:
            pass  # next cycle
        try:
            await run_refresh_cycle(stores)
        except Exception:
            logger.exception("Unhandled error in snapshot refresh cycle")


async def run_refresh_cycle(
    stores: Mapping[EntityKind, EntityStore], force: bool = False
) -> bool:
    """Execute one refresh cycle.  Returns True if snapshots were replaced."""
    redis = await get_redis()
    version = await get_snapshot_version(redis)

    up_to_date = all(
        store.is_loaded and store.version == version
        for store in stores.values()
    )
    if up_to_date and version is not None and not force:
        logger.debug("Snapshot version %s unchanged – skipping cycle", version)
        return False

    async with async_session_factory() as session:
        grouped = await PointOfInterestRepository(session).get_all_by_kind()

    for kind, store in stores.items():
        snap = store.replace(grouped.get(kind, ()), version=version)
        logger.info(
            "Loaded %d %s entities (version=%s)",
            len(snap.entities),
            kind.value,
            version,
        )
    return True
