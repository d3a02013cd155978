"""
Entity Store -- read-only snapshot of one kind of point of interest.

A snapshot is built completely off to the side and then published with a
single attribute assignment, so a query that already holds a snapshot keeps
reading it even while the refresher swaps in a new one.  Nothing in the
query path mutates a snapshot; no locking is needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from .entities import Entity
from .enums import EntityKind
from .spatial import CellIndex


class DataUnavailable(Exception):
    """Raised when the entity snapshot is not loaded (or loaded empty)."""

    def __init__(self, kind: EntityKind):
        self.kind = kind
        super().__init__(f"{kind.value} data is not available yet")


@dataclass(frozen=True)
class EntitySnapshot:
    entities: tuple[Entity, ...]
    index: CellIndex
    version: Optional[str] = None
    loaded_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class EntityStore:
    def __init__(
        self,
        kind: EntityKind,
        h3_resolution: int = 7,
        h3_max_ring: int = 30,
    ):
        self.kind = kind
        self.h3_resolution = h3_resolution
        self.h3_max_ring = h3_max_ring
        self._snapshot: Optional[EntitySnapshot] = None

    # ── Read side ─────────────────────────────────────────────────

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def version(self) -> Optional[str]:
        return self._snapshot.version if self._snapshot else None

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._snapshot.loaded_at if self._snapshot else None

    def __len__(self) -> int:
        return len(self._snapshot.entities) if self._snapshot else 0

    def snapshot(self) -> EntitySnapshot:
        """Current snapshot; raises ``DataUnavailable`` if missing or empty."""
        snap = self._snapshot
        if snap is None or not snap.entities:
            raise DataUnavailable(self.kind)
        return snap

    def all_entities(self) -> tuple[Entity, ...]:
        return self.snapshot().entities

    # ── Write side (refresher only) ───────────────────────────────

    def replace(
        self, entities: Iterable[Entity], version: Optional[str] = None
    ) -> EntitySnapshot:
        """Build a new snapshot and publish it atomically."""
        frozen = tuple(entities)
        for entity in frozen:
            if entity.kind != self.kind:
                raise ValueError(
                    f"Entity {entity.id!r} is {entity.kind.value}, "
                    f"store holds {self.kind.value}"
                )
        snap = EntitySnapshot(
            entities=frozen,
            index=CellIndex(frozen, self.h3_resolution, self.h3_max_ring),
            version=version,
        )
        self._snapshot = snap
        return snap


def build_stores(
    h3_resolution: int = 7, h3_max_ring: int = 30
) -> dict[EntityKind, EntityStore]:
    """One empty store per entity kind."""
    return {
        kind: EntityStore(kind, h3_resolution, h3_max_ring)
        for kind in EntityKind
    }
