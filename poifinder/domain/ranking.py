"""
Ranking Engine
==============

Orders the output of a nearby query under one of three modes.

Ordering rules
--------------
* **PRICE**    -- price asc, then distance asc.  Unpriced entities dropped.
* **DISTANCE** -- distance asc, then price asc; unpriced sink to the end of
  their distance tie.  Nothing is dropped.
* **VALUE**    -- net savings desc (see ``cost_benefit``).  Unpriced dropped.

``sorted`` is stable, so entries equal on every key keep their input order
and re-ranking the same input always yields the same list.

``average_price`` is the plain mean over the priced inputs (0 when none are
priced); with no prices VALUE mode is simply empty.

Complexity: O(n log n).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .cost_benefit import CostBenefit, CostBenefitModel
from .entities import NearbyResult
from .enums import RankMode


@dataclass(frozen=True)
class RankedEntry:
    result: NearbyResult
    savings: Optional[CostBenefit] = None

    @property
    def entity(self):
        return self.result.entity

    @property
    def distance_m(self) -> float:
        return self.result.distance_m


@dataclass(frozen=True)
class RankedList:
    mode: RankMode
    average_price: float = 0.0
    entries: list[RankedEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def best(self) -> Optional[RankedEntry]:
        """Winner under the active mode, if any."""
        return self.entries[0] if self.entries else None


def average_price(results: Sequence[NearbyResult]) -> float:
    prices = [r.entity.price for r in results if r.entity.price is not None]
    if not prices:
        return 0.0
    return sum(prices) / len(prices)


def _price_key(entry: RankedEntry):
    return (entry.entity.price, entry.distance_m)


def _distance_key(entry: RankedEntry):
    price = entry.entity.price
    return (entry.distance_m, price is None, price if price is not None else 0.0)


def _value_key(entry: RankedEntry):
    return -entry.savings.net_savings


class RankingEngine:
    """High-level API used by the HTTP layer."""

    def __init__(self, model: Optional[CostBenefitModel] = None):
        self.model = model or CostBenefitModel()

    def rank(
        self, results: Sequence[NearbyResult], mode: RankMode
    ) -> RankedList:
        mode = RankMode(mode)  # ValueError for unknown modes
        avg = average_price(results)
        entries = [
            RankedEntry(
                result=r,
                savings=(
                    self.model.evaluate(r.entity, avg, r.distance_m)
                    if r.entity.price is not None
                    else None
                ),
            )
            for r in results
        ]

        if mode is RankMode.PRICE:
            priced = [e for e in entries if e.savings is not None]
            ordered = sorted(priced, key=_price_key)
        elif mode is RankMode.DISTANCE:
            ordered = sorted(entries, key=_distance_key)
        else:
            priced = [e for e in entries if e.savings is not None]
            ordered = sorted(priced, key=_value_key)

        return RankedList(mode=mode, average_price=avg, entries=ordered)


def rank(results: Sequence[NearbyResult], mode: RankMode) -> RankedList:
    """Rank with the default cost-benefit parameters."""
    return RankingEngine().rank(results, mode)
