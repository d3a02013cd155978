"""
Cost-Benefit Model
==================

Formula
-------
  travel_cost   = round(2 x distance_km / fuel_efficiency x average_price)
  total_savings = (average_price - price) x refuel_liters
  net_savings   = total_savings - travel_cost

* **fuel_efficiency** -- 12 km per litre
* **refuel_liters**   -- a fixed 40 L fill
* ``round`` is half-up, so 2.5 -> 3 the same way prices are displayed.

``net_savings`` may be negative; that is an answer, not an error.

Complexity: O(1) per evaluation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .entities import Entity

FUEL_EFFICIENCY_KM_PER_LITER = 12.0
FIXED_REFUEL_LITERS = 40.0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class CostBenefit:
    total_savings: float
    travel_cost: int
    net_savings: float
    is_worth_it: bool


class CostBenefitModel:
    """Estimates whether a detour to a cheaper entity pays for itself."""

    def __init__(
        self,
        fuel_efficiency_km_per_liter: float = FUEL_EFFICIENCY_KM_PER_LITER,
        fixed_refuel_liters: float = FIXED_REFUEL_LITERS,
    ):
        self.fuel_efficiency_km_per_liter = fuel_efficiency_km_per_liter
        self.fixed_refuel_liters = fixed_refuel_liters

    def travel_cost(self, distance_m: float, average_price: float) -> int:
        round_trip_km = distance_m / 1000 * 2
        liters = round_trip_km / self.fuel_efficiency_km_per_liter
        return round_half_up(liters * average_price)

    def evaluate(
        self, entity: Entity, average_price: float, distance_m: float
    ) -> CostBenefit:
        if entity.price is None:
            raise ValueError(f"Entity {entity.id!r} has no price to compare")

        travel_cost = self.travel_cost(distance_m, average_price)
        total_savings = (average_price - entity.price) * self.fixed_refuel_liters
        net_savings = total_savings - travel_cost
        return CostBenefit(
            total_savings=total_savings,
            travel_cost=travel_cost,
            net_savings=net_savings,
            is_worth_it=net_savings > 0,
        )
