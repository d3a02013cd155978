"""FastAPI dependency injection helpers."""

from fastapi import Request

from poifinder.config import settings
from poifinder.domain.cost_benefit import CostBenefitModel
from poifinder.domain.enums import EntityKind
from poifinder.domain.ranking import RankingEngine
from poifinder.domain.store import EntityStore


def get_stores(request: Request) -> dict[EntityKind, EntityStore]:
    """Per-kind entity stores created by the app factory."""
    return request.app.state.stores


def get_ranking_engine() -> RankingEngine:
    return RankingEngine(
        CostBenefitModel(
            fuel_efficiency_km_per_liter=settings.fuel_efficiency_km_per_liter,
            fixed_refuel_liters=settings.fixed_refuel_liters,
        )
    )
