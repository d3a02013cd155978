"""Unit tests for the cost-benefit model."""

import pytest

from poifinder.domain.cost_benefit import CostBenefitModel, round_half_up
from tests.conftest import make_entity


class TestRoundHalfUp:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(124.5) == 125

    def test_below_half_rounds_down(self):
        assert round_half_up(2.4999) == 2


class TestCostBenefitModel:
    def setup_method(self):
        self.model = CostBenefitModel()

    def test_defaults(self):
        assert self.model.fuel_efficiency_km_per_liter == 12
        assert self.model.fixed_refuel_liters == 40

    def test_worked_example(self):
        # 10 km away -> 20 km round trip -> 1.667 L at 1500 = 2500
        result = self.model.evaluate(make_entity("X", 1300), 1500, 10_000)
        assert result.travel_cost == 2500
        assert result.total_savings == 8000
        assert result.net_savings == 5500
        assert result.is_worth_it is True

    def test_more_expensive_than_average_loses_money(self):
        result = self.model.evaluate(make_entity("X", 1600), 1500, 500)
        assert result.total_savings < 0
        assert result.is_worth_it is False

    def test_cheap_but_far_is_not_worth_it(self):
        # 100 * 40 = 4000 saved, 60 km round trip costs 7500
        result = self.model.evaluate(make_entity("X", 1400), 1500, 30_000)
        assert result.net_savings == 4000 - 7500
        assert not result.is_worth_it

    def test_zero_distance_has_no_travel_cost(self):
        result = self.model.evaluate(make_entity("X", 1450), 1500, 0)
        assert result.travel_cost == 0
        assert result.net_savings == 2000

    def test_break_even_is_not_worth_it(self):
        result = self.model.evaluate(make_entity("X", 1500), 1500, 0)
        assert result.net_savings == 0
        assert result.is_worth_it is False

    def test_travel_cost_non_negative(self):
        for distance_m in (0, 1, 999, 25_000):
            assert self.model.travel_cost(distance_m, 1500) >= 0

    def test_custom_parameters(self):
        model = CostBenefitModel(fuel_efficiency_km_per_liter=10, fixed_refuel_liters=50)
        result = model.evaluate(make_entity("X", 1400), 1500, 10_000)
        assert result.travel_cost == 3000  # 20 km / 10 km/L * 1500
        assert result.total_savings == 5000

    def test_unpriced_entity_rejected(self):
        with pytest.raises(ValueError, match="no price"):
            self.model.evaluate(make_entity("X", None), 1500, 100)
