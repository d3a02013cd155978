"""Unit tests for the ranking engine (price / distance / value modes)."""

import pytest

from poifinder.domain.cost_benefit import CostBenefitModel
from poifinder.domain.entities import NearbyResult
from poifinder.domain.enums import EntityKind, FuelProduct, RankMode
from poifinder.domain.nearby import NearbyQueryEngine, select_product
from poifinder.domain.ranking import RankingEngine, average_price, rank
from poifinder.domain.store import EntityStore
from poifinder.infrastructure.normalize import normalize_record
from tests.conftest import SEOUL_CITY_HALL, make_entity, nearby


def _ids(ranked):
    return [e.entity.id for e in ranked]


class TestScenarios:
    def test_price_mode_within_one_km(self, scenario_entities):
        store = EntityStore(EntityKind.FUEL_STATION)
        store.replace(scenario_entities)
        results = NearbyQueryEngine(store).find_nearby(SEOUL_CITY_HALL, 1000)
        ranked = rank(results, RankMode.PRICE)
        assert _ids(ranked) == ["B", "A"]
        assert ranked.best.entity.id == "B"

    def test_distance_mode_within_two_km(self):
        results = [nearby("B", 1400, 900.0), nearby("A", 1500, 0.0)]
        assert _ids(rank(results, RankMode.DISTANCE)) == ["A", "B"]

    def test_value_mode_prefers_close_over_far_and_cheap(self):
        results = [
            nearby("FAR_CHEAP", 1300, 30_000),
            nearby("CLOSE", 1450, 500),
            nearby("PRICEY", 1750, 1000),
        ]
        ranked = rank(results, RankMode.VALUE)
        assert ranked.average_price == 1500
        assert _ids(ranked) == ["CLOSE", "FAR_CHEAP", "PRICEY"]
        assert ranked.entries[0].savings.net_savings == 2000 - 125
        assert ranked.entries[1].savings.net_savings == 8000 - 7500

    def test_unpriced_excluded_from_price_and_average(self):
        results = [nearby("P1", 1500, 100), nearby("NONE", None, 50), nearby("P2", 1300, 300)]
        ranked = rank(results, RankMode.PRICE)
        assert _ids(ranked) == ["P2", "P1"]
        assert ranked.average_price == 1400


class TestPriceMode:
    def test_equal_price_breaks_tie_by_distance(self):
        results = [nearby("FAR", 1500, 800), nearby("NEAR", 1500, 200)]
        assert _ids(rank(results, RankMode.PRICE)) == ["NEAR", "FAR"]

    def test_full_tie_keeps_input_order(self):
        results = [nearby("X", 1500, 300), nearby("Y", 1500, 300), nearby("Z", 1500, 300)]
        assert _ids(rank(results, RankMode.PRICE)) == ["X", "Y", "Z"]

    def test_free_is_cheapest(self):
        results = [nearby("PAID", 300, 100), nearby("FREE", 0, 400)]
        assert _ids(rank(results, RankMode.PRICE)) == ["FREE", "PAID"]


class TestDistanceMode:
    def test_equal_distance_breaks_tie_by_price(self):
        results = [nearby("DEAR", 1700, 400), nearby("CHEAP", 1500, 400)]
        assert _ids(rank(results, RankMode.DISTANCE)) == ["CHEAP", "DEAR"]

    def test_unpriced_sinks_within_tie(self):
        results = [nearby("NONE", None, 400), nearby("PRICED", 1900, 400), nearby("CLOSE", None, 10)]
        assert _ids(rank(results, RankMode.DISTANCE)) == ["CLOSE", "PRICED", "NONE"]

    def test_unpriced_kept_without_savings(self):
        ranked = rank([nearby("NONE", None, 10)], RankMode.DISTANCE)
        assert len(ranked) == 1
        assert ranked.entries[0].savings is None


class TestValueMode:
    def test_no_prices_is_empty(self):
        ranked = rank([nearby("N1", None, 10), nearby("N2", None, 20)], RankMode.VALUE)
        assert len(ranked) == 0
        assert ranked.average_price == 0
        assert ranked.best is None

    def test_equal_savings_keep_input_order(self):
        results = [nearby("X", 1500, 0), nearby("Y", 1500, 0)]
        assert _ids(rank(results, RankMode.VALUE)) == ["X", "Y"]

    def test_sorted_by_descending_net_savings(self):
        results = [nearby(str(i), 1400 + 20 * i, 100 * i) for i in range(8)]
        ranked = rank(results, RankMode.VALUE)
        savings = [e.savings.net_savings for e in ranked]
        assert savings == sorted(savings, reverse=True)

    def test_custom_model_parameters(self):
        engine = RankingEngine(CostBenefitModel(fixed_refuel_liters=10))
        ranked = engine.rank([nearby("X", 1400, 0), nearby("Y", 1600, 0)], RankMode.VALUE)
        assert ranked.entries[0].savings.total_savings == 1000


class TestGeneral:
    def test_empty_input(self):
        for mode in RankMode:
            ranked = rank([], mode)
            assert len(ranked) == 0
            assert ranked.average_price == 0
            assert ranked.best is None

    @pytest.mark.parametrize("mode", list(RankMode))
    def test_idempotent(self, mode):
        results = [nearby(str(i), (1500 + (i * 37) % 200) if i % 3 else None, (i * 53) % 700) for i in range(12)]
        assert _ids(rank(results, mode)) == _ids(rank(results, mode))

    def test_average_price_ignores_unpriced(self):
        assert average_price([nearby("A", 1000, 0), nearby("B", None, 0), nearby("C", 2000, 0)]) == 1500

    def test_savings_attached_in_every_mode(self):
        for mode in (RankMode.PRICE, RankMode.DISTANCE):
            ranked = rank([nearby("A", 1400, 0), nearby("B", 1600, 0)], mode)
            assert all(e.savings is not None for e in ranked)

    def test_input_not_mutated(self):
        results = [nearby("B", 1600, 0), nearby("A", 1400, 0)]
        rank(results, RankMode.PRICE)
        assert [r.entity.id for r in results] == ["B", "A"]

    def test_mode_given_as_string(self):
        results = [nearby("B", 1600, 0), nearby("A", 1400, 0)]
        assert _ids(rank(results, "price")) == ["A", "B"]

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            rank([nearby("A", 1400, 0)], "cheapest")


class TestUnusableFeedPrices:
    @pytest.mark.parametrize("raw", ["NaN", "inf"])
    @pytest.mark.parametrize("mode", list(RankMode))
    def test_non_finite_price_ranks_as_unpriced(self, raw, mode):
        station = normalize_record(
            {"UNI_ID": "N", "OS_NM": "Odd", "PRICE": raw,
             "WGS84_LAT": SEOUL_CITY_HALL.latitude, "WGS84_LNG": SEOUL_CITY_HALL.longitude},
            EntityKind.FUEL_STATION,
        )
        results = [
            nearby("A", 1500, 300),
            NearbyResult(entity=station, distance_m=100),
            nearby("B", 1400, 600),
        ]
        ranked = rank(results, mode)
        assert ranked.average_price == 1450
        if mode is RankMode.DISTANCE:
            assert _ids(ranked) == ["N", "A", "B"]
        else:
            assert "N" not in _ids(ranked)


class TestProductSelection:
    def test_ranks_on_selected_product(self):
        results = [
            NearbyResult(make_entity("A", 1600, prices={"B027": 1600, "D047": 1450}), 100),
            NearbyResult(make_entity("B", 1550, prices={"B027": 1550, "D047": 1500}), 100),
            NearbyResult(make_entity("C", 1500, prices={"B027": 1500}), 100),
        ]
        assert _ids(rank(results, RankMode.PRICE)) == ["C", "B", "A"]

        diesel = rank(select_product(results, FuelProduct.DIESEL), RankMode.PRICE)
        assert _ids(diesel) == ["A", "B"]
        assert diesel.average_price == 1475
