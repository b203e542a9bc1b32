"""
Tests for the deductive truck health score
"""

import pytest

from fleet_maintenance.services.health_scorer import HealthBreakdown, HealthScorer
from tests.fixtures.truck_fixtures import NOW, make_reading, make_record, make_truck


@pytest.fixture
def scorer():
    return HealthScorer()


class TestHealthScore:
    """Score composition"""

    def test_healthy_truck(self, scorer, healthy_truck):
        # age 2 -> 4, 40k miles -> 4, recent services -> 0
        assert scorer.score(healthy_truck, NOW) == 92

    def test_neglected_truck(self, scorer, neglected_truck):
        # age 12 -> 24, 180k miles -> 18, no services -> 15
        assert scorer.score(neglected_truck, NOW) == 43

    def test_half_up_rounding(self, scorer):
        truck = make_truck(
            year=NOW.year,
            current_mileage=55000.0,
            maintenance_records=[make_record(days_ago=5), make_record(days_ago=15)],
        )
        # 100 - 5.5 = 94.5 rounds up
        assert scorer.score(truck, NOW) == 95

    def test_deductions_are_capped(self, scorer):
        readings = [make_reading(is_anomaly=True) for _ in range(10)]
        truck = make_truck(
            year=NOW.year - 40,
            current_mileage=2_000_000.0,
            fuel_efficiency=5.0,
            sensor_readings=readings,
        )
        breakdown = scorer.breakdown(truck, NOW)

        assert breakdown.age == 30
        assert breakdown.mileage == 25
        assert breakdown.anomalies == 20
        assert breakdown.fuel_efficiency == 10
        assert breakdown.maintenance == 15
        assert scorer.score(truck, NOW) == 0

    def test_single_recent_service_still_penalized(self, scorer):
        truck = make_truck(maintenance_records=[make_record(days_ago=10)])
        assert scorer.breakdown(truck, NOW).maintenance == 15

    def test_old_services_do_not_count(self, scorer):
        truck = make_truck(
            maintenance_records=[make_record(days_ago=200), make_record(days_ago=250)]
        )
        assert scorer.breakdown(truck, NOW).maintenance == 15

    def test_unknown_fuel_efficiency_not_penalized(self, scorer, healthy_truck):
        assert healthy_truck.fuel_efficiency is None
        assert scorer.breakdown(healthy_truck, NOW).fuel_efficiency == 0

    def test_zero_mpg_is_a_missing_reading(self, scorer):
        truck = make_truck(fuel_efficiency=0.0)
        assert scorer.breakdown(truck, NOW).fuel_efficiency == 0

    def test_fifteen_mpg_is_not_poor(self, scorer):
        truck = make_truck(fuel_efficiency=15.0)
        assert scorer.breakdown(truck, NOW).fuel_efficiency == 0

    def test_each_anomaly_costs_five(self, scorer):
        truck = make_truck(
            sensor_readings=[make_reading(is_anomaly=True), make_reading(is_anomaly=False)] * 2
        )
        assert scorer.breakdown(truck, NOW).anomalies == 10


class TestHealthBreakdown:
    def test_score_clamped_to_range(self):
        assert HealthBreakdown(age=80, mileage=80).score == 0
        assert HealthBreakdown().score == 100

    def test_to_dict_includes_score(self):
        data = HealthBreakdown(age=4, mileage=4).to_dict()
        assert data["score"] == 92
