"""
Tests for the per-subsystem failure models, timeframe mapping and cost estimates
"""

import random

import pytest

from fleet_maintenance.models.fleet_models import PredictionType, SensorType
from fleet_maintenance.services.failure_predictor import (
    COST_RANGES,
    CostEstimator,
    FailurePredictor,
    get_timeframe,
    timeframe_to_days,
)
from tests.fixtures.truck_fixtures import NOW, make_reading, make_record, make_truck


@pytest.fixture
def predictor():
    return FailurePredictor()


# =============================================================================
# Timeframes
# =============================================================================


class TestTimeframes:
    @pytest.mark.parametrize(
        "probability, label",
        [
            (0.95, "Immediate (0-30 days)"),
            (0.80, "Short-term (1-3 months)"),
            (0.61, "Short-term (1-3 months)"),
            (0.60, "Medium-term (3-6 months)"),
            (0.41, "Medium-term (3-6 months)"),
            (0.40, "Long-term (6+ months)"),
            (0.05, "Long-term (6+ months)"),
        ],
    )
    def test_boundaries_are_exclusive(self, probability, label):
        assert get_timeframe(probability) == label

    def test_days_follow_label(self):
        assert timeframe_to_days("Immediate (0-30 days)") == 15
        assert timeframe_to_days("Short-term (1-3 months)") == 60
        assert timeframe_to_days("Medium-term (3-6 months)") == 135
        assert timeframe_to_days("Long-term (6+ months)") == 180

    def test_unknown_label_is_long_term(self):
        assert timeframe_to_days("whenever") == 180


# =============================================================================
# Cost estimates
# =============================================================================


class TestCostEstimator:
    def test_deterministic_without_rng(self):
        estimator = CostEstimator()
        assert estimator.estimate(PredictionType.ENGINE_FAILURE, 0.5) == 4000.0
        assert estimator.estimate(PredictionType.BATTERY_FAILURE, 0.0) == 200.0

    def test_seeded_rng_stays_in_range(self):
        estimator = CostEstimator(random.Random(42))
        for prediction_type, (low, high) in COST_RANGES.items():
            for _ in range(20):
                assert low <= estimator.estimate(prediction_type, 0.9) <= high

    def test_seeded_rng_is_reproducible(self):
        first = CostEstimator(random.Random(7)).estimate(PredictionType.BRAKE_FAILURE, 0.5)
        second = CostEstimator(random.Random(7)).estimate(PredictionType.BRAKE_FAILURE, 0.5)
        assert first == second


# =============================================================================
# Individual models
# =============================================================================


class TestEngineModel:
    def test_neglected_truck(self, predictor, neglected_truck):
        # 0.10 + 12*0.02 + 1.8*0.15 + 0.30 (never changed oil)
        prediction = predictor.predict_engine_failure(neglected_truck, NOW)
        assert prediction.probability == pytest.approx(0.91)
        assert prediction.timeframe == "Immediate (0-30 days)"

    def test_stale_oil_change(self, predictor):
        truck = make_truck(
            year=NOW.year, current_mileage=0.0,
            maintenance_records=[make_record(service_type="OIL CHANGE", days_ago=200)],
        )
        assert predictor.predict_engine_failure(truck, NOW).probability == pytest.approx(0.30)

    def test_hot_engine(self, predictor):
        truck = make_truck(
            year=NOW.year, current_mileage=0.0,
            maintenance_records=[make_record(service_type="Oil Change", days_ago=10)],
            sensor_readings=[make_reading(SensorType.ENGINE_TEMPERATURE, 230.0)] * 3,
        )
        assert predictor.predict_engine_failure(truck, NOW).probability == pytest.approx(0.35)

    def test_capped_at_ceiling(self, predictor):
        truck = make_truck(
            year=NOW.year - 30, current_mileage=900000.0,
            sensor_readings=[make_reading(SensorType.ENGINE_TEMPERATURE, 260.0)],
        )
        assert predictor.predict_engine_failure(truck, NOW).probability == 0.95


class TestTransmissionModel:
    def test_no_fluid_service(self, predictor, neglected_truck):
        prediction = predictor.predict_transmission_failure(neglected_truck, NOW)
        assert prediction.probability == pytest.approx(0.67)

    def test_fluid_service_matches_keyword(self, predictor):
        truck = make_truck(
            year=NOW.year, current_mileage=0.0,
            maintenance_records=[make_record(service_type="Fluid flush", days_ago=900)],
        )
        assert predictor.predict_transmission_failure(truck, NOW).probability == pytest.approx(0.05)


class TestBrakeModel:
    def test_capped_at_ceiling(self, predictor, neglected_truck):
        assert predictor.predict_brake_failure(neglected_truck, NOW).probability == 0.90

    def test_brake_service_older_than_a_year(self, predictor):
        truck = make_truck(
            current_mileage=0.0,
            maintenance_records=[make_record(service_type="Brake Pad Replacement", days_ago=400)],
        )
        assert predictor.predict_brake_failure(truck, NOW).probability == pytest.approx(0.33)

    def test_high_brake_wear(self, predictor):
        truck = make_truck(
            current_mileage=0.0,
            maintenance_records=[make_record(service_type="Brake inspection", days_ago=30)],
            sensor_readings=[make_reading(SensorType.BRAKE_WEAR, 80.0)],
        )
        assert predictor.predict_brake_failure(truck, NOW).probability == pytest.approx(0.38)


class TestTireModel:
    def test_low_pressure_share_at_threshold(self, predictor):
        # 3 of 10 readings below 30 psi is exactly 30%
        readings = [make_reading(SensorType.TIRE_PRESSURE, 25.0)] * 3 + [
            make_reading(SensorType.TIRE_PRESSURE, 35.0)
        ] * 7
        truck = make_truck(
            year=NOW.year, current_mileage=0.0,
            maintenance_records=[make_record(service_type="Tire Rotation", days_ago=10)],
            sensor_readings=readings,
        )
        assert predictor.predict_tire_failure(truck, NOW).probability == pytest.approx(0.26)

    def test_low_pressure_share_below_threshold(self, predictor):
        readings = [make_reading(SensorType.TIRE_PRESSURE, 25.0)] * 2 + [
            make_reading(SensorType.TIRE_PRESSURE, 35.0)
        ] * 8
        truck = make_truck(
            year=NOW.year, current_mileage=0.0,
            maintenance_records=[make_record(service_type="Tire Rotation", days_ago=10)],
            sensor_readings=readings,
        )
        assert predictor.predict_tire_failure(truck, NOW).probability == pytest.approx(0.06)


class TestBatteryModel:
    def test_young_battery_has_base_risk(self, predictor):
        truck = make_truck(year=NOW.year - 3)
        assert predictor.predict_battery_failure(truck, NOW).probability == pytest.approx(0.04)

    def test_low_voltage(self, predictor):
        truck = make_truck(
            year=NOW.year - 4,
            sensor_readings=[make_reading(SensorType.BATTERY_VOLTAGE, 11.9)],
        )
        assert predictor.predict_battery_failure(truck, NOW).probability == pytest.approx(0.49)

    def test_capped_at_ceiling(self, predictor, neglected_truck):
        assert predictor.predict_battery_failure(neglected_truck, NOW).probability == 0.70


# =============================================================================
# Aggregation
# =============================================================================


class TestSurfaced:
    def test_predict_all_returns_five(self, predictor, healthy_truck):
        predictions = predictor.predict_all(healthy_truck, NOW)
        assert [p.type for p in predictions] == [
            PredictionType.ENGINE_FAILURE,
            PredictionType.TRANSMISSION_FAILURE,
            PredictionType.BRAKE_FAILURE,
            PredictionType.TIRE_FAILURE,
            PredictionType.BATTERY_FAILURE,
        ]

    def test_healthy_truck_surfaces_nothing(self, predictor, healthy_truck):
        assert predictor.surfaced(healthy_truck, NOW) == []

    def test_sorted_by_probability(self, predictor, neglected_truck):
        surfaced = predictor.surfaced(neglected_truck, NOW)

        assert [p.type for p in surfaced] == [
            PredictionType.ENGINE_FAILURE,
            PredictionType.BRAKE_FAILURE,
            PredictionType.TIRE_FAILURE,
            PredictionType.BATTERY_FAILURE,
            PredictionType.TRANSMISSION_FAILURE,
        ]
        probabilities = [p.probability for p in surfaced]
        assert probabilities == sorted(probabilities, reverse=True)

    def test_every_prediction_is_within_bounds(self, predictor, neglected_truck):
        for prediction in predictor.predict_all(neglected_truck, NOW):
            low, high = COST_RANGES[prediction.type]
            assert 0 <= prediction.probability < 1
            assert low <= prediction.cost_impact <= high
            assert prediction.timeframe == get_timeframe(prediction.probability)
