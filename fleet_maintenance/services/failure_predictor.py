"""
Failure Predictor Service

Five independent heuristic models, one per subsystem. Each starts from a
small base probability, adds weighted contributions from age, mileage,
service history and sensor averages, and is capped below 1.0:

    Model          Base   Ceiling  Cost range ($)
    engine         0.10   0.95     2500 - 5500
    transmission   0.05   0.80     1800 - 4000
    brakes         0.08   0.90      800 - 2000
    tires          0.06   0.85      400 - 1200
    battery        0.04   0.70      200 -  500

The probability → timeframe label → days mapping lives in TIMEFRAMES so
the label shown to users and the predicted failure date stay in sync.
"""

import random
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from fleet_maintenance.models.fleet_models import (
    MaintenanceRecord,
    Prediction,
    PredictionType,
    SensorType,
    Truck,
    utc_now,
)
from fleet_maintenance.services.health_scorer import DAYS_PER_MONTH

logger = structlog.get_logger(__name__)


# (probability strictly above, label, days until predicted failure)
TIMEFRAMES: List[Tuple[float, str, int]] = [
    (0.8, "Immediate (0-30 days)", 15),
    (0.6, "Short-term (1-3 months)", 60),
    (0.4, "Medium-term (3-6 months)", 135),
]
LONG_TERM = ("Long-term (6+ months)", 180)

# Only predictions above this probability are surfaced
SURFACE_THRESHOLD = 0.30

COST_RANGES: Dict[PredictionType, Tuple[float, float]] = {
    PredictionType.ENGINE_FAILURE: (2500.0, 5500.0),
    PredictionType.TRANSMISSION_FAILURE: (1800.0, 4000.0),
    PredictionType.BRAKE_FAILURE: (800.0, 2000.0),
    PredictionType.TIRE_FAILURE: (400.0, 1200.0),
    PredictionType.BATTERY_FAILURE: (200.0, 500.0),
}


def get_timeframe(probability: float) -> str:
    """Coarse label describing when a failure of this probability is expected."""
    for threshold, label, _ in TIMEFRAMES:
        if probability > threshold:
            return label
    return LONG_TERM[0]


def timeframe_to_days(timeframe: str) -> int:
    """Days until the predicted failure for a label produced by ``get_timeframe``."""
    for _, label, days in TIMEFRAMES:
        if label == timeframe:
            return days
    return LONG_TERM[1]


class CostEstimator:
    """
    Estimated repair cost for a predicted failure.

    Without a random source the estimate is deterministic and scales with
    probability inside the model's cost range. Pass a seeded
    ``random.Random`` to sample uniformly across the range instead.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def estimate(self, prediction_type: PredictionType, probability: float) -> float:
        low, high = COST_RANGES[prediction_type]
        if self.rng is not None:
            fraction = self.rng.random()
        else:
            fraction = max(0.0, min(1.0, probability))
        return low + (high - low) * fraction


def _months_since(when: datetime, now: datetime) -> float:
    return (now - when).total_seconds() / timedelta(days=DAYS_PER_MONTH).total_seconds()


def _latest(records: List[MaintenanceRecord]) -> Optional[MaintenanceRecord]:
    return max(records, key=lambda r: r.date_performed) if records else None


def _sensor_values(truck: Truck, sensor_type: SensorType) -> List[float]:
    return [r.value for r in truck.sensor_readings if r.sensor_type == sensor_type]


def _mean(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


class FailurePredictor:
    """
    Per-subsystem failure risk models.

    Example Usage:
        predictor = FailurePredictor()
        for prediction in predictor.surfaced(truck):
            print(prediction.type, prediction.probability, prediction.timeframe)
    """

    def __init__(self, cost_estimator: Optional[CostEstimator] = None):
        self.cost_estimator = cost_estimator or CostEstimator()
        self._models: List[Callable[[Truck, datetime], Prediction]] = [
            self.predict_engine_failure,
            self.predict_transmission_failure,
            self.predict_brake_failure,
            self.predict_tire_failure,
            self.predict_battery_failure,
        ]

    def _build(
        self,
        prediction_type: PredictionType,
        probability: float,
        ceiling: float,
        action: str,
    ) -> Prediction:
        capped = max(0.0, min(probability, ceiling))
        return Prediction(
            type=prediction_type,
            probability=capped,
            timeframe=get_timeframe(capped),
            recommended_action=action,
            cost_impact=self.cost_estimator.estimate(prediction_type, capped),
        )

    def predict_engine_failure(self, truck: Truck, as_of: Optional[datetime] = None) -> Prediction:
        now = as_of or utc_now()
        probability = 0.10
        probability += truck.age_years(now) * 0.02
        probability += (truck.current_mileage / 100000) * 0.15

        last_oil_change = _latest([r for r in truck.maintenance_records if r.matches("oil")])
        if last_oil_change is None:
            probability += 0.30
        elif _months_since(last_oil_change.date_performed, now) > 6:
            probability += 0.20

        avg_temp = _mean(_sensor_values(truck, SensorType.ENGINE_TEMPERATURE))
        if avg_temp is not None and avg_temp > 220:
            probability += 0.25

        return self._build(
            PredictionType.ENGINE_FAILURE,
            probability,
            0.95,
            "Schedule engine inspection and oil change",
        )

    def predict_transmission_failure(
        self, truck: Truck, as_of: Optional[datetime] = None
    ) -> Prediction:
        now = as_of or utc_now()
        probability = 0.05
        probability += (truck.current_mileage / 150000) * 0.25
        probability += truck.age_years(now) * 0.01

        if not any(r.matches("transmission", "fluid") for r in truck.maintenance_records):
            probability += 0.20

        return self._build(
            PredictionType.TRANSMISSION_FAILURE,
            probability,
            0.80,
            "Check transmission fluid and schedule service",
        )

    def predict_brake_failure(self, truck: Truck, as_of: Optional[datetime] = None) -> Prediction:
        now = as_of or utc_now()
        probability = 0.08
        probability += (truck.current_mileage / 50000) * 0.15

        last_brake_service = _latest(
            [r for r in truck.maintenance_records if r.matches("brake", "pad")]
        )
        if last_brake_service is None:
            probability += 0.30
        elif _months_since(last_brake_service.date_performed, now) > 12:
            probability += 0.25

        avg_wear = _mean(_sensor_values(truck, SensorType.BRAKE_WEAR))
        if avg_wear is not None and avg_wear > 70:
            probability += 0.30

        return self._build(
            PredictionType.BRAKE_FAILURE,
            probability,
            0.90,
            "Immediate brake inspection and pad replacement",
        )

    def predict_tire_failure(self, truck: Truck, as_of: Optional[datetime] = None) -> Prediction:
        now = as_of or utc_now()
        probability = 0.06
        probability += (truck.current_mileage / 40000) * 0.20
        probability += truck.age_years(now) * 0.015

        if not any(r.matches("tire", "rotation") for r in truck.maintenance_records):
            probability += 0.25

        pressures = _sensor_values(truck, SensorType.TIRE_PRESSURE)
        if pressures:
            low_count = sum(1 for value in pressures if value < 30)
            if low_count >= len(pressures) * 0.3:
                probability += 0.20

        return self._build(
            PredictionType.TIRE_FAILURE,
            probability,
            0.85,
            "Check tire pressure and inspect for wear",
        )

    def predict_battery_failure(self, truck: Truck, as_of: Optional[datetime] = None) -> Prediction:
        now = as_of or utc_now()
        probability = 0.04

        # Batteries typically last 3-5 years
        age = truck.age_years(now)
        if age > 3:
            probability += (age - 3) * 0.15

        avg_voltage = _mean(_sensor_values(truck, SensorType.BATTERY_VOLTAGE))
        if avg_voltage is not None and avg_voltage < 12.2:
            probability += 0.30

        return self._build(
            PredictionType.BATTERY_FAILURE,
            probability,
            0.70,
            "Test battery and charging system",
        )

    def predict_all(self, truck: Truck, as_of: Optional[datetime] = None) -> List[Prediction]:
        """Run all five models; unfiltered, in model order."""
        now = as_of or utc_now()
        return [model(truck, now) for model in self._models]

    def surfaced(self, truck: Truck, as_of: Optional[datetime] = None) -> List[Prediction]:
        """Predictions above 0.30, highest probability first."""
        predictions = [
            p for p in self.predict_all(truck, as_of) if p.probability > SURFACE_THRESHOLD
        ]
        predictions.sort(key=lambda p: p.probability, reverse=True)
        logger.debug(
            "predictions_surfaced",
            truck_id=truck.id,
            surfaced=[(p.type.value, round(p.probability, 3)) for p in predictions],
        )
        return predictions
