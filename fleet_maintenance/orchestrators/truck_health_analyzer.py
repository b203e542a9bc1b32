"""
Truck Health Analyzer

Per-truck orchestration: load the truck with its recent history, then run
the health scorer, failure predictor, risk classifier and maintenance
scheduler over it. Analysis is read-only; the only write in this module is
``record_sensor_reading``, which persists a new reading after the anomaly
check.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Dict, List, Optional

from fleet_maintenance.errors import TruckNotFoundError
from fleet_maintenance.models.fleet_models import (
    PredictionResult,
    SensorReading,
    SensorType,
    Truck,
    utc_now,
)
from fleet_maintenance.services.anomaly_detector import SensorAnomalyDetector
from fleet_maintenance.services.failure_predictor import FailurePredictor
from fleet_maintenance.services.health_scorer import HealthScorer
from fleet_maintenance.services.maintenance_scheduler import MaintenanceScheduler
from fleet_maintenance.services.risk_classifier import RiskClassifier

logger = logging.getLogger(__name__)

MAINTENANCE_HISTORY_LIMIT = 50
SENSOR_HISTORY_LIMIT = 100


class TruckHealthAnalyzer:
    """
    Composes the per-truck services into a PredictionResult.

    Services are created with defaults when not injected, so tests only
    need to supply the repositories.
    """

    def __init__(
        self,
        truck_repo,
        sensor_repo=None,
        health_scorer: Optional[HealthScorer] = None,
        failure_predictor: Optional[FailurePredictor] = None,
        risk_classifier: Optional[RiskClassifier] = None,
        maintenance_scheduler: Optional[MaintenanceScheduler] = None,
        anomaly_detector: Optional[SensorAnomalyDetector] = None,
        max_workers: int = 4,
    ):
        """
        Args:
            truck_repo: TruckRepository instance
            sensor_repo: SensorRepository instance (needed to record readings)
            health_scorer: Optional HealthScorer (will create if None)
            failure_predictor: Optional FailurePredictor (will create if None)
            risk_classifier: Optional RiskClassifier (will create if None)
            maintenance_scheduler: Optional MaintenanceScheduler (will create if None)
            anomaly_detector: Optional SensorAnomalyDetector (built on sensor_repo if None)
            max_workers: Thread pool size for analyze_many
        """
        self.truck_repo = truck_repo
        self.sensor_repo = sensor_repo
        self.health_scorer = health_scorer or HealthScorer()
        self.failure_predictor = failure_predictor or FailurePredictor()
        self.risk_classifier = risk_classifier or RiskClassifier()
        self.maintenance_scheduler = maintenance_scheduler or MaintenanceScheduler()
        if anomaly_detector is None and sensor_repo is not None:
            anomaly_detector = SensorAnomalyDetector(sensor_repo)
        self.anomaly_detector = anomaly_detector
        self.max_workers = max_workers

        logger.info("TruckHealthAnalyzer initialized")

    def _load_truck(self, truck_id: str) -> Truck:
        truck = self.truck_repo.get_truck_by_id(
            truck_id,
            maintenance_limit=MAINTENANCE_HISTORY_LIMIT,
            sensor_limit=SENSOR_HISTORY_LIMIT,
        )
        if truck is None:
            raise TruckNotFoundError(truck_id)
        return truck

    def analyze(self, truck_id: str, as_of: Optional[datetime] = None) -> PredictionResult:
        """
        Full health analysis of one truck.

        Raises:
            TruckNotFoundError: if the truck does not exist
        """
        truck = self._load_truck(truck_id)
        return self.analyze_truck(truck, as_of)

    def analyze_truck(self, truck: Truck, as_of: Optional[datetime] = None) -> PredictionResult:
        """Analyze an already-loaded truck."""
        now = as_of or utc_now()

        health_score = self.health_scorer.score(truck, now)
        predictions = self.failure_predictor.surfaced(truck, now)
        risk_level = self.risk_classifier.classify(health_score, predictions)
        next_maintenance = self.maintenance_scheduler.schedule(truck, now)

        logger.debug(
            f"Analyzed {truck.id}: health={health_score} risk={risk_level.value} "
            f"predictions={len(predictions)}"
        )
        return PredictionResult(
            truck_id=truck.id,
            risk_level=risk_level,
            health_score=health_score,
            predictions=predictions,
            next_maintenance=next_maintenance,
        )

    def analyze_many(
        self, truck_ids: List[str], as_of: Optional[datetime] = None
    ) -> Dict[str, PredictionResult]:
        """
        Analyze several trucks concurrently.

        Each truck reads only its own records, so analyses are independent.
        The first failure (e.g. an unknown truck id) is re-raised.
        """
        now = as_of or utc_now()
        if not truck_ids:
            return {}

        workers = max(1, min(self.max_workers, len(truck_ids)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = executor.map(lambda tid: self.analyze(tid, now), truck_ids)
            analyzed = dict(zip(truck_ids, results))

        logger.info(f"Analyzed {len(analyzed)} trucks with {workers} workers")
        return analyzed

    def record_sensor_reading(
        self,
        truck_id: str,
        sensor_type: SensorType,
        value: float,
        unit: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> SensorReading:
        """
        Flag a new reading against the truck's recent history and persist it.

        Raises:
            TruckNotFoundError: if the truck does not exist
        """
        if self.sensor_repo is None or self.anomaly_detector is None:
            raise RuntimeError("TruckHealthAnalyzer was created without a sensor repository")

        if self.truck_repo.get_truck_by_id(truck_id, maintenance_limit=0, sensor_limit=0) is None:
            raise TruckNotFoundError(truck_id)

        reading = SensorReading(
            truck_id=truck_id,
            sensor_type=sensor_type,
            value=value,
            unit=unit,
            timestamp=timestamp or utc_now(),
        )
        # Evaluate before saving so the new value is not part of its own history
        evaluated = self.anomaly_detector.evaluate_reading(reading)
        saved = self.sensor_repo.save_reading(evaluated)

        if saved.is_anomaly:
            logger.warning(
                f"Anomalous {sensor_type.value} reading for {truck_id}: {value}"
            )
        return saved
