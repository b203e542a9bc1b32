"""
Sensor Anomaly Detector Service

Flags a new sensor value that sits more than two population standard
deviations away from the recent history of the same (truck, sensor) stream.

- History window: the 7 days before the value, at most 100 most recent readings
- Fewer than 10 historical points: not anomalous (insufficient data)
- Constant history (stddev 0): not anomalous
"""

import statistics
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional, Sequence

import structlog

from fleet_maintenance.models.fleet_models import SensorReading, SensorType, utc_now

logger = structlog.get_logger(__name__)


class SensorAnomalyDetector:
    """
    Z-score outlier check on a single sensor stream.

    Example Usage:
        detector = SensorAnomalyDetector(sensor_repo)
        if detector.is_anomalous("TRK-001", SensorType.ENGINE_TEMPERATURE, 248.0):
            ...
    """

    WINDOW_DAYS = 7
    HISTORY_LIMIT = 100
    MIN_HISTORY = 10
    Z_THRESHOLD = 2.0

    def __init__(self, sensor_repo):
        self.sensor_repo = sensor_repo
        logger.debug("SensorAnomalyDetector initialized")

    @classmethod
    def z_score(cls, history: Sequence[float], value: float) -> Optional[float]:
        """
        |value - mean| / population stddev of ``history``.

        Returns None when the history is too short or has no spread.
        """
        if len(history) < cls.MIN_HISTORY:
            return None
        mean = statistics.fmean(history)
        stddev = statistics.pstdev(history, mu=mean)
        if stddev == 0:
            return None
        return abs(value - mean) / stddev

    def is_anomalous(
        self,
        truck_id: str,
        sensor_type: SensorType,
        value: float,
        as_of: Optional[datetime] = None,
    ) -> bool:
        """Compare ``value`` against the truck's trailing 7-day readings of this sensor."""
        now = as_of or utc_now()
        history = self.sensor_repo.get_recent_readings(
            truck_id,
            sensor_type,
            since=now - timedelta(days=self.WINDOW_DAYS),
            until=now,
            limit=self.HISTORY_LIMIT,
        )
        values = [r.value for r in history]

        z = self.z_score(values, value)
        if z is None:
            logger.debug(
                "anomaly_check_skipped",
                truck_id=truck_id,
                sensor_type=sensor_type.value,
                history_points=len(values),
            )
            return False

        anomalous = z > self.Z_THRESHOLD
        if anomalous:
            logger.info(
                "sensor_anomaly_detected",
                truck_id=truck_id,
                sensor_type=sensor_type.value,
                value=value,
                z_score=round(z, 2),
            )
        return anomalous

    def evaluate_reading(self, reading: SensorReading) -> SensorReading:
        """Return a copy of ``reading`` with ``is_anomaly`` set; the caller persists it."""
        flagged = self.is_anomalous(
            reading.truck_id, reading.sensor_type, reading.value, as_of=reading.timestamp
        )
        return replace(reading, is_anomaly=flagged)
