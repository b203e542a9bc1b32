"""
Sensor Repository - Database access for sensor readings

Sensor readings are an append-only time series; ``save_reading`` is the only
write and carries the anomaly flag computed by the anomaly detector.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

import pymysql
from pymysql import cursors

from fleet_maintenance.models.fleet_models import SensorReading, SensorType
from fleet_maintenance.repositories.truck_repository import SENSOR_COLUMNS

logger = logging.getLogger(__name__)


class SensorRepository:
    """Repository for sensor data access operations."""

    def __init__(self, db_config: Dict[str, Any]):
        self.db_config = db_config
        logger.info(f"SensorRepository initialized for DB: {db_config.get('database')}")

    def _get_connection(self):
        """Get database connection."""
        return pymysql.connect(**self.db_config, cursorclass=cursors.DictCursor)

    def get_recent_readings(
        self,
        truck_id: str,
        sensor_type: SensorType,
        since: datetime,
        until: datetime,
        limit: int = 100,
    ) -> List[SensorReading]:
        """Get readings of one sensor stream taken in [since, until), newest first."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    f"""
                    SELECT {SENSOR_COLUMNS}
                    FROM sensor_readings
                    WHERE truck_id = %s
                      AND sensor_type = %s
                      AND timestamp >= %s
                      AND timestamp < %s
                    ORDER BY timestamp DESC
                    LIMIT %s
                    """,
                    (truck_id, sensor_type.value, since, until, limit),
                )
                readings = [SensorReading.from_row(row) for row in cursor.fetchall()]
                logger.debug(
                    f"Fetched {len(readings)} {sensor_type.value} readings for {truck_id}"
                )
                return readings
        finally:
            conn.close()

    def save_reading(self, reading: SensorReading) -> SensorReading:
        """Append a reading and return it with its storage id."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO sensor_readings (
                        truck_id, sensor_type, value, unit, timestamp,
                        is_anomaly, confidence
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        reading.truck_id,
                        reading.sensor_type.value,
                        reading.value,
                        reading.unit,
                        reading.timestamp,
                        reading.is_anomaly,
                        reading.confidence,
                    ),
                )
                reading.id = str(cursor.lastrowid)
            conn.commit()
            return reading
        finally:
            conn.close()
