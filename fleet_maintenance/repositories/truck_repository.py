"""
Truck Repository - Database access for truck records

Reads the ``trucks`` table owned by the fleet-management collaborator and
attaches each truck's recent maintenance and sensor history. The only write
is the health_score / risk_level update issued by the alert generator.
"""

import logging
from typing import Any, Dict, List, Optional

import pymysql
from pymysql import cursors

from fleet_maintenance.models.fleet_models import (
    MaintenanceRecord,
    RiskLevel,
    SensorReading,
    Truck,
    TruckStatus,
)

logger = logging.getLogger(__name__)

TRUCK_COLUMNS = """
    id, vin, make, model, year, current_mileage, fuel_efficiency,
    engine_hours, last_oil_change, last_inspection, health_score,
    risk_level, status, is_deleted
"""

MAINTENANCE_COLUMNS = """
    id, truck_id, service_type, date_performed, parts_cost, labor_cost,
    total_cost, downtime_hours, was_predicted, failure_mode, status, is_deleted
"""

SENSOR_COLUMNS = """
    id, truck_id, sensor_type, value, unit, timestamp, is_anomaly, confidence
"""


class TruckRepository:
    """Repository for truck data access operations."""

    def __init__(self, db_config: Dict[str, Any]):
        self.db_config = db_config
        logger.info(f"TruckRepository initialized for DB: {db_config.get('database')}")

    def _get_connection(self):
        """Get database connection."""
        return pymysql.connect(**self.db_config, cursorclass=cursors.DictCursor)

    def get_truck_by_id(
        self,
        truck_id: str,
        maintenance_limit: int = 50,
        sensor_limit: int = 100,
    ) -> Optional[Truck]:
        """
        Get a truck with its most recent maintenance records and sensor
        readings attached (newest first).
        """
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    f"SELECT {TRUCK_COLUMNS} FROM trucks WHERE id = %s",
                    (truck_id,),
                )
                row = cursor.fetchone()
                if not row:
                    logger.warning(f"Truck not found: {truck_id}")
                    return None

                truck = Truck.from_row(row)
                truck.maintenance_records = self._fetch_maintenance(
                    cursor, truck_id, maintenance_limit
                )
                truck.sensor_readings = self._fetch_sensors(
                    cursor, truck_id, sensor_limit
                )
                logger.debug(
                    f"Truck found: {truck_id} "
                    f"({len(truck.maintenance_records)} records, "
                    f"{len(truck.sensor_readings)} readings)"
                )
                return truck
        finally:
            conn.close()

    def get_trucks(
        self,
        status: Optional[TruckStatus] = None,
        maintenance_limit: int = 0,
    ) -> List[Truck]:
        """
        Get all non-deleted trucks, optionally filtered by status.

        With ``maintenance_limit`` > 0 each truck carries that many of its
        most recent maintenance records.
        """
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                query = f"SELECT {TRUCK_COLUMNS} FROM trucks WHERE is_deleted = 0"
                params: tuple = ()
                if status is not None:
                    query += " AND status = %s"
                    params = (status.value,)
                query += " ORDER BY id"
                cursor.execute(query, params)
                trucks = [Truck.from_row(row) for row in cursor.fetchall()]

                if maintenance_limit > 0:
                    for truck in trucks:
                        truck.maintenance_records = self._fetch_maintenance(
                            cursor, truck.id, maintenance_limit
                        )

                logger.debug(f"Fetched {len(trucks)} trucks (status={status})")
                return trucks
        finally:
            conn.close()

    def get_active_trucks(self, maintenance_limit: int = 0) -> List[Truck]:
        """Get non-deleted ACTIVE trucks."""
        return self.get_trucks(TruckStatus.ACTIVE, maintenance_limit=maintenance_limit)

    def update_health(self, truck_id: str, health_score: int, risk_level: RiskLevel) -> None:
        """Overwrite the truck's health score and risk level."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    UPDATE trucks
                    SET health_score = %s, risk_level = %s
                    WHERE id = %s
                    """,
                    (health_score, risk_level.value, truck_id),
                )
            conn.commit()
            logger.debug(f"Updated health for {truck_id}: {health_score} / {risk_level.value}")
        finally:
            conn.close()

    @staticmethod
    def _fetch_maintenance(cursor, truck_id: str, limit: int) -> List[MaintenanceRecord]:
        cursor.execute(
            f"""
            SELECT {MAINTENANCE_COLUMNS}
            FROM maintenance_records
            WHERE truck_id = %s AND is_deleted = 0
            ORDER BY date_performed DESC
            LIMIT %s
            """,
            (truck_id, limit),
        )
        return [MaintenanceRecord.from_row(row) for row in cursor.fetchall()]

    @staticmethod
    def _fetch_sensors(cursor, truck_id: str, limit: int) -> List[SensorReading]:
        cursor.execute(
            f"""
            SELECT {SENSOR_COLUMNS}
            FROM sensor_readings
            WHERE truck_id = %s
            ORDER BY timestamp DESC
            LIMIT %s
            """,
            (truck_id, limit),
        )
        return [SensorReading.from_row(row) for row in cursor.fetchall()]
