"""
Alert Repository - Persistence for predictive alerts

At most one unresolved alert of a given type may exist per truck. The
``open_key`` generated column is NULL once an alert is resolved and unique
while it is open, so the database rejects a concurrent duplicate and
``create_if_absent`` can be a single INSERT IGNORE.
"""

import logging
from typing import Any, Dict, List, Optional

import pymysql
from pymysql import cursors

from fleet_maintenance.models.fleet_models import PREDICTIVE_FAILURE_ALERT, PredictiveAlert

logger = logging.getLogger(__name__)


CREATE_ALERTS_TABLE = """
CREATE TABLE IF NOT EXISTS predictive_alerts (
    id INT AUTO_INCREMENT PRIMARY KEY,
    truck_id VARCHAR(50) NOT NULL,
    alert_type VARCHAR(50) NOT NULL,
    title VARCHAR(200) NOT NULL,
    description TEXT,
    severity ENUM('LOW', 'MEDIUM', 'HIGH', 'CRITICAL') NOT NULL,
    confidence FLOAT,
    predicted_failure_date DATETIME,
    recommended_action TEXT,
    cost_impact DECIMAL(12, 2),
    probability FLOAT,
    is_resolved TINYINT(1) NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    open_key VARCHAR(120) AS (
        IF(is_resolved, NULL, CONCAT(truck_id, ':', alert_type))
    ) STORED,
    UNIQUE KEY uq_open_alert (open_key),
    INDEX idx_truck_resolved (truck_id, is_resolved),
    INDEX idx_created (created_at)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""

ALERT_COLUMNS = """
    id, truck_id, alert_type, title, description, severity, confidence,
    predicted_failure_date, recommended_action, cost_impact, probability,
    is_resolved, created_at
"""


class AlertRepository:
    """Repository for predictive alert operations."""

    def __init__(self, db_config: Dict[str, Any]):
        self.db_config = db_config
        logger.info(f"AlertRepository initialized for DB: {db_config.get('database')}")

    def _get_connection(self):
        """Get database connection."""
        return pymysql.connect(**self.db_config, cursorclass=cursors.DictCursor)

    def ensure_schema(self) -> None:
        """Create the alerts table (with its uniqueness constraint) if missing."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(CREATE_ALERTS_TABLE)
            conn.commit()
            logger.info("predictive_alerts table verified")
        finally:
            conn.close()

    def find_unresolved(
        self, truck_id: str, alert_type: str = PREDICTIVE_FAILURE_ALERT
    ) -> Optional[PredictiveAlert]:
        """Get the open alert of this type for the truck, if any."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    f"""
                    SELECT {ALERT_COLUMNS}
                    FROM predictive_alerts
                    WHERE truck_id = %s AND alert_type = %s AND is_resolved = 0
                    LIMIT 1
                    """,
                    (truck_id, alert_type),
                )
                row = cursor.fetchone()
                return PredictiveAlert.from_row(row) if row else None
        finally:
            conn.close()

    def create_if_absent(self, alert: PredictiveAlert) -> Optional[PredictiveAlert]:
        """
        Insert the alert unless an unresolved one of the same type already
        exists for the truck.

        Returns:
            The stored alert with its id, or None when it was a duplicate.
        """
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    INSERT IGNORE INTO predictive_alerts (
                        truck_id, alert_type, title, description, severity,
                        confidence, predicted_failure_date, recommended_action,
                        cost_impact, probability, is_resolved, created_at
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        alert.truck_id,
                        alert.alert_type,
                        alert.title,
                        alert.description,
                        alert.severity.value,
                        alert.confidence,
                        alert.predicted_failure_date,
                        alert.recommended_action,
                        alert.cost_impact,
                        alert.probability,
                        alert.is_resolved,
                        alert.created_at,
                    ),
                )
                if cursor.rowcount == 0:
                    logger.debug(
                        f"Skipping duplicate {alert.alert_type} alert for {alert.truck_id}"
                    )
                    return None
                alert.id = str(cursor.lastrowid)
            conn.commit()
            return alert
        finally:
            conn.close()

    def get_unresolved(self, truck_id: Optional[str] = None) -> List[PredictiveAlert]:
        """List open alerts, newest first, optionally for one truck."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                query = f"SELECT {ALERT_COLUMNS} FROM predictive_alerts WHERE is_resolved = 0"
                params: tuple = ()
                if truck_id is not None:
                    query += " AND truck_id = %s"
                    params = (truck_id,)
                query += " ORDER BY created_at DESC"
                cursor.execute(query, params)
                return [PredictiveAlert.from_row(row) for row in cursor.fetchall()]
        finally:
            conn.close()
