"""
Maintenance Repository - Database access for maintenance records

Records are owned by the collaborator; this repository only reads them.
Soft-deleted rows are always excluded.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import pymysql
from pymysql import cursors

from fleet_maintenance.models.fleet_models import MaintenanceRecord
from fleet_maintenance.repositories.truck_repository import MAINTENANCE_COLUMNS

logger = logging.getLogger(__name__)


class MaintenanceRepository:
    """Repository for maintenance record access operations."""

    def __init__(self, db_config: Dict[str, Any]):
        self.db_config = db_config
        logger.info(
            f"MaintenanceRepository initialized for DB: {db_config.get('database')}"
        )

    def _get_connection(self):
        """Get database connection."""
        return pymysql.connect(**self.db_config, cursorclass=cursors.DictCursor)

    def get_records(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[MaintenanceRecord]:
        """
        Get non-deleted records performed within [start_date, end_date],
        newest first. Either bound may be omitted.
        """
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                query = f"""
                    SELECT {MAINTENANCE_COLUMNS}
                    FROM maintenance_records
                    WHERE is_deleted = 0
                """
                params: list = []
                if start_date is not None:
                    query += " AND date_performed >= %s"
                    params.append(start_date)
                if end_date is not None:
                    query += " AND date_performed <= %s"
                    params.append(end_date)
                query += " ORDER BY date_performed DESC"
                if limit is not None:
                    query += " LIMIT %s"
                    params.append(limit)

                cursor.execute(query, tuple(params))
                records = [MaintenanceRecord.from_row(row) for row in cursor.fetchall()]
                logger.debug(
                    f"Fetched {len(records)} maintenance records "
                    f"({start_date} -> {end_date}, limit={limit})"
                )
                return records
        finally:
            conn.close()
