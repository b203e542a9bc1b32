"""
Maintenance Scheduler Service

Next due dates for the three recurring services. Each is independent:

    Service        Source                           Due when elapsed >=   Cadence   Default
    oil change     truck.last_oil_change            3 months             6 months  +30 days
    inspection     truck.last_inspection            10 months            12 months +90 days
    tire rotation  latest "rotation" service record 5 months             6 months  +60 days

With history but less than the trigger elapsed, the field is left empty.
Without history a near-term default is scheduled. A computed date may fall
in the past, which means the service is overdue.
"""

from datetime import datetime, timedelta
from typing import Optional

from fleet_maintenance.models.fleet_models import NextMaintenance, Truck, utc_now
from fleet_maintenance.services.health_scorer import DAYS_PER_MONTH


class MaintenanceScheduler:

    OIL_CHANGE = (3, 6, 30)
    INSPECTION = (10, 12, 90)
    TIRE_ROTATION = (5, 6, 60)

    @staticmethod
    def _next_due(
        last_service: Optional[datetime],
        now: datetime,
        trigger_months: float,
        cadence_months: float,
        default_days: int,
    ) -> Optional[datetime]:
        if last_service is None:
            return now + timedelta(days=default_days)

        month = timedelta(days=DAYS_PER_MONTH)
        months_elapsed = (now - last_service) / month
        if months_elapsed >= trigger_months:
            return now + (cadence_months - months_elapsed) * month
        return None

    def schedule(self, truck: Truck, as_of: Optional[datetime] = None) -> NextMaintenance:
        now = as_of or utc_now()

        rotations = [r for r in truck.maintenance_records if r.matches("rotation")]
        last_rotation = max((r.date_performed for r in rotations), default=None)

        return NextMaintenance(
            oil_change=self._next_due(truck.last_oil_change, now, *self.OIL_CHANGE),
            inspection=self._next_due(truck.last_inspection, now, *self.INSPECTION),
            tire_rotation=self._next_due(last_rotation, now, *self.TIRE_ROTATION),
        )
