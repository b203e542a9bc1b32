"""
Utilization estimate from recorded engine hours.

There is no trip telemetry behind this engine, so a truck's utilization is
approximated as the engine hours it has logged divided by the productive
hours available since January 1st of its model year.
"""

from datetime import datetime
from typing import Optional

from fleet_maintenance.models.fleet_models import Truck, utc_now

WORK_SCHEDULE = {
    "work_days_per_week": 6,  # Mon-Sat typical for trucking
    "productive_hours_per_day": 12,
}


def available_hours(truck: Truck, as_of: Optional[datetime] = None) -> float:
    """Productive hours the truck could have run since its model year began."""
    now = as_of or utc_now()
    in_service_since = datetime(truck.year, 1, 1, tzinfo=now.tzinfo)
    days = max((now - in_service_since).total_seconds() / 86400, 0.0)
    work_days = days * WORK_SCHEDULE["work_days_per_week"] / 7
    return work_days * WORK_SCHEDULE["productive_hours_per_day"]


def estimate_utilization(truck: Truck, as_of: Optional[datetime] = None) -> Optional[float]:
    """
    Fraction of available hours actually used, clamped to [0, 1].

    None when the truck has no engine hours on record.
    """
    if truck.engine_hours is None:
        return None
    hours = available_hours(truck, as_of)
    if hours <= 0:
        return None
    return max(0.0, min(1.0, truck.engine_hours / hours))
