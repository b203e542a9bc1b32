"""
Health Scorer Service

Deductive 0-100 health score for a single truck. Starts at 100 and
subtracts independent, capped penalties:

- Age:          min(age_years * 2, 30)
- Mileage:      min(current_mileage / 10000, 25)
- Maintenance:  15 if fewer than 2 completed services in the last 6 months
- Anomalies:    min(flagged_sensor_readings * 5, 20)
- Fuel economy: 10 if fuel efficiency is known and below 15 mpg

The sum is rounded and clamped to [0, 100] once, at the end.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

import structlog

from fleet_maintenance.models.fleet_models import MaintenanceStatus, Truck, utc_now

logger = structlog.get_logger(__name__)

# Months are treated as 30 days throughout the engine
DAYS_PER_MONTH = 30


@dataclass
class HealthBreakdown:
    """Individual deductions behind a health score"""

    age: float = 0.0
    mileage: float = 0.0
    maintenance: float = 0.0
    anomalies: float = 0.0
    fuel_efficiency: float = 0.0

    @property
    def total(self) -> float:
        return self.age + self.mileage + self.maintenance + self.anomalies + self.fuel_efficiency

    @property
    def score(self) -> int:
        # Half-up rounding, not banker's rounding
        return max(0, min(100, math.floor(100 - self.total + 0.5)))

    def to_dict(self) -> Dict[str, float]:
        return {
            "age": self.age,
            "mileage": round(self.mileage, 2),
            "maintenance": self.maintenance,
            "anomalies": self.anomalies,
            "fuel_efficiency": self.fuel_efficiency,
            "score": self.score,
        }


class HealthScorer:
    """Combines truck attributes, maintenance history and anomaly flags into a score."""

    MAX_AGE_DEDUCTION = 30
    MAX_MILEAGE_DEDUCTION = 25
    MAX_ANOMALY_DEDUCTION = 20
    MAINTENANCE_DEDUCTION = 15
    FUEL_EFFICIENCY_DEDUCTION = 10

    MIN_RECENT_SERVICES = 2
    RECENT_SERVICE_MONTHS = 6
    POOR_FUEL_EFFICIENCY_MPG = 15

    def breakdown(self, truck: Truck, as_of: Optional[datetime] = None) -> HealthBreakdown:
        now = as_of or utc_now()
        result = HealthBreakdown()

        result.age = min(truck.age_years(now) * 2, self.MAX_AGE_DEDUCTION)
        result.mileage = min(
            max(truck.current_mileage or 0.0, 0.0) / 10000, self.MAX_MILEAGE_DEDUCTION
        )

        window_start = now - timedelta(days=self.RECENT_SERVICE_MONTHS * DAYS_PER_MONTH)
        recent_services = [
            r
            for r in truck.maintenance_records
            if r.status == MaintenanceStatus.COMPLETED and r.date_performed > window_start
        ]
        if len(recent_services) < self.MIN_RECENT_SERVICES:
            result.maintenance = self.MAINTENANCE_DEDUCTION

        anomaly_count = sum(1 for r in truck.sensor_readings if r.is_anomaly)
        result.anomalies = min(anomaly_count * 5, self.MAX_ANOMALY_DEDUCTION)

        if (
            truck.fuel_efficiency is not None
            and truck.fuel_efficiency < self.POOR_FUEL_EFFICIENCY_MPG
        ):
            result.fuel_efficiency = self.FUEL_EFFICIENCY_DEDUCTION

        return result

    def score(self, truck: Truck, as_of: Optional[datetime] = None) -> int:
        """Integer health score in [0, 100]."""
        result = self.breakdown(truck, as_of)
        logger.debug("health_scored", truck_id=truck.id, **result.to_dict())
        return result.score
