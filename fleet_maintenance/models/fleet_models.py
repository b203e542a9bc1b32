"""
Fleet Data Models
=================

Dataclasses and enums shared by the prediction pipeline, the analytics
aggregator and the fleet optimizer. Storage rows are converted with the
``from_row`` constructors; ``to_dict`` produces JSON-ready mappings.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

# Tolerance when checking a stored total against parts + labor
COST_TOLERANCE = 0.01

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[Any]) -> Optional[datetime]:
    """Normalize a storage value (naive datetime, date or ISO string) to aware UTC."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# ══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════════════════════


class TruckStatus(str, Enum):
    """Operational status owned by the fleet-management collaborator"""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    MAINTENANCE = "MAINTENANCE"


class RiskLevel(str, Enum):
    """Four-tier risk classification"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class MaintenanceStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SensorType(str, Enum):
    """Sensor streams reported by the telematics collaborator"""

    ENGINE_TEMPERATURE = "ENGINE_TEMPERATURE"
    OIL_PRESSURE = "OIL_PRESSURE"
    BRAKE_WEAR = "BRAKE_WEAR"
    TIRE_PRESSURE = "TIRE_PRESSURE"
    BATTERY_VOLTAGE = "BATTERY_VOLTAGE"
    FUEL_LEVEL = "FUEL_LEVEL"
    COOLANT_TEMPERATURE = "COOLANT_TEMPERATURE"
    TRANSMISSION_TEMPERATURE = "TRANSMISSION_TEMPERATURE"
    VIBRATION = "VIBRATION"


class PredictionType(str, Enum):
    ENGINE_FAILURE = "ENGINE_FAILURE"
    TRANSMISSION_FAILURE = "TRANSMISSION_FAILURE"
    BRAKE_FAILURE = "BRAKE_FAILURE"
    TIRE_FAILURE = "TIRE_FAILURE"
    BATTERY_FAILURE = "BATTERY_FAILURE"

    @property
    def label(self) -> str:
        """Human readable name, e.g. 'ENGINE FAILURE'"""
        return self.value.replace("_", " ")


class AlertSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @classmethod
    def from_probability(cls, probability: float) -> "AlertSeverity":
        """CRITICAL above 0.8, HIGH above 0.7, otherwise MEDIUM"""
        if probability > 0.8:
            return cls.CRITICAL
        if probability > 0.7:
            return cls.HIGH
        return cls.MEDIUM


class RecommendationType(str, Enum):
    MAINTENANCE_SCHEDULING = "MAINTENANCE_SCHEDULING"
    ROUTE_OPTIMIZATION = "ROUTE_OPTIMIZATION"
    FLEET_BALANCING = "FLEET_BALANCING"
    COST_OPTIMIZATION = "COST_OPTIMIZATION"


class Priority(str, Enum):
    """Recommendation priority, ordered by ``rank``"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class ImplementationComplexity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class MaintenancePriority(str, Enum):
    """What the fleet manager wants the optimizer to favor"""

    COST = "COST"
    DOWNTIME = "DOWNTIME"
    RELIABILITY = "RELIABILITY"


PREDICTIVE_FAILURE_ALERT = "PREDICTIVE_FAILURE"


# ══════════════════════════════════════════════════════════════════════════════
# STORAGE RECORDS
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class MaintenanceRecord:
    """
    A service performed on one truck.

    ``total_cost`` is always derived from parts + labor so the two can
    never disagree inside the engine.
    """

    id: str
    truck_id: str
    service_type: str
    date_performed: datetime
    parts_cost: float = 0.0
    labor_cost: float = 0.0
    downtime_hours: float = 0.0
    was_predicted: bool = False
    failure_mode: Optional[str] = None
    status: MaintenanceStatus = MaintenanceStatus.COMPLETED
    is_deleted: bool = False

    @property
    def total_cost(self) -> float:
        return (self.parts_cost or 0.0) + (self.labor_cost or 0.0)

    def matches(self, *keywords: str) -> bool:
        """Case-insensitive check of the free-text service type."""
        service = (self.service_type or "").lower()
        return any(keyword.lower() in service for keyword in keywords)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "MaintenanceRecord":
        parts = float(row.get("parts_cost") or 0.0)
        labor = float(row.get("labor_cost") or 0.0)
        stored_total = row.get("total_cost")
        if stored_total is not None and abs(float(stored_total) - (parts + labor)) > COST_TOLERANCE:
            logger.warning(
                f"Maintenance record {row.get('id')} total_cost {stored_total} "
                f"does not equal parts_cost + labor_cost ({parts + labor}), using the derived total"
            )
        return cls(
            id=str(row["id"]),
            truck_id=str(row["truck_id"]),
            service_type=row.get("service_type") or "",
            date_performed=as_utc(row["date_performed"]),
            parts_cost=parts,
            labor_cost=labor,
            downtime_hours=float(row.get("downtime_hours") or 0.0),
            was_predicted=bool(row.get("was_predicted")),
            failure_mode=row.get("failure_mode"),
            status=MaintenanceStatus(row.get("status") or MaintenanceStatus.COMPLETED.value),
            is_deleted=bool(row.get("is_deleted")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "truck_id": self.truck_id,
            "service_type": self.service_type,
            "date_performed": _iso(self.date_performed),
            "parts_cost": round(self.parts_cost, 2),
            "labor_cost": round(self.labor_cost, 2),
            "total_cost": round(self.total_cost, 2),
            "downtime_hours": self.downtime_hours,
            "was_predicted": self.was_predicted,
            "failure_mode": self.failure_mode,
            "status": self.status.value,
        }


@dataclass
class SensorReading:
    """One point of a per-truck, per-sensor time series"""

    truck_id: str
    sensor_type: SensorType
    value: float
    timestamp: datetime
    unit: Optional[str] = None
    is_anomaly: bool = False
    confidence: Optional[float] = None
    id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SensorReading":
        confidence = row.get("confidence")
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            truck_id=str(row["truck_id"]),
            sensor_type=SensorType(row["sensor_type"]),
            value=float(row["value"]),
            unit=row.get("unit"),
            timestamp=as_utc(row["timestamp"]),
            is_anomaly=bool(row.get("is_anomaly")),
            confidence=float(confidence) if confidence is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "truck_id": self.truck_id,
            "sensor_type": self.sensor_type.value,
            "value": self.value,
            "unit": self.unit,
            "timestamp": _iso(self.timestamp),
            "is_anomaly": self.is_anomaly,
            "confidence": self.confidence,
        }


@dataclass
class Truck:
    """
    A fleet vehicle with its recent history attached.

    ``health_score`` and ``risk_level`` are written only by the fleet alert
    generator; everything else belongs to the fleet-management collaborator.
    """

    id: str
    vin: str
    make: str
    model: str
    year: int
    current_mileage: float = 0.0
    fuel_efficiency: Optional[float] = None
    engine_hours: Optional[float] = None
    last_oil_change: Optional[datetime] = None
    last_inspection: Optional[datetime] = None
    health_score: Optional[int] = None
    risk_level: Optional[RiskLevel] = None
    status: TruckStatus = TruckStatus.ACTIVE
    is_deleted: bool = False

    # Most recent first
    maintenance_records: List[MaintenanceRecord] = field(default_factory=list)
    sensor_readings: List[SensorReading] = field(default_factory=list)

    def __post_init__(self):
        # Non-positive mpg means no reading
        if self.fuel_efficiency is not None and self.fuel_efficiency <= 0:
            self.fuel_efficiency = None

    def age_years(self, as_of: Optional[datetime] = None) -> int:
        """Whole years since the model year; never negative."""
        current_year = (as_of or utc_now()).year
        return max(0, current_year - self.year)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Truck":
        fuel_efficiency = row.get("fuel_efficiency")
        engine_hours = row.get("engine_hours")
        health_score = row.get("health_score")
        risk_level = row.get("risk_level")
        return cls(
            id=str(row["id"]),
            vin=row.get("vin") or "",
            make=row.get("make") or "",
            model=row.get("model") or "",
            year=int(row["year"]),
            current_mileage=float(row.get("current_mileage") or 0.0),
            fuel_efficiency=float(fuel_efficiency) if fuel_efficiency is not None else None,
            engine_hours=float(engine_hours) if engine_hours is not None else None,
            last_oil_change=as_utc(row.get("last_oil_change")),
            last_inspection=as_utc(row.get("last_inspection")),
            health_score=int(health_score) if health_score is not None else None,
            risk_level=RiskLevel(risk_level) if risk_level else None,
            status=TruckStatus(row.get("status") or TruckStatus.ACTIVE.value),
            is_deleted=bool(row.get("is_deleted")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "vin": self.vin,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "current_mileage": self.current_mileage,
            "fuel_efficiency": self.fuel_efficiency,
            "engine_hours": self.engine_hours,
            "last_oil_change": _iso(self.last_oil_change),
            "last_inspection": _iso(self.last_inspection),
            "health_score": self.health_score,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "status": self.status.value,
        }


# ══════════════════════════════════════════════════════════════════════════════
# PREDICTION OUTPUT
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class Prediction:
    """Failure-risk estimate for one subsystem"""

    type: PredictionType
    probability: float  # 0-1, capped per model
    timeframe: str
    recommended_action: str
    cost_impact: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "probability": round(self.probability, 4),
            "timeframe": self.timeframe,
            "recommended_action": self.recommended_action,
            "cost_impact": round(self.cost_impact, 2),
        }


@dataclass
class NextMaintenance:
    oil_change: Optional[datetime] = None
    inspection: Optional[datetime] = None
    tire_rotation: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "oil_change": _iso(self.oil_change),
            "inspection": _iso(self.inspection),
            "tire_rotation": _iso(self.tire_rotation),
        }


@dataclass
class PredictionResult:
    """Per-truck analysis result; returned to the caller, never persisted as-is"""

    truck_id: str
    risk_level: RiskLevel
    health_score: int
    predictions: List[Prediction] = field(default_factory=list)
    next_maintenance: NextMaintenance = field(default_factory=NextMaintenance)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "truck_id": self.truck_id,
            "risk_level": self.risk_level.value,
            "health_score": self.health_score,
            "predictions": [p.to_dict() for p in self.predictions],
            "next_maintenance": self.next_maintenance.to_dict(),
        }


@dataclass
class PredictiveAlert:
    """Persisted notice of a high-probability predicted failure"""

    truck_id: str
    title: str
    description: str
    severity: AlertSeverity
    confidence: float
    predicted_failure_date: datetime
    recommended_action: str
    cost_impact: float
    probability: float
    alert_type: str = PREDICTIVE_FAILURE_ALERT
    is_resolved: bool = False
    created_at: datetime = field(default_factory=utc_now)
    id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PredictiveAlert":
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            truck_id=str(row["truck_id"]),
            alert_type=row.get("alert_type") or PREDICTIVE_FAILURE_ALERT,
            title=row["title"],
            description=row.get("description") or "",
            severity=AlertSeverity(row["severity"]),
            confidence=float(row.get("confidence") or 0.0),
            predicted_failure_date=as_utc(row.get("predicted_failure_date")),
            recommended_action=row.get("recommended_action") or "",
            cost_impact=float(row.get("cost_impact") or 0.0),
            probability=float(row.get("probability") or 0.0),
            is_resolved=bool(row.get("is_resolved")),
            created_at=as_utc(row.get("created_at")) or utc_now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "truck_id": self.truck_id,
            "alert_type": self.alert_type,
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "confidence": round(self.confidence, 4),
            "predicted_failure_date": _iso(self.predicted_failure_date),
            "recommended_action": self.recommended_action,
            "cost_impact": round(self.cost_impact, 2),
            "probability": round(self.probability, 4),
            "is_resolved": self.is_resolved,
            "created_at": _iso(self.created_at),
        }


# ══════════════════════════════════════════════════════════════════════════════
# OPTIMIZATION OUTPUT
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class OptimizationConstraints:
    """Operating constraints passed by the caller of the optimizer"""

    max_daily_hours: float = 12
    min_rest_time: float = 8
    fuel_cost_per_gallon: float = 3.50
    labor_cost_per_hour: float = 65
    maintenance_priority: MaintenancePriority = MaintenancePriority.COST


@dataclass
class RecommendationImpact:
    cost_savings: float = 0.0
    downtime_reduction: float = 0.0
    efficiency_improvement: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "cost_savings": round(self.cost_savings, 2),
            "downtime_reduction": round(self.downtime_reduction, 2),
            "efficiency_improvement": round(self.efficiency_improvement, 2),
        }


@dataclass
class OptimizationRecommendation:
    type: RecommendationType
    title: str
    description: str
    impact: RecommendationImpact
    priority: Priority
    implementation: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "impact": self.impact.to_dict(),
            "priority": self.priority.value,
            "implementation": list(self.implementation),
        }


@dataclass
class OptimizationSummary:
    total_cost_savings: float = 0.0
    total_downtime_reduction: float = 0.0
    total_efficiency_improvement: float = 0.0
    implementation_complexity: ImplementationComplexity = ImplementationComplexity.LOW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cost_savings": round(self.total_cost_savings, 2),
            "total_downtime_reduction": round(self.total_downtime_reduction, 2),
            "total_efficiency_improvement": round(self.total_efficiency_improvement, 2),
            "implementation_complexity": self.implementation_complexity.value,
        }


@dataclass
class OptimizationResult:
    recommendations: List[OptimizationRecommendation]
    summary: OptimizationSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "summary": self.summary.to_dict(),
        }
