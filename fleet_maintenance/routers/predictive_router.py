"""
Predictive Maintenance Router

Endpoints:
- GET  /api/predictive/trucks/{truck_id}/health - Health analysis of one truck
- POST /api/predictive/alerts/generate - Fleet-wide alert generation run
- POST /api/predictive/trucks/{truck_id}/sensor-readings - Record a reading
- GET  /api/predictive/alerts - Unresolved alerts, optionally for one truck
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from fleet_maintenance.models.fleet_models import SensorType, as_utc
from fleet_maintenance.orchestrators import FleetAlertGenerator, TruckHealthAnalyzer
from fleet_maintenance.routers.dependencies import (
    get_alert_generator,
    get_alert_repository,
    get_analyzer,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/predictive", tags=["Predictive Maintenance"])


class SensorReadingIn(BaseModel):
    """New sensor value reported for a truck"""

    sensor_type: SensorType
    value: float
    unit: Optional[str] = Field(None, max_length=20)
    timestamp: Optional[datetime] = Field(
        None, description="Reading time; defaults to now"
    )


@router.get("/trucks/{truck_id}/health")
def get_truck_health(
    truck_id: str,
    analyzer: TruckHealthAnalyzer = Depends(get_analyzer),
):
    """
    Health score, risk level, surfaced failure predictions and next
    maintenance dates for one truck. 404 when the truck does not exist.
    """
    result = analyzer.analyze(truck_id)
    return result.to_dict()


@router.post("/alerts/generate")
def generate_alerts(generator: FleetAlertGenerator = Depends(get_alert_generator)):
    """Analyze every active truck and return only the alerts created by this run."""
    alerts = generator.generate_fleet_wide_alerts()
    logger.info(f"Alert generation run created {len(alerts)} alerts")
    return {
        "created": len(alerts),
        "alerts": [a.to_dict() for a in alerts],
    }


@router.post("/trucks/{truck_id}/sensor-readings", status_code=201)
def record_sensor_reading(
    truck_id: str,
    payload: SensorReadingIn,
    analyzer: TruckHealthAnalyzer = Depends(get_analyzer),
):
    """Store a sensor reading, flagged when it is a statistical outlier."""
    reading = analyzer.record_sensor_reading(
        truck_id,
        payload.sensor_type,
        payload.value,
        unit=payload.unit,
        timestamp=as_utc(payload.timestamp),
    )
    return reading.to_dict()


@router.get("/alerts")
def list_unresolved_alerts(
    truck_id: Optional[str] = Query(None, description="Restrict to one truck"),
    alert_repo=Depends(get_alert_repository),
):
    alerts = alert_repo.get_unresolved(truck_id)
    return {"count": len(alerts), "alerts": [a.to_dict() for a in alerts]}
