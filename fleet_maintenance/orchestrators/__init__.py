"""Orchestrator layer for coordinating services and repositories."""

from .fleet_alert_generator import FleetAlertGenerator
from .truck_health_analyzer import TruckHealthAnalyzer

__all__ = [
    "FleetAlertGenerator",
    "TruckHealthAnalyzer",
]
