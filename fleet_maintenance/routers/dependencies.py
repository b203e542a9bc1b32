"""
Request-scoped accessors for the components wired in ``main.create_app``.

Routers never build repositories themselves; they read the instances stored
on ``app.state`` so tests can swap in fakes.
"""

from fastapi import Request

from fleet_maintenance.orchestrators import FleetAlertGenerator, TruckHealthAnalyzer
from fleet_maintenance.services import AnalyticsAggregator, FleetOptimizer


def get_analyzer(request: Request) -> TruckHealthAnalyzer:
    return request.app.state.orchestrators["analyzer"]


def get_alert_generator(request: Request) -> FleetAlertGenerator:
    return request.app.state.orchestrators["alerts"]


def get_analytics(request: Request) -> AnalyticsAggregator:
    return request.app.state.services["analytics"]


def get_optimizer(request: Request) -> FleetOptimizer:
    return request.app.state.services["optimizer"]


def get_alert_repository(request: Request):
    return request.app.state.repositories["alert"]
