"""Service layer: anomaly detection, scoring, prediction, analytics and optimization."""

from .analytics_service import AnalyticsAggregator
from .anomaly_detector import SensorAnomalyDetector
from .failure_predictor import CostEstimator, FailurePredictor, get_timeframe, timeframe_to_days
from .fleet_optimizer import FleetOptimizer
from .health_scorer import HealthBreakdown, HealthScorer
from .maintenance_scheduler import MaintenanceScheduler
from .risk_classifier import RiskClassifier
from .utilization import estimate_utilization

__all__ = [
    "AnalyticsAggregator",
    "CostEstimator",
    "FailurePredictor",
    "FleetOptimizer",
    "HealthBreakdown",
    "HealthScorer",
    "MaintenanceScheduler",
    "RiskClassifier",
    "SensorAnomalyDetector",
    "estimate_utilization",
    "get_timeframe",
    "timeframe_to_days",
]
