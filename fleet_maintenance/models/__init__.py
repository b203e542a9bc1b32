"""Dataclass models shared by repositories, services and orchestrators."""

from .analytics_models import (
    AccuracyBreakdown,
    BudgetVariance,
    ComprehensiveReport,
    DowntimeAnalysis,
    ExecutiveSummary,
    FinancialAnalytics,
    FleetAnalytics,
    Insight,
    MaintenanceAnalytics,
    PredictiveAccuracy,
    ReportKPIs,
    ROIAnalysis,
    TimeSeriesPoint,
    UtilizationAnalysis,
)
from .fleet_models import (
    PREDICTIVE_FAILURE_ALERT,
    AlertSeverity,
    ImplementationComplexity,
    MaintenancePriority,
    MaintenanceRecord,
    MaintenanceStatus,
    NextMaintenance,
    OptimizationConstraints,
    OptimizationRecommendation,
    OptimizationResult,
    OptimizationSummary,
    Prediction,
    PredictionResult,
    PredictionType,
    PredictiveAlert,
    Priority,
    RecommendationImpact,
    RecommendationType,
    RiskLevel,
    SensorReading,
    SensorType,
    Truck,
    TruckStatus,
)

__all__ = [
    "PREDICTIVE_FAILURE_ALERT",
    "AccuracyBreakdown",
    "AlertSeverity",
    "BudgetVariance",
    "ComprehensiveReport",
    "DowntimeAnalysis",
    "ExecutiveSummary",
    "FinancialAnalytics",
    "FleetAnalytics",
    "ImplementationComplexity",
    "Insight",
    "MaintenanceAnalytics",
    "MaintenancePriority",
    "MaintenanceRecord",
    "MaintenanceStatus",
    "NextMaintenance",
    "OptimizationConstraints",
    "OptimizationRecommendation",
    "OptimizationResult",
    "OptimizationSummary",
    "Prediction",
    "PredictionResult",
    "PredictionType",
    "PredictiveAccuracy",
    "PredictiveAlert",
    "Priority",
    "RecommendationImpact",
    "RecommendationType",
    "ReportKPIs",
    "RiskLevel",
    "ROIAnalysis",
    "SensorReading",
    "SensorType",
    "TimeSeriesPoint",
    "Truck",
    "TruckStatus",
    "UtilizationAnalysis",
]
