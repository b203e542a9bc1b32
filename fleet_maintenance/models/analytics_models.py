"""
Analytics Data Models
=====================

Result records of the analytics aggregator. All of them are plain
dataclasses with a ``to_dict`` for the HTTP layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class TimeSeriesPoint:
    """One monthly bucket (``period`` is YYYY-MM)"""

    period: str
    value: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"period": self.period, "value": round(self.value, 2), "count": self.count}


@dataclass
class DowntimeAnalysis:
    total_downtime: float = 0.0
    average_downtime_per_record: float = 0.0
    downtime_by_reason: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_downtime": round(self.total_downtime, 2),
            "average_downtime_per_record": round(self.average_downtime_per_record, 2),
            "downtime_by_reason": self.downtime_by_reason,
        }


@dataclass
class AccuracyBreakdown:
    total: int = 0
    accurate: int = 0
    rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "accurate": self.accurate, "rate": round(self.rate, 4)}


@dataclass
class PredictiveAccuracy:
    """
    Outcome of predicted maintenance. A prediction counts as accurate when
    the resulting record had less than 4 hours of downtime.
    """

    total_predictions: int = 0
    accurate_predictions: int = 0
    accuracy_rate: float = 0.0
    accuracy_by_type: Dict[str, AccuracyBreakdown] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_predictions": self.total_predictions,
            "accurate_predictions": self.accurate_predictions,
            "accuracy_rate": round(self.accuracy_rate, 4),
            "accuracy_by_type": {k: v.to_dict() for k, v in self.accuracy_by_type.items()},
        }


@dataclass
class MaintenanceAnalytics:
    total_cost: float
    total_records: int
    average_cost_per_record: float
    cost_by_type: Dict[str, float]
    cost_by_month: List[TimeSeriesPoint]
    downtime_analysis: DowntimeAnalysis
    predictive_accuracy: PredictiveAccuracy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cost": round(self.total_cost, 2),
            "total_records": self.total_records,
            "average_cost_per_record": round(self.average_cost_per_record, 2),
            "cost_by_type": {k: round(v, 2) for k, v in self.cost_by_type.items()},
            "cost_by_month": [p.to_dict() for p in self.cost_by_month],
            "downtime_analysis": self.downtime_analysis.to_dict(),
            "predictive_accuracy": self.predictive_accuracy.to_dict(),
        }


@dataclass
class UtilizationAnalysis:
    """
    Utilization estimated from recorded engine hours.

    ``average_utilization`` is None when no truck reports engine hours.
    """

    average_utilization: Optional[float] = None
    utilization_by_truck: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_utilization": (
                round(self.average_utilization, 4)
                if self.average_utilization is not None
                else None
            ),
            "utilization_by_truck": {
                k: round(v, 4) for k, v in self.utilization_by_truck.items()
            },
        }


@dataclass
class FleetAnalytics:
    total_trucks: int
    active_trucks: int
    average_health_score: float
    health_distribution: Dict[str, int]
    risk_distribution: Dict[str, int]
    utilization: UtilizationAnalysis
    cost_per_mile: float
    total_mileage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_trucks": self.total_trucks,
            "active_trucks": self.active_trucks,
            "average_health_score": round(self.average_health_score, 1),
            "health_distribution": self.health_distribution,
            "risk_distribution": self.risk_distribution,
            "utilization": self.utilization.to_dict(),
            "cost_per_mile": round(self.cost_per_mile, 4),
            "total_mileage": self.total_mileage,
        }


@dataclass
class BudgetVariance:
    budgeted: float
    actual: float
    variance: float
    variance_percent: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "budgeted": round(self.budgeted, 2),
            "actual": round(self.actual, 2),
            "variance": round(self.variance, 2),
            "variance_percent": round(self.variance_percent, 1),
        }


@dataclass
class ROIAnalysis:
    maintenance_investment: float
    savings_from_prevention: float
    roi: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "maintenance_investment": round(self.maintenance_investment, 2),
            "savings_from_prevention": round(self.savings_from_prevention, 2),
            "roi": round(self.roi, 4),
        }


@dataclass
class FinancialAnalytics:
    total_maintenance_cost: float
    total_fuel_cost: float
    total_labor_cost: float
    total_parts_cost: float
    cost_per_truck: float
    cost_per_mile: float
    cost_trends: List[TimeSeriesPoint]
    budget_variance: BudgetVariance
    roi: ROIAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_maintenance_cost": round(self.total_maintenance_cost, 2),
            "total_fuel_cost": round(self.total_fuel_cost, 2),
            "total_labor_cost": round(self.total_labor_cost, 2),
            "total_parts_cost": round(self.total_parts_cost, 2),
            "cost_per_truck": round(self.cost_per_truck, 2),
            "cost_per_mile": round(self.cost_per_mile, 4),
            "cost_trends": [p.to_dict() for p in self.cost_trends],
            "budget_variance": self.budget_variance.to_dict(),
            "roi": self.roi.to_dict(),
        }


@dataclass
class Insight:
    type: str  # "positive", "negative", "recommendation"
    category: str
    title: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.type,
            "category": self.category,
            "title": self.title,
            "description": self.description,
        }


@dataclass
class ExecutiveSummary:
    overview: str
    key_highlights: List[str] = field(default_factory=list)
    key_challenges: List[str] = field(default_factory=list)
    top_recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overview": self.overview,
            "key_highlights": self.key_highlights,
            "key_challenges": self.key_challenges,
            "top_recommendations": self.top_recommendations,
        }


@dataclass
class ReportKPIs:
    fleet_health: float
    cost_efficiency: float
    maintenance_efficiency: float
    predictive_accuracy: float
    fleet_utilization: Optional[float]
    roi: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fleet_health": round(self.fleet_health, 1),
            "cost_efficiency": round(self.cost_efficiency, 4),
            "maintenance_efficiency": round(self.maintenance_efficiency, 2),
            "predictive_accuracy": round(self.predictive_accuracy, 4),
            "fleet_utilization": (
                round(self.fleet_utilization, 4)
                if self.fleet_utilization is not None
                else None
            ),
            "roi": round(self.roi, 4),
        }


@dataclass
class ComprehensiveReport:
    start_date: datetime
    end_date: datetime
    executive_summary: ExecutiveSummary
    kpis: ReportKPIs
    maintenance_analytics: MaintenanceAnalytics
    fleet_analytics: FleetAnalytics
    financial_analytics: FinancialAnalytics
    insights: List[Insight]
    generated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": {
                "start_date": self.start_date.isoformat(),
                "end_date": self.end_date.isoformat(),
            },
            "executive_summary": self.executive_summary.to_dict(),
            "kpis": self.kpis.to_dict(),
            "maintenance_analytics": self.maintenance_analytics.to_dict(),
            "fleet_analytics": self.fleet_analytics.to_dict(),
            "financial_analytics": self.financial_analytics.to_dict(),
            "insights": [i.to_dict() for i in self.insights],
            "generated_at": self.generated_at.isoformat(),
        }
