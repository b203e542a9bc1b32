"""
Analytics Service - Maintenance, Fleet and Financial Analytics

Read-only aggregations over maintenance records and trucks, plus a
comprehensive report that combines them with KPIs, rule-based insights and
an executive summary.

Predictive accuracy and prevented breakdowns share the same proxy: a
predicted record counts as accurate when it caused less than 4 hours of
downtime.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from fleet_maintenance.models.analytics_models import (
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
from fleet_maintenance.models.fleet_models import (
    MaintenanceRecord,
    RiskLevel,
    Truck,
    TruckStatus,
    utc_now,
)
from fleet_maintenance.services.health_scorer import DAYS_PER_MONTH
from fleet_maintenance.services.utilization import estimate_utilization

logger = structlog.get_logger(__name__)

# Downtime below this means the predicted maintenance prevented a breakdown
ACCURATE_DOWNTIME_HOURS = 4

DEFAULT_TREND_DAYS = 365
UNKNOWN_FAILURE_MODE = "Unknown"

REPORT_PERIODS = {
    "1month": timedelta(days=DAYS_PER_MONTH),
    "3months": timedelta(days=3 * DAYS_PER_MONTH),
    "6months": timedelta(days=6 * DAYS_PER_MONTH),
    "1year": timedelta(days=365),
}
DEFAULT_REPORT_PERIOD = "6months"


def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def _is_prevented(record: MaintenanceRecord) -> bool:
    return (record.downtime_hours or 0) < ACCURATE_DOWNTIME_HOURS


def _health_bucket(score: Optional[int]) -> str:
    value = score or 0
    if value >= 80:
        return "excellent"
    if value >= 60:
        return "good"
    if value >= 40:
        return "fair"
    return "poor"


class AnalyticsAggregator:
    """
    Fleet analytics combining truck and maintenance data.

    Example Usage:
        aggregator = AnalyticsAggregator(truck_repo, maintenance_repo)
        report = aggregator.generate_comprehensive_report()
        print(report.executive_summary.overview)
    """

    def __init__(
        self,
        truck_repo,
        maintenance_repo,
        fuel_price_per_gallon: float = 3.50,
        default_fuel_efficiency_mpg: float = 20.0,
        breakdown_cost: float = 2500.0,
        budget_buffer_pct: float = 0.10,
    ):
        """
        Args:
            truck_repo: TruckRepository instance
            maintenance_repo: MaintenanceRepository instance
            fuel_price_per_gallon: Price used for the fuel cost estimate
            default_fuel_efficiency_mpg: Assumed mpg for trucks without data
            breakdown_cost: Average cost of one unplanned breakdown
            budget_buffer_pct: Buffer on top of actual spend used as budget
        """
        self.truck_repo = truck_repo
        self.maintenance_repo = maintenance_repo
        self.fuel_price_per_gallon = fuel_price_per_gallon
        self.default_fuel_efficiency_mpg = default_fuel_efficiency_mpg
        self.breakdown_cost = breakdown_cost
        self.budget_buffer_pct = budget_buffer_pct
        logger.debug("AnalyticsAggregator initialized")

    # ═══════════════════════════════════════════════════════════════════════
    # PERIODS
    # ═══════════════════════════════════════════════════════════════════════

    @staticmethod
    def resolve_period(
        period: Optional[str], as_of: Optional[datetime] = None
    ) -> Tuple[datetime, datetime]:
        """
        Translate a named period (1month, 3months, 6months, 1year) into a
        (start, end) window ending now. Unknown names fall back to 6 months.
        """
        end = as_of or utc_now()
        span = REPORT_PERIODS.get(period or "", REPORT_PERIODS[DEFAULT_REPORT_PERIOD])
        return end - span, end

    # ═══════════════════════════════════════════════════════════════════════
    # MAINTENANCE ANALYTICS
    # ═══════════════════════════════════════════════════════════════════════

    def get_maintenance_analytics(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        as_of: Optional[datetime] = None,
    ) -> MaintenanceAnalytics:
        """Cost, downtime and predictive-accuracy statistics for a window."""
        records = self.maintenance_repo.get_records(start_date, end_date)

        total_cost = sum(r.total_cost for r in records)
        cost_by_type: Dict[str, float] = defaultdict(float)
        for record in records:
            cost_by_type[record.service_type] += record.total_cost

        analytics = MaintenanceAnalytics(
            total_cost=total_cost,
            total_records=len(records),
            average_cost_per_record=_safe_div(total_cost, len(records)),
            cost_by_type=dict(cost_by_type),
            cost_by_month=self._monthly_cost_trends(start_date, end_date, as_of),
            downtime_analysis=self.analyze_downtime(records),
            predictive_accuracy=self.analyze_predictive_accuracy(records),
        )
        logger.info(
            "maintenance_analytics_generated",
            records=analytics.total_records,
            total_cost=round(total_cost, 2),
        )
        return analytics

    def _monthly_cost_trends(
        self,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
        as_of: Optional[datetime] = None,
    ) -> List[TimeSeriesPoint]:
        end = end_date or as_of or utc_now()
        start = start_date or end - timedelta(days=DEFAULT_TREND_DAYS)
        records = self.maintenance_repo.get_records(start, end)
        return self.monthly_series(records)

    @staticmethod
    def monthly_series(records: Iterable[MaintenanceRecord]) -> List[TimeSeriesPoint]:
        """Total cost and record count per YYYY-MM, oldest month first."""
        totals: Dict[str, float] = defaultdict(float)
        counts: Dict[str, int] = defaultdict(int)
        for record in records:
            month = record.date_performed.strftime("%Y-%m")
            totals[month] += record.total_cost
            counts[month] += 1
        return [
            TimeSeriesPoint(period=month, value=totals[month], count=counts[month])
            for month in sorted(totals)
        ]

    @staticmethod
    def analyze_downtime(records: List[MaintenanceRecord]) -> DowntimeAnalysis:
        total = sum(r.downtime_hours or 0 for r in records)
        by_reason: Dict[str, float] = defaultdict(float)
        for record in records:
            by_reason[record.failure_mode or UNKNOWN_FAILURE_MODE] += record.downtime_hours or 0
        return DowntimeAnalysis(
            total_downtime=total,
            average_downtime_per_record=_safe_div(total, len(records)),
            downtime_by_reason=dict(by_reason),
        )

    @staticmethod
    def analyze_predictive_accuracy(records: List[MaintenanceRecord]) -> PredictiveAccuracy:
        predicted = [r for r in records if r.was_predicted]
        if not predicted:
            return PredictiveAccuracy()

        by_type: Dict[str, AccuracyBreakdown] = {}
        for record in predicted:
            bucket = by_type.setdefault(
                record.failure_mode or UNKNOWN_FAILURE_MODE, AccuracyBreakdown()
            )
            bucket.total += 1
            if _is_prevented(record):
                bucket.accurate += 1
        for bucket in by_type.values():
            bucket.rate = _safe_div(bucket.accurate, bucket.total)

        accurate = sum(1 for r in predicted if _is_prevented(r))
        return PredictiveAccuracy(
            total_predictions=len(predicted),
            accurate_predictions=accurate,
            accuracy_rate=_safe_div(accurate, len(predicted)),
            accuracy_by_type=by_type,
        )

    # ═══════════════════════════════════════════════════════════════════════
    # FLEET ANALYTICS
    # ═══════════════════════════════════════════════════════════════════════

    def get_fleet_analytics(self, as_of: Optional[datetime] = None) -> FleetAnalytics:
        """Health, risk and utilization picture of every non-deleted truck."""
        now = as_of or utc_now()
        trucks: List[Truck] = self.truck_repo.get_trucks()
        truck_ids = {t.id for t in trucks}

        total_mileage = sum(t.current_mileage or 0 for t in trucks)
        # A truck that was never scored counts as average
        average_health = _safe_div(
            sum(t.health_score if t.health_score is not None else 50 for t in trucks),
            len(trucks),
        )

        health_distribution = {"excellent": 0, "good": 0, "fair": 0, "poor": 0}
        for truck in trucks:
            health_distribution[_health_bucket(truck.health_score)] += 1

        risk_distribution = {level.value: 0 for level in RiskLevel}
        for truck in trucks:
            if truck.risk_level is not None:
                risk_distribution[truck.risk_level.value] += 1

        maintenance_cost = sum(
            r.total_cost
            for r in self.maintenance_repo.get_records()
            if r.truck_id in truck_ids
        )

        return FleetAnalytics(
            total_trucks=len(trucks),
            active_trucks=sum(1 for t in trucks if t.status == TruckStatus.ACTIVE),
            average_health_score=average_health,
            health_distribution=health_distribution,
            risk_distribution=risk_distribution,
            utilization=self.analyze_utilization(trucks, now),
            cost_per_mile=_safe_div(maintenance_cost, total_mileage),
            total_mileage=total_mileage,
        )

    @staticmethod
    def analyze_utilization(
        trucks: List[Truck], as_of: Optional[datetime] = None
    ) -> UtilizationAnalysis:
        by_truck: Dict[str, float] = {}
        for truck in trucks:
            utilization = estimate_utilization(truck, as_of)
            if utilization is not None:
                by_truck[truck.id] = utilization
        average = sum(by_truck.values()) / len(by_truck) if by_truck else None
        return UtilizationAnalysis(average_utilization=average, utilization_by_truck=by_truck)

    # ═══════════════════════════════════════════════════════════════════════
    # FINANCIAL ANALYTICS
    # ═══════════════════════════════════════════════════════════════════════

    def get_financial_analytics(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        as_of: Optional[datetime] = None,
    ) -> FinancialAnalytics:
        """Cost breakdown, budget variance and preventive-maintenance ROI."""
        records = self.maintenance_repo.get_records(start_date, end_date)
        trucks: List[Truck] = self.truck_repo.get_trucks()

        total_maintenance = sum(r.total_cost for r in records)
        total_mileage = sum(t.current_mileage or 0 for t in trucks)

        return FinancialAnalytics(
            total_maintenance_cost=total_maintenance,
            total_fuel_cost=self.estimate_fuel_cost(trucks),
            total_labor_cost=sum(r.labor_cost for r in records),
            total_parts_cost=sum(r.parts_cost for r in records),
            cost_per_truck=_safe_div(total_maintenance, len(trucks)),
            cost_per_mile=_safe_div(total_maintenance, total_mileage),
            cost_trends=self._monthly_cost_trends(start_date, end_date, as_of),
            budget_variance=self.budget_variance(total_maintenance),
            roi=self.calculate_roi(records),
        )

    def estimate_fuel_cost(self, trucks: List[Truck]) -> float:
        """Lifetime fuel spend from odometer miles and average fuel economy."""
        if not trucks:
            return 0.0
        total_mileage = sum(t.current_mileage or 0 for t in trucks)
        average_mpg = sum(
            t.fuel_efficiency if t.fuel_efficiency is not None else self.default_fuel_efficiency_mpg
            for t in trucks
        ) / len(trucks)
        gallons = _safe_div(total_mileage, average_mpg)
        return gallons * self.fuel_price_per_gallon

    def budget_variance(self, actual: float) -> BudgetVariance:
        budgeted = actual * (1 + self.budget_buffer_pct)
        variance = budgeted - actual
        return BudgetVariance(
            budgeted=budgeted,
            actual=actual,
            variance=variance,
            variance_percent=_safe_div(variance, actual) * 100,
        )

    def calculate_roi(self, records: List[MaintenanceRecord]) -> ROIAnalysis:
        investment = sum(r.total_cost for r in records)
        prevented = sum(1 for r in records if r.was_predicted and _is_prevented(r))
        savings = prevented * self.breakdown_cost
        return ROIAnalysis(
            maintenance_investment=investment,
            savings_from_prevention=savings,
            roi=_safe_div(savings - investment, investment),
        )

    # ═══════════════════════════════════════════════════════════════════════
    # COMPREHENSIVE REPORT
    # ═══════════════════════════════════════════════════════════════════════

    def generate_comprehensive_report(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        as_of: Optional[datetime] = None,
    ) -> ComprehensiveReport:
        """
        Combine the three analytics with KPIs, insights and an executive summary.

        Args:
            start_date: Window start; defaults to one year before end_date
            end_date: Window end; defaults to now
        """
        now = as_of or utc_now()
        maintenance = self.get_maintenance_analytics(start_date, end_date, as_of=now)
        fleet = self.get_fleet_analytics(as_of=now)
        financial = self.get_financial_analytics(start_date, end_date, as_of=now)

        kpis = ReportKPIs(
            fleet_health=fleet.average_health_score,
            cost_efficiency=financial.cost_per_mile,
            maintenance_efficiency=maintenance.average_cost_per_record,
            predictive_accuracy=maintenance.predictive_accuracy.accuracy_rate,
            fleet_utilization=fleet.utilization.average_utilization,
            roi=financial.roi.roi,
        )
        insights = self.generate_insights(maintenance, fleet, financial)

        period_end = end_date or now
        period_start = start_date or period_end - timedelta(days=DEFAULT_TREND_DAYS)

        logger.info(
            "comprehensive_report_generated",
            start=period_start.isoformat(),
            end=period_end.isoformat(),
            insights=len(insights),
        )
        return ComprehensiveReport(
            start_date=period_start,
            end_date=period_end,
            executive_summary=self.build_executive_summary(insights),
            kpis=kpis,
            maintenance_analytics=maintenance,
            fleet_analytics=fleet,
            financial_analytics=financial,
            insights=insights,
            generated_at=utc_now(),
        )

    @staticmethod
    def generate_insights(
        maintenance: MaintenanceAnalytics,
        fleet: FleetAnalytics,
        financial: FinancialAnalytics,
    ) -> List[Insight]:
        insights: List[Insight] = []

        health = fleet.average_health_score
        if health > 80:
            insights.append(
                Insight(
                    type="positive",
                    category="Fleet Health",
                    title="Excellent Fleet Health",
                    description=(
                        f"Fleet health score of {health:.1f}% indicates "
                        "well-maintained vehicles."
                    ),
                )
            )
        elif health < 60:
            insights.append(
                Insight(
                    type="negative",
                    category="Fleet Health",
                    title="Fleet Health Concerns",
                    description=(
                        f"Fleet health score of {health:.1f}% requires attention "
                        "to prevent breakdowns."
                    ),
                )
            )

        if financial.cost_per_mile > 0.50:
            insights.append(
                Insight(
                    type="negative",
                    category="Cost Efficiency",
                    title="High Cost Per Mile",
                    description=(
                        f"Cost per mile of ${financial.cost_per_mile:.2f} is above "
                        "industry average."
                    ),
                )
            )

        accuracy = maintenance.predictive_accuracy.accuracy_rate
        if accuracy > 0.80:
            insights.append(
                Insight(
                    type="positive",
                    category="Predictive Maintenance",
                    title="High Prediction Accuracy",
                    description=(
                        f"Predictive maintenance accuracy of {accuracy * 100:.1f}% "
                        "demonstrates effective AI implementation."
                    ),
                )
            )

        if financial.roi.roi > 2.0:
            insights.append(
                Insight(
                    type="positive",
                    category="Financial Performance",
                    title="Excellent ROI",
                    description=(
                        f"Maintenance ROI of {financial.roi.roi * 100:.1f}% indicates "
                        "strong cost optimization."
                    ),
                )
            )

        insights.append(
            Insight(
                type="recommendation",
                category="Optimization",
                title="Implement Predictive Maintenance",
                description="Expand predictive maintenance program to reduce unplanned downtime.",
            )
        )
        insights.append(
            Insight(
                type="recommendation",
                category="Cost Management",
                title="Optimize Parts Procurement",
                description=(
                    "Negotiate bulk purchasing discounts and optimize inventory management."
                ),
            )
        )
        return insights

    @staticmethod
    def build_executive_summary(insights: List[Insight]) -> ExecutiveSummary:
        positive = [i for i in insights if i.type == "positive"]
        negative = [i for i in insights if i.type == "negative"]
        recommendations = [i for i in insights if i.type == "recommendation"]

        focus_areas = ", ".join(r.title.lower() for r in recommendations[:3])
        overview = (
            f"Fleet performance shows {len(positive)} strengths and {len(negative)} "
            f"areas for improvement. Key focus areas include {focus_areas}."
        )
        return ExecutiveSummary(
            overview=overview,
            key_highlights=[i.title for i in positive[:3]],
            key_challenges=[i.title for i in negative[:3]],
            top_recommendations=[i.title for i in recommendations[:3]],
        )
