"""
Fleet Optimizer Service

Rule-based optimization recommendations across four categories:

    MAINTENANCE_SCHEDULING  critical maintenance, preventive schedule
    ROUTE_OPTIMIZATION      fuel efficiency, route clustering
    FLEET_BALANCING         right-sizing, renewal of aging trucks
    COST_OPTIMIZATION       maintenance spend, fuel spend

Every rule is a deterministic function of simple fleet thresholds. The
merged list is ordered by priority rank, then by cost savings.
"""

from collections import Counter
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from fleet_maintenance.models.fleet_models import (
    ImplementationComplexity,
    MaintenanceRecord,
    OptimizationConstraints,
    OptimizationRecommendation,
    OptimizationResult,
    OptimizationSummary,
    Priority,
    RecommendationImpact,
    RecommendationType,
    RiskLevel,
    Truck,
    utc_now,
)
from fleet_maintenance.services.utilization import estimate_utilization

logger = structlog.get_logger(__name__)

RECENT_RECORDS_PER_TRUCK = 10
RECENT_FLEET_RECORDS = 100

# Per-truck savings assumptions ($ per year)
BREAKDOWN_COST = 2500
PREVENTIVE_SAVINGS = 500
FUEL_EFFICIENCY_SAVINGS = 1200
ROUTE_CLUSTERING_SAVINGS = 800
UNDERUTILIZED_TRUCK_COST = 8000
RENEWAL_SAVINGS = 3000
FUEL_MANAGEMENT_SAVINGS = 600

POOR_FUEL_EFFICIENCY_MPG = 15
GOOD_FUEL_EFFICIENCY_MPG = 20
UNDERUTILIZED_THRESHOLD = 0.30
RENEWAL_AGE_YEARS = 10
MAINTENANCE_SAVINGS_PCT = 0.15

SEASONS = ["Winter", "Spring", "Summer", "Fall"]


def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


class FleetOptimizer:
    """
    Generates and ranks fleet optimization recommendations.

    Example Usage:
        optimizer = FleetOptimizer(truck_repo, maintenance_repo)
        result = optimizer.optimize(OptimizationConstraints())
        for rec in result.recommendations:
            print(rec.priority.value, rec.title)
    """

    def __init__(self, truck_repo, maintenance_repo):
        self.truck_repo = truck_repo
        self.maintenance_repo = maintenance_repo
        logger.debug("FleetOptimizer initialized")

    def optimize(
        self,
        constraints: Optional[OptimizationConstraints] = None,
        as_of: Optional[datetime] = None,
    ) -> OptimizationResult:
        """Read the active fleet and recent maintenance, return ranked recommendations."""
        constraints = constraints or OptimizationConstraints()
        now = as_of or utc_now()

        trucks = self.truck_repo.get_active_trucks(
            maintenance_limit=RECENT_RECORDS_PER_TRUCK
        )
        records = self.maintenance_repo.get_records(limit=RECENT_FLEET_RECORDS)

        recommendations = self.generate_recommendations(trucks, records, now)
        summary = self.calculate_summary(recommendations)

        logger.info(
            "fleet_optimized",
            trucks=len(trucks),
            records=len(records),
            recommendations=len(recommendations),
            total_cost_savings=round(summary.total_cost_savings, 2),
            maintenance_priority=constraints.maintenance_priority.value,
        )
        return OptimizationResult(recommendations=recommendations, summary=summary)

    def generate_recommendations(
        self,
        trucks: List[Truck],
        records: List[MaintenanceRecord],
        as_of: Optional[datetime] = None,
    ) -> List[OptimizationRecommendation]:
        now = as_of or utc_now()
        recommendations: List[OptimizationRecommendation] = []
        recommendations.extend(self.optimize_maintenance_scheduling(trucks))
        recommendations.extend(self.optimize_routes(trucks))
        recommendations.extend(self.optimize_fleet_balance(trucks, now))
        recommendations.extend(self.optimize_costs(trucks, records))
        return self.rank(recommendations)

    @staticmethod
    def rank(
        recommendations: List[OptimizationRecommendation],
    ) -> List[OptimizationRecommendation]:
        """Priority rank descending, then cost savings descending (stable)."""
        return sorted(
            recommendations,
            key=lambda r: (-r.priority.rank, -r.impact.cost_savings),
        )

    # ═══════════════════════════════════════════════════════════════════════
    # MAINTENANCE SCHEDULING
    # ═══════════════════════════════════════════════════════════════════════

    def optimize_maintenance_scheduling(
        self, trucks: List[Truck]
    ) -> List[OptimizationRecommendation]:
        recommendations = []

        # A truck that was never scored is treated as unhealthy
        critical = [
            t
            for t in trucks
            if t.risk_level == RiskLevel.CRITICAL or (t.health_score or 0) < 40
        ]
        if critical:
            recommendations.append(
                OptimizationRecommendation(
                    type=RecommendationType.MAINTENANCE_SCHEDULING,
                    title="Critical Maintenance Scheduling",
                    description=(
                        f"{len(critical)} trucks require immediate maintenance "
                        "attention to prevent breakdowns"
                    ),
                    impact=RecommendationImpact(
                        cost_savings=len(critical) * BREAKDOWN_COST,
                        downtime_reduction=len(critical) * 8,
                        efficiency_improvement=15,
                    ),
                    priority=Priority.CRITICAL,
                    implementation=[
                        "Schedule maintenance for critical trucks within 24 hours",
                        "Prioritize high-risk components (engine, transmission, brakes)",
                        "Prepare backup vehicles for critical routes",
                        "Monitor trucks closely after maintenance",
                    ],
                )
            )

        downtime_reduction = 15
        recommendations.append(
            OptimizationRecommendation(
                type=RecommendationType.MAINTENANCE_SCHEDULING,
                title="Preventive Maintenance Optimization",
                description=(
                    "Optimized schedule can reduce unplanned downtime by "
                    f"{downtime_reduction}%"
                ),
                impact=RecommendationImpact(
                    cost_savings=len(trucks) * PREVENTIVE_SAVINGS,
                    downtime_reduction=downtime_reduction,
                    efficiency_improvement=12,
                ),
                priority=Priority.HIGH,
                implementation=[
                    "Implement new maintenance schedule based on usage patterns",
                    "Use predictive analytics to time maintenance optimally",
                    "Schedule maintenance during off-peak hours",
                    "Track maintenance effectiveness and adjust schedule",
                ],
            )
        )
        return recommendations

    # ═══════════════════════════════════════════════════════════════════════
    # ROUTES AND FUEL EFFICIENCY
    # ═══════════════════════════════════════════════════════════════════════

    def optimize_routes(self, trucks: List[Truck]) -> List[OptimizationRecommendation]:
        recommendations = []

        inefficient = [
            t
            for t in trucks
            if t.fuel_efficiency is not None and t.fuel_efficiency < POOR_FUEL_EFFICIENCY_MPG
        ]
        if inefficient:
            recommendations.append(
                OptimizationRecommendation(
                    type=RecommendationType.ROUTE_OPTIMIZATION,
                    title="Fuel Efficiency Improvement",
                    description=f"{len(inefficient)} trucks show poor fuel efficiency",
                    impact=RecommendationImpact(
                        cost_savings=len(inefficient) * FUEL_EFFICIENCY_SAVINGS,
                        downtime_reduction=0,
                        efficiency_improvement=8,
                    ),
                    priority=Priority.MEDIUM,
                    implementation=[
                        "Conduct fuel efficiency audits on underperforming trucks",
                        "Optimize routes to reduce idling and stop-and-go traffic",
                        "Implement driver training for fuel-efficient driving",
                        "Consider vehicle replacement for chronically inefficient trucks",
                    ],
                )
            )

        distance_reduction = 12
        recommendations.append(
            OptimizationRecommendation(
                type=RecommendationType.ROUTE_OPTIMIZATION,
                title="Route Clustering Optimization",
                description=(
                    "Optimize route assignments to reduce total travel distance by "
                    f"{distance_reduction}%"
                ),
                impact=RecommendationImpact(
                    cost_savings=len(trucks) * ROUTE_CLUSTERING_SAVINGS,
                    downtime_reduction=len(trucks) * 2,
                    efficiency_improvement=10,
                ),
                priority=Priority.MEDIUM,
                implementation=[
                    "Group nearby destinations together",
                    "Optimize delivery sequences",
                    "Use real-time traffic data for dynamic routing",
                    "Implement route optimization software",
                ],
            )
        )
        return recommendations

    # ═══════════════════════════════════════════════════════════════════════
    # FLEET BALANCE
    # ═══════════════════════════════════════════════════════════════════════

    def optimize_fleet_balance(
        self, trucks: List[Truck], as_of: Optional[datetime] = None
    ) -> List[OptimizationRecommendation]:
        now = as_of or utc_now()
        recommendations = []

        # Trucks without engine hours have unknown utilization and are skipped
        underutilized = []
        for truck in trucks:
            utilization = estimate_utilization(truck, now)
            if utilization is not None and utilization < UNDERUTILIZED_THRESHOLD:
                underutilized.append(truck)

        if underutilized:
            recommendations.append(
                OptimizationRecommendation(
                    type=RecommendationType.FLEET_BALANCING,
                    title="Fleet Right-Sizing",
                    description=(
                        f"{len(underutilized)} trucks are underutilized, consider "
                        "downsizing or reallocating"
                    ),
                    impact=RecommendationImpact(
                        cost_savings=len(underutilized) * UNDERUTILIZED_TRUCK_COST,
                        downtime_reduction=0,
                        efficiency_improvement=5,
                    ),
                    priority=Priority.MEDIUM,
                    implementation=[
                        "Sell or lease underutilized vehicles",
                        "Reallocate trucks to high-demand routes",
                        "Implement flexible scheduling to improve utilization",
                        "Consider rental options for peak demand periods",
                    ],
                )
            )

        aging = [t for t in trucks if t.age_years(now) > RENEWAL_AGE_YEARS]
        if aging:
            recommendations.append(
                OptimizationRecommendation(
                    type=RecommendationType.FLEET_BALANCING,
                    title="Fleet Renewal Program",
                    description=(
                        f"{len(aging)} trucks are over {RENEWAL_AGE_YEARS} years old, "
                        "consider replacement"
                    ),
                    impact=RecommendationImpact(
                        cost_savings=len(aging) * RENEWAL_SAVINGS,
                        downtime_reduction=len(aging) * 5,
                        efficiency_improvement=15,
                    ),
                    priority=Priority.HIGH,
                    implementation=[
                        "Develop phased replacement plan for aging trucks",
                        "Prioritize replacement of high-mileage vehicles",
                        "Consider newer, more fuel-efficient models",
                        "Calculate total cost of ownership for replacement decisions",
                    ],
                )
            )
        return recommendations

    # ═══════════════════════════════════════════════════════════════════════
    # COSTS
    # ═══════════════════════════════════════════════════════════════════════

    def optimize_costs(
        self, trucks: List[Truck], records: List[MaintenanceRecord]
    ) -> List[OptimizationRecommendation]:
        if records:
            potential_savings = sum(r.total_cost for r in records) * MAINTENANCE_SAVINGS_PCT
            downtime_reduction = 10
        else:
            potential_savings = 0.0
            downtime_reduction = 0

        fuel_savings = len(trucks) * FUEL_MANAGEMENT_SAVINGS

        return [
            OptimizationRecommendation(
                type=RecommendationType.COST_OPTIMIZATION,
                title="Maintenance Cost Optimization",
                description=(
                    "Implement cost-saving measures to reduce maintenance expenses by "
                    f"${potential_savings:,.0f}"
                ),
                impact=RecommendationImpact(
                    cost_savings=potential_savings,
                    downtime_reduction=downtime_reduction,
                    efficiency_improvement=8,
                ),
                priority=Priority.HIGH,
                implementation=[
                    "Negotiate bulk purchasing discounts with parts suppliers",
                    "Implement preventive maintenance to reduce emergency repairs",
                    "Train in-house mechanics for common repairs",
                    "Use predictive maintenance to optimize timing",
                ],
            ),
            OptimizationRecommendation(
                type=RecommendationType.COST_OPTIMIZATION,
                title="Fuel Cost Management",
                description=(
                    "Implement fuel management strategies to reduce fuel costs by "
                    f"${fuel_savings:,.0f}"
                ),
                impact=RecommendationImpact(
                    cost_savings=fuel_savings,
                    downtime_reduction=0,
                    efficiency_improvement=6,
                ),
                priority=Priority.MEDIUM,
                implementation=[
                    "Implement fuel card program with discounts",
                    "Monitor fuel consumption and identify anomalies",
                    "Optimize routes to reduce fuel consumption",
                    "Consider alternative fuel vehicles for new purchases",
                ],
            ),
        ]

    # ═══════════════════════════════════════════════════════════════════════
    # SUMMARY AND SUPPORTING ANALYSIS
    # ═══════════════════════════════════════════════════════════════════════

    @staticmethod
    def calculate_summary(
        recommendations: List[OptimizationRecommendation],
    ) -> OptimizationSummary:
        summary = OptimizationSummary(
            total_cost_savings=sum(r.impact.cost_savings for r in recommendations),
            total_downtime_reduction=sum(r.impact.downtime_reduction for r in recommendations),
            total_efficiency_improvement=sum(
                r.impact.efficiency_improvement for r in recommendations
            ),
        )

        if recommendations:
            complex_share = sum(
                1 for r in recommendations if len(r.implementation) > 4
            ) / len(recommendations)
            if complex_share > 0.5:
                summary.implementation_complexity = ImplementationComplexity.HIGH
            elif complex_share > 0.25:
                summary.implementation_complexity = ImplementationComplexity.MEDIUM
        return summary

    @staticmethod
    def analyze_maintenance_patterns(records: List[MaintenanceRecord]) -> Dict[str, Any]:
        """Average cost, frequency by service type, seasonal counts and failure modes."""
        patterns: Dict[str, Any] = {
            "average_cost_per_maintenance": 0.0,
            "frequency_by_type": {},
            "seasonal_trends": {},
            "common_failure_modes": {},
        }
        if not records:
            return patterns

        patterns["average_cost_per_maintenance"] = sum(
            r.total_cost for r in records
        ) / len(records)
        patterns["frequency_by_type"] = dict(Counter(r.service_type for r in records))
        # Calendar quarters, Jan-Mar counted as Winter
        patterns["seasonal_trends"] = dict(
            Counter(SEASONS[(r.date_performed.month - 1) // 3] for r in records)
        )
        patterns["common_failure_modes"] = dict(
            Counter(r.failure_mode for r in records if r.failure_mode)
        )
        return patterns

    @staticmethod
    def analyze_fuel_efficiency(trucks: List[Truck]) -> Dict[str, float]:
        """Fuel economy profile of the trucks that report it."""
        with_data = [t for t in trucks if t.fuel_efficiency is not None]
        if not with_data:
            return {
                "average_fuel_efficiency": 0.0,
                "efficient_trucks": 0,
                "inefficient_trucks": 0,
                "potential_savings": 0.0,
            }

        inefficient = sum(1 for t in with_data if t.fuel_efficiency < POOR_FUEL_EFFICIENCY_MPG)
        return {
            "average_fuel_efficiency": sum(t.fuel_efficiency for t in with_data) / len(with_data),
            "efficient_trucks": sum(
                1 for t in with_data if t.fuel_efficiency >= GOOD_FUEL_EFFICIENCY_MPG
            ),
            "inefficient_trucks": inefficient,
            "potential_savings": float(inefficient * FUEL_EFFICIENCY_SAVINGS),
        }

    def get_optimization_dashboard(self, as_of: Optional[datetime] = None) -> Dict[str, Any]:
        """Optimization result with default constraints plus current fleet metrics."""
        now = as_of or utc_now()
        constraints = OptimizationConstraints()
        optimization = self.optimize(constraints, as_of=now)

        trucks: List[Truck] = self.truck_repo.get_active_trucks()
        with_fuel = [t for t in trucks if t.fuel_efficiency is not None]
        fleet_metrics = {
            "total_trucks": len(trucks),
            "average_health_score": _safe_div(
                sum(t.health_score or 0 for t in trucks), len(trucks)
            ),
            "average_fuel_efficiency": _safe_div(
                sum(t.fuel_efficiency for t in with_fuel), len(with_fuel)
            ),
            "average_age": _safe_div(sum(t.age_years(now) for t in trucks), len(trucks)),
            "total_mileage": sum(t.current_mileage or 0 for t in trucks),
        }

        return {
            "optimization": optimization.to_dict(),
            "constraints": {
                **asdict(constraints),
                "maintenance_priority": constraints.maintenance_priority.value,
            },
            "fleet_metrics": fleet_metrics,
            "last_updated": now.isoformat(),
        }
