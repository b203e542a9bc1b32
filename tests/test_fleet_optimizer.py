"""
Tests for the fleet optimizer recommendations, ranking and dashboard
"""

from datetime import datetime, timezone

import pytest

from fleet_maintenance.models.fleet_models import (
    ImplementationComplexity,
    MaintenancePriority,
    OptimizationConstraints,
    OptimizationRecommendation,
    Priority,
    RecommendationImpact,
    RecommendationType,
    RiskLevel,
)
from fleet_maintenance.services.fleet_optimizer import FleetOptimizer
from tests.fixtures.truck_fixtures import (
    NOW,
    FakeMaintenanceRepository,
    FakeTruckRepository,
    make_record,
    make_truck,
)


@pytest.fixture
def fleet():
    return [
        make_truck(id="T1", risk_level=RiskLevel.CRITICAL, health_score=30,
                   year=NOW.year - 12, fuel_efficiency=12.0),
        make_truck(id="T2", health_score=90, year=NOW.year - 3,
                   fuel_efficiency=18.0, engine_hours=100.0),
        make_truck(id="T3", health_score=None, year=NOW.year - 1),
    ]


@pytest.fixture
def fleet_records():
    return [
        make_record("T1", "Engine Repair", days_ago=20, parts_cost=500, labor_cost=200),
        make_record("T2", "Oil Change", days_ago=50, parts_cost=200, labor_cost=100),
    ]


@pytest.fixture
def optimizer(fleet, fleet_records):
    return FleetOptimizer(FakeTruckRepository(fleet), FakeMaintenanceRepository(fleet_records))


def recommendation(priority, savings, steps=4):
    return OptimizationRecommendation(
        type=RecommendationType.COST_OPTIMIZATION,
        title=f"{priority.value}-{savings}",
        description="",
        impact=RecommendationImpact(cost_savings=savings),
        priority=priority,
        implementation=["step"] * steps,
    )


class TestOptimize:
    def test_ranked_recommendations(self, optimizer):
        result = optimizer.optimize(as_of=NOW)

        assert [(r.title, r.impact.cost_savings) for r in result.recommendations] == [
            ("Critical Maintenance Scheduling", 5000),
            ("Fleet Renewal Program", 3000),
            ("Preventive Maintenance Optimization", 1500),
            ("Maintenance Cost Optimization", 150),
            ("Fleet Right-Sizing", 8000),
            ("Route Clustering Optimization", 2400),
            ("Fuel Cost Management", 1800),
            ("Fuel Efficiency Improvement", 1200),
        ]

    def test_summary_totals(self, optimizer):
        summary = optimizer.optimize(as_of=NOW).summary

        assert summary.total_cost_savings == pytest.approx(23050)
        assert summary.total_downtime_reduction == 52
        assert summary.total_efficiency_improvement == 79
        assert summary.implementation_complexity == ImplementationComplexity.LOW

    def test_reads_bounded_history(self, optimizer):
        optimizer.optimize(as_of=NOW)
        assert optimizer.maintenance_repo.calls == [(None, None, 100)]

    def test_constraints_do_not_change_rules(self, optimizer):
        cost = optimizer.optimize(OptimizationConstraints(), as_of=NOW)
        reliability = optimizer.optimize(
            OptimizationConstraints(maintenance_priority=MaintenancePriority.RELIABILITY),
            as_of=NOW,
        )
        assert cost.to_dict() == reliability.to_dict()

    def test_empty_fleet_still_recommends_baseline(self):
        optimizer = FleetOptimizer(FakeTruckRepository(), FakeMaintenanceRepository())
        titles = [r.title for r in optimizer.optimize(as_of=NOW).recommendations]

        assert titles == [
            "Preventive Maintenance Optimization",
            "Maintenance Cost Optimization",
            "Route Clustering Optimization",
            "Fuel Cost Management",
        ]

    def test_maintenance_cost_description(self, optimizer):
        result = optimizer.optimize(as_of=NOW)
        cost = next(r for r in result.recommendations if r.title == "Maintenance Cost Optimization")
        assert cost.description.endswith("by $150")
        assert cost.impact.downtime_reduction == 10


class TestRules:
    def test_unscored_truck_counts_as_critical(self, optimizer):
        recs = optimizer.optimize_maintenance_scheduling([make_truck(health_score=None)])
        assert recs[0].title == "Critical Maintenance Scheduling"
        assert recs[0].impact.downtime_reduction == 8

    def test_underutilization_needs_engine_hours(self, optimizer):
        trucks = [make_truck(engine_hours=None)]
        assert optimizer.optimize_fleet_balance(trucks, NOW) == []

    def test_well_used_truck_not_underutilized(self, optimizer):
        trucks = [make_truck(year=NOW.year, engine_hours=5000.0)]
        assert optimizer.optimize_fleet_balance(trucks, NOW) == []

    def test_ten_year_old_truck_not_renewed(self, optimizer):
        trucks = [make_truck(year=NOW.year - 10)]
        assert optimizer.optimize_fleet_balance(trucks, NOW) == []

    def test_no_records_means_no_maintenance_savings(self, optimizer):
        cost = optimizer.optimize_costs([make_truck()], [])[0]
        assert cost.impact.cost_savings == 0
        assert cost.impact.downtime_reduction == 0


class TestRankAndSummary:
    def test_rank_is_stable_for_ties(self):
        first = recommendation(Priority.HIGH, 100)
        second = recommendation(Priority.HIGH, 100)
        ranked = FleetOptimizer.rank([recommendation(Priority.LOW, 9999), first, second])

        assert ranked[0] is first
        assert ranked[1] is second
        assert ranked[2].priority == Priority.LOW

    @pytest.mark.parametrize(
        "steps, expected",
        [
            ([4, 4, 4, 4], ImplementationComplexity.LOW),
            ([5, 4, 4, 4], ImplementationComplexity.LOW),
            ([5, 5, 4, 4], ImplementationComplexity.MEDIUM),
            ([5, 5, 5, 4], ImplementationComplexity.HIGH),
        ],
    )
    def test_complexity(self, steps, expected):
        recs = [recommendation(Priority.LOW, 0, n) for n in steps]
        assert FleetOptimizer.calculate_summary(recs).implementation_complexity == expected

    def test_empty_summary(self):
        summary = FleetOptimizer.calculate_summary([])
        assert summary.total_cost_savings == 0
        assert summary.implementation_complexity == ImplementationComplexity.LOW


class TestSupportingAnalysis:
    def test_maintenance_patterns(self):
        records = [
            make_record(service_type="Oil Change", parts_cost=100, labor_cost=0,
                        date_performed=datetime(2026, 1, 10, tzinfo=timezone.utc),
                        failure_mode="Oil degradation"),
            make_record(service_type="Oil Change", parts_cost=300, labor_cost=0,
                        date_performed=datetime(2026, 7, 10, tzinfo=timezone.utc)),
            make_record(service_type="Brake Pad Replacement", parts_cost=200, labor_cost=0,
                        date_performed=datetime(2026, 11, 2, tzinfo=timezone.utc)),
        ]
        patterns = FleetOptimizer.analyze_maintenance_patterns(records)

        assert patterns["average_cost_per_maintenance"] == 200
        assert patterns["frequency_by_type"] == {"Oil Change": 2, "Brake Pad Replacement": 1}
        assert patterns["seasonal_trends"] == {"Winter": 1, "Summer": 1, "Fall": 1}
        assert patterns["common_failure_modes"] == {"Oil degradation": 1}

    def test_maintenance_patterns_empty(self):
        assert FleetOptimizer.analyze_maintenance_patterns([])["average_cost_per_maintenance"] == 0

    def test_fuel_efficiency(self, fleet):
        analysis = FleetOptimizer.analyze_fuel_efficiency(fleet)

        assert analysis["average_fuel_efficiency"] == 15
        assert analysis["efficient_trucks"] == 0
        assert analysis["inefficient_trucks"] == 1
        assert analysis["potential_savings"] == 1200


    def test_zero_mpg_counts_as_missing(self, optimizer):
        trucks = [make_truck(fuel_efficiency=0.0), make_truck(id="T9", fuel_efficiency=18.0)]

        analysis = FleetOptimizer.analyze_fuel_efficiency(trucks)

        assert analysis["average_fuel_efficiency"] == 18
        assert analysis["inefficient_trucks"] == 0
        assert [r.title for r in optimizer.optimize_routes(trucks)] == [
            "Route Clustering Optimization"
        ]


class TestDashboard:
    def test_dashboard(self, optimizer):
        dashboard = optimizer.get_optimization_dashboard(NOW)

        assert dashboard["last_updated"] == NOW.isoformat()
        assert dashboard["constraints"]["maintenance_priority"] == "COST"
        assert dashboard["constraints"]["fuel_cost_per_gallon"] == 3.50
        assert dashboard["optimization"]["summary"]["total_cost_savings"] == 23050

        metrics = dashboard["fleet_metrics"]
        assert metrics["total_trucks"] == 3
        assert metrics["average_health_score"] == 40
        assert metrics["average_fuel_efficiency"] == 15
        assert metrics["average_age"] == pytest.approx(16 / 3)
