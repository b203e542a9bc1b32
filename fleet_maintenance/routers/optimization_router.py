"""
Fleet Optimization Router

Endpoints:
- POST /api/optimization/fleet - Ranked recommendations for given constraints
- GET  /api/optimization/dashboard - Recommendations plus fleet metrics
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fleet_maintenance.models.fleet_models import (
    MaintenancePriority,
    OptimizationConstraints,
)
from fleet_maintenance.routers.dependencies import get_optimizer
from fleet_maintenance.services import FleetOptimizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/optimization", tags=["Fleet Optimization"])


class ConstraintsIn(BaseModel):
    """Operating constraints for an optimization run"""

    max_daily_hours: float = Field(12, gt=0, le=24)
    min_rest_time: float = Field(8, ge=0, le=24)
    fuel_cost_per_gallon: float = Field(3.50, gt=0)
    labor_cost_per_hour: float = Field(65, ge=0)
    maintenance_priority: MaintenancePriority = MaintenancePriority.COST

    def to_constraints(self) -> OptimizationConstraints:
        return OptimizationConstraints(
            max_daily_hours=self.max_daily_hours,
            min_rest_time=self.min_rest_time,
            fuel_cost_per_gallon=self.fuel_cost_per_gallon,
            labor_cost_per_hour=self.labor_cost_per_hour,
            maintenance_priority=self.maintenance_priority,
        )


@router.post("/fleet")
def optimize_fleet(
    constraints: ConstraintsIn,
    optimizer: FleetOptimizer = Depends(get_optimizer),
):
    """Recommendations sorted by priority, then by estimated cost savings."""
    result = optimizer.optimize(constraints.to_constraints())
    logger.info(
        f"Fleet optimization: {len(result.recommendations)} recommendations "
        f"(priority={constraints.maintenance_priority.value})"
    )
    return result.to_dict()


@router.get("/dashboard")
def get_optimization_dashboard(optimizer: FleetOptimizer = Depends(get_optimizer)):
    return optimizer.get_optimization_dashboard()
