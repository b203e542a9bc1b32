"""HTTP routers for the predictive, analytics and optimization endpoints."""

from .analytics_router import router as analytics_router
from .optimization_router import router as optimization_router
from .predictive_router import router as predictive_router

__all__ = [
    "analytics_router",
    "optimization_router",
    "predictive_router",
]
