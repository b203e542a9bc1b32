"""
Fleet Maintenance Engine API

FastAPI application exposing truck health analysis, predictive alerts,
analytics and fleet optimization.

Run with:
    uvicorn fleet_maintenance.main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import pymysql
from fastapi import FastAPI

from fleet_maintenance.config_helper import setup_architecture
from fleet_maintenance.errors import (
    FleetEngineError,
    database_exception_handler,
    fleet_engine_exception_handler,
    generic_exception_handler,
)
from fleet_maintenance.logger_config import setup_logging
from fleet_maintenance.routers import (
    analytics_router,
    optimization_router,
    predictive_router,
)
from fleet_maintenance.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        f"Starting Fleet Maintenance Engine v{settings.app.version} "
        f"({settings.app.environment})"
    )
    for warning in settings.validate():
        logger.warning(f"Settings: {warning}")

    alert_repo = app.state.repositories.get("alert")
    if alert_repo is not None and app.state.ensure_schema:
        alert_repo.ensure_schema()

    yield

    logger.info("Shutting down Fleet Maintenance Engine")


def create_app(
    repositories: Optional[Dict[str, Any]] = None,
    services: Optional[Dict[str, Any]] = None,
    orchestrators: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """
    Build the API.

    With no arguments every component is wired from settings; tests pass
    pre-built (fake) components instead and skip schema creation.
    """
    settings = get_settings()
    setup_logging(
        level=getattr(logging, settings.app.log_level.upper(), logging.INFO),
        log_to_file=settings.app.log_to_file,
    )

    ensure_schema = repositories is None
    if repositories is None or services is None or orchestrators is None:
        repositories, services, orchestrators = setup_architecture(settings)

    app = FastAPI(
        title="Fleet Maintenance Engine API",
        description="Predictive maintenance, analytics and optimization for truck fleets",
        version=settings.app.version,
        lifespan=lifespan,
    )
    app.state.repositories = repositories
    app.state.services = services
    app.state.orchestrators = orchestrators
    app.state.ensure_schema = ensure_schema

    app.add_exception_handler(FleetEngineError, fleet_engine_exception_handler)
    app.add_exception_handler(pymysql.MySQLError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(predictive_router)
    app.include_router(analytics_router)
    app.include_router(optimization_router)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "version": settings.app.version}

    return app


app = create_app()
