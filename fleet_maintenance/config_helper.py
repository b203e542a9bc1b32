"""
Configuration helper for the layered architecture

Wires repositories -> services -> orchestrators from the settings module.

Usage:
    from fleet_maintenance.config_helper import setup_architecture

    repos, services, orchestrators = setup_architecture()
    result = orchestrators["analyzer"].analyze("TRK-001")
"""

from typing import Any, Dict, Optional, Tuple

from fleet_maintenance.settings import Settings, get_settings


def get_db_config(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Get MySQL connection config in format expected by repositories.

    Returns:
        Dict with keys: host, port, user, password, database, charset, ...
    """
    settings = settings or get_settings()
    return settings.database.get_connection_dict()


def create_repositories(db_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Create all repository instances with proper configuration.

    Args:
        db_config: Optional DB config. If None, uses get_db_config()

    Returns:
        Dict with repository instances:
        {
            'truck': TruckRepository,
            'maintenance': MaintenanceRepository,
            'sensor': SensorRepository,
            'alert': AlertRepository,
        }
    """
    from fleet_maintenance.repositories import (
        AlertRepository,
        MaintenanceRepository,
        SensorRepository,
        TruckRepository,
    )

    if db_config is None:
        db_config = get_db_config()

    return {
        "truck": TruckRepository(db_config),
        "maintenance": MaintenanceRepository(db_config),
        "sensor": SensorRepository(db_config),
        "alert": AlertRepository(db_config),
    }


def create_services(
    repositories: Dict[str, Any], settings: Optional[Settings] = None
) -> Dict[str, Any]:
    """
    Create all service instances with injected repositories.

    Returns:
        Dict with service instances:
        {
            'anomaly': SensorAnomalyDetector,
            'health': HealthScorer,
            'predictor': FailurePredictor,
            'risk': RiskClassifier,
            'scheduler': MaintenanceScheduler,
            'analytics': AnalyticsAggregator,
            'optimizer': FleetOptimizer,
        }
    """
    from fleet_maintenance.services import (
        AnalyticsAggregator,
        FailurePredictor,
        FleetOptimizer,
        HealthScorer,
        MaintenanceScheduler,
        RiskClassifier,
        SensorAnomalyDetector,
    )

    engine = (settings or get_settings()).engine

    return {
        "anomaly": SensorAnomalyDetector(repositories["sensor"]),
        "health": HealthScorer(),
        "predictor": FailurePredictor(),
        "risk": RiskClassifier(),
        "scheduler": MaintenanceScheduler(),
        "analytics": AnalyticsAggregator(
            truck_repo=repositories["truck"],
            maintenance_repo=repositories["maintenance"],
            fuel_price_per_gallon=engine.fuel_price_per_gallon,
            default_fuel_efficiency_mpg=engine.default_fuel_efficiency_mpg,
            breakdown_cost=engine.breakdown_cost,
            budget_buffer_pct=engine.budget_buffer_pct,
        ),
        "optimizer": FleetOptimizer(
            truck_repo=repositories["truck"],
            maintenance_repo=repositories["maintenance"],
        ),
    }


def create_orchestrators(
    services: Dict[str, Any],
    repositories: Dict[str, Any],
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Create the orchestrators with all dependencies.

    Returns:
        Dict with 'analyzer' (TruckHealthAnalyzer) and 'alerts' (FleetAlertGenerator)
    """
    from fleet_maintenance.orchestrators import FleetAlertGenerator, TruckHealthAnalyzer

    engine = (settings or get_settings()).engine

    analyzer = TruckHealthAnalyzer(
        truck_repo=repositories["truck"],
        sensor_repo=repositories["sensor"],
        health_scorer=services["health"],
        failure_predictor=services["predictor"],
        risk_classifier=services["risk"],
        maintenance_scheduler=services["scheduler"],
        anomaly_detector=services["anomaly"],
        max_workers=engine.analysis_workers,
    )
    alerts = FleetAlertGenerator(
        truck_repo=repositories["truck"],
        alert_repo=repositories["alert"],
        analyzer=analyzer,
        probability_threshold=engine.alert_probability_threshold,
    )
    return {"analyzer": analyzer, "alerts": alerts}


# Quick setup function for convenience
def setup_architecture(
    settings: Optional[Settings] = None,
) -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]:
    """
    One-liner to set up entire architecture.

    Returns:
        Tuple of (repositories, services, orchestrators)
    """
    repositories = create_repositories(get_db_config(settings))
    services = create_services(repositories, settings)
    orchestrators = create_orchestrators(services, repositories, settings)

    return repositories, services, orchestrators
