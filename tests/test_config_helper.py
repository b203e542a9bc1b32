"""
Tests for settings, dependency wiring, error responses and logging setup
"""

import logging

import pytest

from fleet_maintenance.config_helper import (
    create_orchestrators,
    create_repositories,
    create_services,
    get_db_config,
)
from fleet_maintenance.errors import (
    DatabaseError,
    ErrorCategory,
    TruckNotFoundError,
    ValidationError,
    build_error_response,
)
from fleet_maintenance.logger_config import setup_logging
from fleet_maintenance.orchestrators import FleetAlertGenerator, TruckHealthAnalyzer
from fleet_maintenance.repositories import (
    AlertRepository,
    MaintenanceRepository,
    SensorRepository,
    TruckRepository,
)
from fleet_maintenance.services import AnalyticsAggregator, FleetOptimizer
from fleet_maintenance.settings import (
    DatabaseSettings,
    EngineSettings,
    Settings,
    get_settings,
)


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    def test_singleton(self):
        assert Settings() is get_settings()

    def test_database_from_environment(self, monkeypatch):
        monkeypatch.setenv("MYSQL_HOST", "db.internal")
        monkeypatch.setenv("MYSQL_PORT", "3307")

        db = DatabaseSettings()

        assert db.host == "db.internal"
        assert db.get_connection_dict()["port"] == 3307
        assert db.get_connection_dict()["charset"] == "utf8mb4"

    def test_engine_defaults(self, monkeypatch):
        for key in ("ALERT_PROBABILITY_THRESHOLD", "FUEL_PRICE_PER_GALLON", "ANALYSIS_WORKERS"):
            monkeypatch.delenv(key, raising=False)

        engine = EngineSettings()

        assert engine.alert_probability_threshold == 0.6
        assert engine.fuel_price_per_gallon == 3.50
        assert engine.analysis_workers == 4

    def test_validate_flags_bad_threshold(self, monkeypatch):
        settings = get_settings()
        monkeypatch.setattr(settings.engine, "alert_probability_threshold", 1.5)
        assert any("ALERT_PROBABILITY_THRESHOLD" in w for w in settings.validate())

    def test_to_dict_has_no_password(self):
        assert "password" not in str(get_settings().to_dict()).lower()

    def test_to_dict_keys(self):
        assert set(get_settings().to_dict()) == {
            "version",
            "environment",
            "database_host",
            "database_name",
            "analysis_workers",
            "alert_probability_threshold",
            "fuel_price_per_gallon",
        }


# =============================================================================
# Wiring
# =============================================================================


class TestWiring:
    def test_get_db_config(self):
        config = get_db_config()
        assert {"host", "port", "user", "password", "database"} <= set(config)

    def test_create_repositories(self, db_config):
        repos = create_repositories(db_config)

        assert isinstance(repos["truck"], TruckRepository)
        assert isinstance(repos["maintenance"], MaintenanceRepository)
        assert isinstance(repos["sensor"], SensorRepository)
        assert isinstance(repos["alert"], AlertRepository)
        assert repos["truck"].db_config == db_config

    def test_create_services_and_orchestrators(
        self, truck_repo, maintenance_repo, sensor_repo, alert_repo
    ):
        repos = {
            "truck": truck_repo,
            "maintenance": maintenance_repo,
            "sensor": sensor_repo,
            "alert": alert_repo,
        }
        services = create_services(repos)
        orchestrators = create_orchestrators(services, repos)

        assert isinstance(services["analytics"], AnalyticsAggregator)
        assert isinstance(services["optimizer"], FleetOptimizer)
        assert services["anomaly"].sensor_repo is sensor_repo

        analyzer = orchestrators["analyzer"]
        alerts = orchestrators["alerts"]
        assert isinstance(analyzer, TruckHealthAnalyzer)
        assert isinstance(alerts, FleetAlertGenerator)
        assert analyzer.health_scorer is services["health"]
        assert alerts.analyzer is analyzer
        assert alerts.probability_threshold == get_settings().engine.alert_probability_threshold


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
    def test_truck_not_found(self):
        error = TruckNotFoundError("TRK-9")
        response = build_error_response(error)

        assert response["status_code"] == 404
        assert response["message"] == "Truck not found"
        assert response["details"] == {"resource": "Truck", "resource_id": "TRK-9"}

    def test_validation_error_field(self):
        error = ValidationError("bad", field="start_date")
        assert error.category == ErrorCategory.VALIDATION
        assert error.details == {"field": "start_date"}

    def test_database_error_is_503(self):
        assert DatabaseError("down").status_code == 503

    def test_unknown_exception(self):
        response = build_error_response(RuntimeError(""))
        assert response["status_code"] == 500
        assert response["message"] == "An unexpected error occurred"


# =============================================================================
# Logging
# =============================================================================


class TestLogging:
    @pytest.fixture(autouse=True)
    def _reset(self):
        yield
        logger = logging.getLogger("fleet_test_logger")
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []

    def test_console_only(self):
        logger = setup_logging("fleet_test_logger", level=logging.DEBUG)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_rotating_files(self, tmp_path):
        logger = setup_logging("fleet_test_logger", log_to_file=True, log_dir=tmp_path)
        logger.error("disk full")
        for handler in logger.handlers:
            handler.flush()

        assert (tmp_path / "fleet_test_logger.log").exists()
        assert "disk full" in (tmp_path / "fleet_test_logger_errors.log").read_text()

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging("fleet_test_logger")
        logger = setup_logging("fleet_test_logger")
        assert len(logger.handlers) == 1
