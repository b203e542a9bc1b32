"""
Fleet Maintenance Engine Settings
Centralized configuration from environment variables

Every tunable value of the engine comes from here. Sensitive data
(database credentials) MUST come from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_env(key: str, default: str = "", required: bool = False) -> str:
    """Get environment variable with optional requirement enforcement."""
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable {key} is not set!")
    return value


def _get_env_int(key: str, default: int) -> int:
    """Get integer environment variable."""
    return int(os.getenv(key, str(default)))


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable."""
    return float(os.getenv(key, str(default)))


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    return os.getenv(key, str(default)).lower() in ("true", "1", "yes")


# =============================================================================
# DATABASE SETTINGS
# =============================================================================
@dataclass
class DatabaseSettings:
    """MySQL database configuration - ALL from environment."""

    host: str = field(default_factory=lambda: _get_env("MYSQL_HOST", "localhost"))
    port: int = field(default_factory=lambda: _get_env_int("MYSQL_PORT", 3306))
    user: str = field(default_factory=lambda: _get_env("MYSQL_USER", "fleet_admin"))
    password: str = field(default_factory=lambda: _get_env("MYSQL_PASSWORD", ""))
    database: str = field(
        default_factory=lambda: _get_env("MYSQL_DATABASE", "fleet_maintenance")
    )
    charset: str = "utf8mb4"
    connect_timeout: int = field(
        default_factory=lambda: _get_env_int("MYSQL_CONNECT_TIMEOUT", 10)
    )

    def get_connection_dict(self) -> Dict:
        """Return connection dictionary for pymysql."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "charset": self.charset,
            "connect_timeout": self.connect_timeout,
            "autocommit": True,
        }


# =============================================================================
# ENGINE SETTINGS
# =============================================================================
@dataclass
class EngineSettings:
    """Tunables for the prediction, analytics and optimization engines."""

    # Thread pool used when several trucks are analyzed at once
    analysis_workers: int = field(
        default_factory=lambda: _get_env_int("ANALYSIS_WORKERS", 4)
    )

    # Predictions above this probability become persisted alerts
    alert_probability_threshold: float = field(
        default_factory=lambda: _get_env_float("ALERT_PROBABILITY_THRESHOLD", 0.6)
    )

    # Financial assumptions
    fuel_price_per_gallon: float = field(
        default_factory=lambda: _get_env_float("FUEL_PRICE_PER_GALLON", 3.50)
    )
    default_fuel_efficiency_mpg: float = field(
        default_factory=lambda: _get_env_float("DEFAULT_FUEL_EFFICIENCY_MPG", 20.0)
    )
    breakdown_cost: float = field(
        default_factory=lambda: _get_env_float("BREAKDOWN_COST", 2500.0)
    )
    budget_buffer_pct: float = field(
        default_factory=lambda: _get_env_float("BUDGET_BUFFER_PCT", 0.10)
    )


# =============================================================================
# APPLICATION SETTINGS
# =============================================================================
@dataclass
class AppSettings:
    """General application settings."""

    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))
    log_to_file: bool = field(
        default_factory=lambda: _get_env_bool("LOG_TO_FILE", False)
    )
    environment: str = field(
        default_factory=lambda: _get_env("ENVIRONMENT", "development")
    )
    version: str = "1.0.0"


# =============================================================================
# GLOBAL SETTINGS INSTANCE
# =============================================================================
class Settings:
    """Global settings container - singleton pattern."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize all settings."""
        self.database = DatabaseSettings()
        self.engine = EngineSettings()
        self.app = AppSettings()

    def validate(self) -> List[str]:
        """Validate settings and return list of warnings."""
        warnings = []

        if not self.database.password:
            warnings.append("MYSQL_PASSWORD not set")

        if not 0 < self.engine.alert_probability_threshold < 1:
            warnings.append(
                "ALERT_PROBABILITY_THRESHOLD should be between 0 and 1, "
                f"got {self.engine.alert_probability_threshold}"
            )

        if self.engine.default_fuel_efficiency_mpg <= 0:
            warnings.append("DEFAULT_FUEL_EFFICIENCY_MPG must be positive")

        return warnings

    def to_dict(self) -> Dict:
        """Export settings as dictionary (for debugging, excludes secrets)."""
        return {
            "version": self.app.version,
            "environment": self.app.environment,
            "database_host": self.database.host,
            "database_name": self.database.database,
            "analysis_workers": self.engine.analysis_workers,
            "alert_probability_threshold": self.engine.alert_probability_threshold,
            "fuel_price_per_gallon": self.engine.fuel_price_per_gallon,
        }


# Create global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get global settings instance."""
    return settings


# Export commonly used settings
DATABASE = settings.database
ENGINE = settings.engine
APP = settings.app
