"""Repository layer for data access."""

from .alert_repository import AlertRepository
from .maintenance_repository import MaintenanceRepository
from .sensor_repository import SensorRepository
from .truck_repository import TruckRepository

__all__ = [
    "AlertRepository",
    "MaintenanceRepository",
    "SensorRepository",
    "TruckRepository",
]
