"""
Pytest Configuration for Fleet Maintenance Engine Tests
"""

import pytest

# Import all fixtures
from tests.fixtures.database_fixtures import *  # noqa
from tests.fixtures.truck_fixtures import *  # noqa


@pytest.fixture
def test_client(truck_repo, maintenance_repo, sensor_repo, alert_repo):
    """API client wired to in-memory repositories."""
    from fastapi.testclient import TestClient

    from fleet_maintenance.config_helper import create_orchestrators, create_services
    from fleet_maintenance.main import create_app

    repositories = {
        "truck": truck_repo,
        "maintenance": maintenance_repo,
        "sensor": sensor_repo,
        "alert": alert_repo,
    }
    services = create_services(repositories)
    orchestrators = create_orchestrators(services, repositories)
    app = create_app(repositories, services, orchestrators)
    return TestClient(app, raise_server_exceptions=False)
