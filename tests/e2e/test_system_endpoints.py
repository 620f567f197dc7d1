from __future__ import annotations

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from src.application.models import SystemInfo
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth
from src.main.app import create_app
from src.main.container import get_container


class _NoopMongo:
    async def create_indexes(self):
        return None

    def close(self):
        return None


class _Probes:
    def __init__(self, *statuses: DependencyStatus):
        self.statuses = list(statuses)

    async def evaluate(self) -> SystemHealth:
        return SystemHealth.from_dependencies(self.statuses)


INFO = SystemInfo(
    title="Crowdcast",
    description="Occupancy service under test",
    version="9.9.9",
    environment="testing",
    git_commit="deadbee",
    build_time="2024-09-09T00:00:00Z",
    celery_broker_url="amqp://user:pw@rabbitmq:5672/crowdcast",
    celery_result_backend_url="redis://redis:6379/0",
    freshness_threshold_seconds=60,
    forecast_method="linear_trend",
    forecast_horizon_minutes=30,
)


@pytest.fixture()
def probes() -> _Probes:
    return _Probes(
        DependencyStatus(name="mongo", status=ServiceStatus.UP),
        DependencyStatus(name="redis", status=ServiceStatus.UP),
    )


@pytest.fixture()
def client(probes):
    app = create_app()
    container = get_container()
    container.mongo_database.override(providers.Object(_NoopMongo()))
    container.get_health_status_use_case.override(
        providers.Factory(GetHealthStatusUseCase, health_check_service=probes)
    )
    container.get_application_info_use_case.override(
        providers.Factory(
            GetApplicationInfoUseCase, health_check_service=probes, system_info=INFO
        )
    )

    with TestClient(app) as test_client:
        yield test_client


def test_health_is_ok_when_everything_is_up(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "up"
    assert [dep["name"] for dep in body["dependencies"]] == ["mongo", "redis"]


def test_health_is_503_when_a_dependency_is_down(client, probes):
    probes.statuses[1] = DependencyStatus(
        name="redis", status=ServiceStatus.DOWN, message="refused"
    )

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "down"


def test_degraded_health_still_answers_ok(client, probes):
    probes.statuses[0] = DependencyStatus(name="mongo", status=ServiceStatus.DEGRADED)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


def test_info_reports_build_and_forecast_settings(client):
    response = client.get("/info")

    assert response.status_code == 200
    body = response.json()
    assert body["version"] == "9.9.9"
    assert body["uptime_seconds"] >= 0
    assert body["extras"]["celery"]["broker"] == "amqp://rabbitmq:5672/crowdcast"
    assert body["extras"]["forecast"] == {
        "method": "linear_trend",
        "horizon_minutes": 30,
    }
    assert body["extras"]["snapshot"]["freshness_threshold_seconds"] == 60
