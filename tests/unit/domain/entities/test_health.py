from __future__ import annotations

from datetime import timezone

from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth


def test_dependency_status_defaults() -> None:
    status = DependencyStatus(name="mongo", status=ServiceStatus.UP)
    assert status.checked_at.tzinfo == timezone.utc
    assert status.details == {}


def test_system_health_container() -> None:
    dependency = DependencyStatus(name="redis", status=ServiceStatus.DOWN)
    health = SystemHealth(status=ServiceStatus.DEGRADED, dependencies=[dependency])
    assert health.dependencies[0] is dependency
    assert health.status is ServiceStatus.DEGRADED


def test_aggregate_status_priority() -> None:
    health = SystemHealth.from_dependencies(
        [
            DependencyStatus(name="mongo", status=ServiceStatus.UP),
            DependencyStatus(name="redis", status=ServiceStatus.DEGRADED),
            DependencyStatus(name="rabbitmq", status=ServiceStatus.DOWN),
        ]
    )

    assert health.status is ServiceStatus.DOWN
    assert len(health.dependencies) == 3


def test_unknown_outranks_up() -> None:
    health = SystemHealth.from_dependencies(
        [
            DependencyStatus(name="mongo", status=ServiceStatus.UP),
            DependencyStatus(name="redis", status=ServiceStatus.UNKNOWN),
        ]
    )

    assert health.status is ServiceStatus.UNKNOWN


def test_no_dependencies_is_up() -> None:
    assert SystemHealth.from_dependencies([]).status is ServiceStatus.UP
