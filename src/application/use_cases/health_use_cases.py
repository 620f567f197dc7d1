"""
Application Use Cases - Health

Backs the ``/health`` and ``/info`` endpoints. Both run the dependency probes;
``/info`` adds uptime and the settings that shape forecasts and snapshots.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from src.application.dtos.health_dto import ApplicationInfoDTO, SystemHealthDTO
from src.application.models import SystemInfo
from src.domain.entities.health import ApplicationInfo
from src.domain.ports.health_check import IHealthCheckService


def redact_credentials(url: str) -> str:
    """Drop the ``user:password@`` part of a connection URL."""
    parts = urlsplit(url)
    if not (parts.username or parts.password):
        return url
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit(parts._replace(netloc=netloc))


def describe_configuration(info: SystemInfo) -> Dict[str, Any]:
    return {
        "environment": info.environment,
        "celery": {
            "broker": redact_credentials(info.celery_broker_url),
            "result_backend": redact_credentials(info.celery_result_backend_url),
        },
        "forecast": {
            "method": info.forecast_method,
            "horizon_minutes": info.forecast_horizon_minutes,
        },
        "snapshot": {
            "freshness_threshold_seconds": info.freshness_threshold_seconds,
        },
    }


class GetHealthStatusUseCase:
    def __init__(self, health_check_service: IHealthCheckService) -> None:
        self._health_check_service = health_check_service

    async def execute(self) -> SystemHealthDTO:
        return SystemHealthDTO.from_domain(await self._health_check_service.evaluate())


class GetApplicationInfoUseCase:
    """Combines the probe results with static build metadata."""

    def __init__(
        self,
        health_check_service: IHealthCheckService,
        system_info: SystemInfo,
    ) -> None:
        self._health_check_service = health_check_service
        self._info = system_info

    async def execute(self, started_at: Optional[datetime]) -> ApplicationInfoDTO:
        health = await self._health_check_service.evaluate()
        now = datetime.now(timezone.utc)
        started_at = started_at or now

        return ApplicationInfoDTO.from_domain(
            ApplicationInfo(
                name=self._info.title,
                description=self._info.description,
                version=self._info.version,
                environment=self._info.environment,
                git_commit=self._info.git_commit,
                build_time=self._info.build_time,
                started_at=started_at,
                uptime_seconds=max(0.0, (now - started_at).total_seconds()),
                status=health.status,
                dependencies=health.dependencies,
                extras=describe_configuration(self._info),
            )
        )
