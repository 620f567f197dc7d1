"""
Application DTOs - Health

Response payloads for ``/health`` and ``/info``. The models read straight
from the domain dataclasses via ``from_attributes``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities.health import (
    ApplicationInfo,
    DependencyStatus,
    ServiceStatus,
    SystemHealth,
)

_MONGO_EXAMPLE = {
    "name": "mongo",
    "status": "up",
    "message": "MongoDB ping successful",
    "checked_at": "2024-09-09T12:00:00Z",
    "latency_ms": 4.2,
    "details": {"database": "crowdcast", "replica_set": "rs0"},
}


class DependencyStatusDTO(BaseModel):
    """Probe result for one backing service."""

    model_config = ConfigDict(
        from_attributes=True, json_schema_extra={"example": _MONGO_EXAMPLE}
    )

    name: str
    status: ServiceStatus
    message: Optional[str] = None
    checked_at: datetime
    latency_ms: Optional[float] = Field(default=None, ge=0)
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, status: DependencyStatus) -> "DependencyStatusDTO":
        return cls.model_validate(status)


class SystemHealthDTO(BaseModel):
    """Overall status plus the individual probes, worst status wins."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {"status": "up", "dependencies": [_MONGO_EXAMPLE]}
        },
    )

    status: ServiceStatus
    dependencies: List[DependencyStatusDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, health: SystemHealth) -> "SystemHealthDTO":
        return cls.model_validate(health)


class ApplicationInfoDTO(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "name": "Crowdcast Occupancy Service",
                "description": "Occupancy snapshots and short-horizon forecasts",
                "version": "1.0.0",
                "environment": "development",
                "git_commit": "abcdef1",
                "build_time": "2024-09-09T11:30:00Z",
                "started_at": "2024-09-09T12:00:00Z",
                "uptime_seconds": 3600.5,
                "status": "up",
                "dependencies": [_MONGO_EXAMPLE],
                "extras": {
                    "forecast": {
                        "method": "exponential_moving_average",
                        "horizon_minutes": 15,
                    },
                    "snapshot": {"freshness_threshold_seconds": 60},
                },
            }
        },
    )

    name: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    started_at: datetime
    uptime_seconds: float = Field(ge=0)
    status: ServiceStatus
    dependencies: List[DependencyStatusDTO] = Field(default_factory=list)
    extras: Dict[str, Any] = Field(
        default_factory=dict,
        description="Broker endpoints with credentials removed, forecast and snapshot settings",
    )

    @classmethod
    def from_domain(cls, info: ApplicationInfo) -> "ApplicationInfoDTO":
        return cls.model_validate(info)
