"""
Infrastructure Services - Health Checks

Probes the services a regeneration cycle depends on: MongoDB (which must run
as a replica set for the cycle transaction), the Celery broker and the
Celery result backend. Probes run concurrently and never raise.
"""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import pika
import redis.asyncio as aioredis
import structlog

from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth
from src.domain.ports.health_check import IHealthCheckService
from src.infrastructure.database.mongo_database import MongoDatabase

logger = structlog.get_logger(__name__)

# A probe returns (status, message, details)
ProbeResult = Tuple[ServiceStatus, str, Dict[str, Any]]


class HealthCheckService(IHealthCheckService):
    """Concurrent dependency probes for MongoDB, RabbitMQ and Redis."""

    def __init__(
        self,
        mongo_database: Optional[MongoDatabase],
        broker_url: str,
        redis_url: str,
        *,
        socket_timeout: float = 5.0,
    ) -> None:
        self._mongo_database = mongo_database
        self._broker_url = broker_url
        self._redis_url = redis_url
        self._socket_timeout = socket_timeout

    async def evaluate(self) -> SystemHealth:
        dependencies = await asyncio.gather(
            self._check_mongo(), self._check_rabbitmq(), self._check_redis()
        )
        health = SystemHealth.from_dependencies(dependencies)
        if health.status is not ServiceStatus.UP:
            logger.warning(
                "health.degraded",
                status=health.status.value,
                failing=[
                    dep.name for dep in dependencies if dep.status is not ServiceStatus.UP
                ],
            )
        return health

    async def _timed(
        self, name: str, probe: Callable[[], Awaitable[ProbeResult]]
    ) -> DependencyStatus:
        start = perf_counter()
        try:
            status, message, details = await probe()
        except Exception as exc:
            status, message, details = ServiceStatus.DOWN, f"{name} probe failed: {exc}", {}
        return DependencyStatus(
            name=name,
            status=status,
            message=message,
            latency_ms=(perf_counter() - start) * 1000,
            details=details,
        )

    @staticmethod
    def _not_configured(name: str, what: str) -> DependencyStatus:
        return DependencyStatus(
            name=name,
            status=ServiceStatus.UNKNOWN,
            message=f"{what} not configured",
        )

    async def _check_mongo(self) -> DependencyStatus:
        if self._mongo_database is None:
            return self._not_configured("mongo", "MongoDB client")

        database = self._mongo_database

        async def _probe() -> ProbeResult:
            await asyncio.to_thread(database.client.admin.command, "ping")
            hello = await asyncio.to_thread(database.client.admin.command, "hello")
            details = {
                "database": database.db.name,
                "replica_set": (hello or {}).get("setName"),
            }
            if not details["replica_set"]:
                return (
                    ServiceStatus.DEGRADED,
                    "MongoDB is reachable but not a replica set, "
                    "regeneration transactions will fail",
                    details,
                )
            return ServiceStatus.UP, "MongoDB ping successful", details

        return await self._timed("mongo", _probe)

    async def _check_rabbitmq(self) -> DependencyStatus:
        if not self._broker_url:
            return self._not_configured("rabbitmq", "Celery broker URL")

        def _connect() -> None:
            parameters = pika.URLParameters(self._broker_url)
            pika.BlockingConnection(parameters).close()

        async def _probe() -> ProbeResult:
            await asyncio.to_thread(_connect)
            return ServiceStatus.UP, "RabbitMQ connection successful", {}

        return await self._timed("rabbitmq", _probe)

    async def _check_redis(self) -> DependencyStatus:
        if not self._redis_url:
            return self._not_configured("redis", "Celery result backend URL")

        async def _probe() -> ProbeResult:
            client = aioredis.from_url(
                self._redis_url,
                socket_connect_timeout=self._socket_timeout,
                socket_timeout=self._socket_timeout,
            )
            try:
                await client.ping()
            finally:
                await client.aclose()
            return ServiceStatus.UP, "Redis ping successful", {}

        return await self._timed("redis", _probe)
