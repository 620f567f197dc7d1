"""Shared Celery infrastructure components."""

from typing import Optional, Tuple

import structlog
from celery import Task

from src.application.use_cases.regenerate_occupancy_use_case import (
    RegenerateOccupancyUseCase,
)
from src.infrastructure.database.mongo_database import MongoDatabase
from src.infrastructure.repositories.location_repository import LocationRepository
from src.infrastructure.repositories.occupancy_repository import OccupancyRepository
from src.infrastructure.services.occupancy_generator import SyntheticOccupancySource
from src.infrastructure.settings import get_settings

logger = structlog.get_logger(__name__)


def build_regeneration_use_case(
    database: Optional[MongoDatabase] = None,
) -> Tuple[RegenerateOccupancyUseCase, MongoDatabase]:
    """Wire the regeneration use case from worker settings.

    The caller owns the returned database and must close it.
    """
    settings = get_settings()
    if database is None:
        database = MongoDatabase(
            mongo_uri=settings.database.mongo_uri,
            db_name=settings.database.database_name,
        )

    use_case = RegenerateOccupancyUseCase(
        location_repository=LocationRepository(database),
        occupancy_repository=OccupancyRepository(database),
        occupancy_source=SyntheticOccupancySource(
            variation=settings.generator.variation,
            seed=settings.generator.seed,
            timezone_name=settings.generator.timezone,
        ),
    )
    return use_case, database


class CallbackTask(Task):
    """Base task class that centralizes logging behaviour."""

    def on_success(self, retval, task_id, args, kwargs):
        logger.info("task.succeeded", task_id=task_id, result=retval)

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(
            "task.failed",
            task_id=task_id,
            error=str(exc),
            traceback=einfo.traceback,
            exc_info=exc,
        )
