"""
Composition Root - Main Layer

Declarative dependency-injector container. Repositories, the occupancy
source and the freshness gate are process-wide singletons; use cases that
hold no state are built per request.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from src.application.models import PredictionOptions, SystemInfo
from src.application.use_cases.freshness_gate import FreshnessGate
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from src.application.use_cases.location_history_use_case import (
    GetLocationHistoryUseCase,
)
from src.application.use_cases.prediction_orchestrator import PredictionOrchestrator
from src.application.use_cases.regenerate_occupancy_use_case import (
    RegenerateOccupancyUseCase,
)
from src.infrastructure.database import MongoDatabase
from src.infrastructure.repositories.location_repository import LocationRepository
from src.infrastructure.repositories.occupancy_repository import OccupancyRepository
from src.infrastructure.services.health_check_service import HealthCheckService
from src.infrastructure.services.occupancy_generator import SyntheticOccupancySource
from src.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


def _enum_value(value):
    return value.value if hasattr(value, "value") else str(value)


class AppContainer(containers.DeclarativeContainer):
    """Providers for the HTTP process, configured from ``AppSettings``."""

    wiring_config = containers.WiringConfiguration(packages=["..presentation"])

    config = providers.Configuration()

    # Storage and data source
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
    )

    location_repository = providers.Singleton(
        LocationRepository,
        mongo_database=mongo_database,
    )

    occupancy_repository = providers.Singleton(
        OccupancyRepository,
        mongo_database=mongo_database,
    )

    occupancy_source = providers.Singleton(
        SyntheticOccupancySource,
        variation=config.generator.variation,
        seed=config.generator.seed,
        timezone_name=config.generator.timezone,
    )

    health_check_service = providers.Singleton(
        HealthCheckService,
        mongo_database=mongo_database,
        broker_url=config.celery.broker_url,
        redis_url=config.celery.result_backend_url,
    )

    # Forecasting
    prediction_options = providers.Singleton(
        PredictionOptions,
        method=config.forecast.method,
        horizon_minutes=config.forecast.horizon_minutes,
        periods=config.forecast.periods,
        min_data_points=config.forecast.min_data_points,
        auto_tune=config.forecast.auto_tune,
    )

    prediction_orchestrator = providers.Singleton(PredictionOrchestrator)

    regenerate_occupancy_use_case = providers.Factory(
        RegenerateOccupancyUseCase,
        location_repository=location_repository,
        occupancy_repository=occupancy_repository,
        occupancy_source=occupancy_source,
    )

    # One gate per process so its lock guards every request
    freshness_gate = providers.Singleton(
        FreshnessGate,
        occupancy_repository=occupancy_repository,
        regenerate_use_case=regenerate_occupancy_use_case,
        orchestrator=prediction_orchestrator,
        prediction_options=prediction_options,
        threshold_seconds=config.snapshot.freshness_threshold_seconds,
        history_window_hours=config.snapshot.history_window_hours,
        history_limit=config.snapshot.history_limit,
        location_repository=location_repository,
    )

    get_location_history_use_case = providers.Factory(
        GetLocationHistoryUseCase,
        location_repository=location_repository,
        occupancy_repository=occupancy_repository,
        orchestrator=prediction_orchestrator,
        prediction_options=prediction_options,
        history_limit=config.snapshot.history_limit,
    )

    system_info = providers.Singleton(
        SystemInfo,
        title=config.service.title,
        description=config.service.description,
        version=config.service.version,
        environment=providers.Callable(_enum_value, config.environment),
        git_commit=config.service.git_commit,
        build_time=config.service.build_time,
        celery_broker_url=config.celery.broker_url,
        celery_result_backend_url=config.celery.result_backend_url,
        freshness_threshold_seconds=config.snapshot.freshness_threshold_seconds,
        forecast_method=providers.Callable(_enum_value, config.forecast.method),
        forecast_horizon_minutes=config.forecast.horizon_minutes,
    )

    get_health_status_use_case = providers.Factory(
        GetHealthStatusUseCase,
        health_check_service=health_check_service,
    )

    get_application_info_use_case = providers.Factory(
        GetApplicationInfoUseCase,
        health_check_service=health_check_service,
        system_info=system_info,
    )


_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Create, configure and register the process-wide container.

    Instantiating the container wires the presentation package.
    """
    global _app_container
    _app_container = AppContainer()
    _app_container.config.from_pydantic(settings)
    return _app_container


def get_container() -> AppContainer:
    if _app_container is None:
        raise RuntimeError("init_container() must run before get_container()")
    return _app_container


@asynccontextmanager
async def app_lifespan():
    """Ensure MongoDB indexes on startup and close the client on shutdown."""
    container = get_container()
    mongo_database = container.mongo_database()

    try:
        await mongo_database.create_indexes()
        logger.info("container.started")
        yield container
    finally:
        mongo_database.close()
        logger.info("container.stopped")
