"""Infrastructure services package."""

from . import tasks
from .celery_config import celery_app
from .health_check_service import HealthCheckService
from .occupancy_generator import SyntheticOccupancySource

__all__ = ["celery_app", "tasks", "HealthCheckService", "SyntheticOccupancySource"]
