"""Celery task implementations for infrastructure services."""

from .base import CallbackTask, build_regeneration_use_case, logger
from .occupancy_generation import generate_occupancy_cycle, seed_occupancy_history

__all__ = [
    "CallbackTask",
    "build_regeneration_use_case",
    "generate_occupancy_cycle",
    "logger",
    "seed_occupancy_history",
]
