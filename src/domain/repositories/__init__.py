"""Persistence contracts for locations, current statuses and history."""

from .location_repository import ILocationRepository
from .occupancy_repository import IOccupancyRepository

__all__ = ["ILocationRepository", "IOccupancyRepository"]
