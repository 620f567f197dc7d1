"""MongoDB implementations of the domain repository contracts."""

from .location_repository import LocationRepository
from .occupancy_repository import OccupancyRepository

__all__ = ["LocationRepository", "OccupancyRepository"]
