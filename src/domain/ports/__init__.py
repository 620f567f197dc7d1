"""Domain ports package."""

from .health_check import IHealthCheckService
from .occupancy_source import IOccupancySource

__all__ = ["IHealthCheckService", "IOccupancySource"]
