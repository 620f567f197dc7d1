"""
Occupancy domain: locations, samples and statuses, the smoothing models and
the ports the application layer depends on. Framework free.
"""

from src.domain import entities, ports, repositories, services

__all__ = ["entities", "ports", "repositories", "services"]
