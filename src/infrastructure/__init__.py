"""Adapters for MongoDB, Celery, the synthetic occupancy source and health probes."""

from src.infrastructure import repositories

__all__ = ["repositories"]
