"""
Domain Entities - Occupancy

Entities describing locations, their cached current status and the
append-only occupancy history the forecasting core is fed with.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class FreshnessState(str, Enum):
    """Whether cached current-state may be served as-is."""

    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class Sample:
    """A single time-stamped occupancy observation."""

    timestamp: datetime
    value: int


@dataclass(slots=True)
class Location:
    """A monitored location and its capacity."""

    location_id: str
    name: str
    capacity: int


@dataclass(slots=True)
class LocationStatus:
    """Cached current state of one location (one row per location)."""

    location_id: str
    current_count: int
    color: Optional[str]
    status_timestamp: datetime
    name: str = ""
    capacity: int = 0

    def age_seconds(self, now: datetime) -> float:
        """Seconds elapsed between the status timestamp and ``now``."""
        return (now - self.status_timestamp).total_seconds()


@dataclass(frozen=True, slots=True)
class HistoryRecord:
    """Immutable occupancy history row appended on every regeneration."""

    location_id: str
    current_count: int
    timestamp: datetime

    def to_sample(self) -> Sample:
        return Sample(timestamp=self.timestamp, value=self.current_count)
