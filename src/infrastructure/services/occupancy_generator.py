"""
Synthetic occupancy source.

Produces plausible campus occupancy counts from the location capacity, a
base rate chosen by location name, hour-of-day and day-of-week multipliers
and a bounded random variation. Used in place of real sensors.
"""

from __future__ import annotations

import random
from datetime import datetime, tzinfo
from typing import Dict, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from src.domain.entities.occupancy import Location
from src.domain.services.forecast_metrics import round_half_up

DEFAULT_BASE_RATE = 0.35

# (name keywords, base occupancy rate), first match wins
BASE_RATES: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("canteen", "cafeteria"), 0.4),
    (("library",), 0.5),
    (("lab", "workshop"), 0.3),
    (("lecture", "theater"), 0.6),
    (("department", "administrative"), 0.25),
    (("washroom", "security"), 0.15),
)

# (end hour exclusive, multiplier)
HOUR_MULTIPLIERS: Tuple[Tuple[int, float], ...] = (
    (6, 0.05),
    (8, 0.3),
    (10, 1.0),
    (12, 0.9),
    (14, 1.2),
    (16, 0.85),
    (18, 0.7),
    (20, 0.4),
)
LATE_EVENING_MULTIPLIER = 0.15

# datetime.weekday(): Monday is 0
SATURDAY, SUNDAY = 5, 6
DAY_MULTIPLIERS: Dict[int, float] = {SATURDAY: 0.3, SUNDAY: 0.2}


def base_rate(name: str) -> float:
    lowered = name.lower()
    for keywords, rate in BASE_RATES:
        if any(keyword in lowered for keyword in keywords):
            return rate
    return DEFAULT_BASE_RATE


def hour_multiplier(hour: int) -> float:
    for end_hour, multiplier in HOUR_MULTIPLIERS:
        if hour < end_hour:
            return multiplier
    return LATE_EVENING_MULTIPLIER


def day_multiplier(weekday: int) -> float:
    return DAY_MULTIPLIERS.get(weekday, 1.0)


class SyntheticOccupancySource:
    """``IOccupancySource`` backed by a seedable random generator."""

    def __init__(
        self,
        variation: float = 0.2,
        seed: Optional[int] = None,
        timezone_name: Optional[str] = None,
    ) -> None:
        if not 0.0 <= variation < 1.0:
            raise ValueError("variation must be in [0, 1)")

        self._variation = variation
        self._random = random.Random(seed)
        self._timezone: Optional[tzinfo] = (
            ZoneInfo(timezone_name) if timezone_name else None
        )

    def count_for(self, location: Location, at: datetime) -> int:
        """Generate one count for ``location`` at ``at``, within capacity."""
        if location.capacity <= 0:
            return 0

        local = at.astimezone(self._timezone) if self._timezone else at
        expected = (
            location.capacity
            * base_rate(location.name)
            * hour_multiplier(local.hour)
            * day_multiplier(local.weekday())
        )
        factor = 1 + (self._random.random() - 0.5) * 2 * self._variation
        return max(0, min(location.capacity, round_half_up(expected * factor)))

    async def read_counts(
        self, locations: Sequence[Location], at: datetime
    ) -> Dict[str, int]:
        return {location.location_id: self.count_for(location, at) for location in locations}
