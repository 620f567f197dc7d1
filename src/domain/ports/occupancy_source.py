"""Domain port for reading fresh occupancy counts."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Protocol, Sequence

from src.domain.entities.occupancy import Location


class IOccupancySource(Protocol):
    """Interface for anything able to report the current count per location."""

    async def read_counts(
        self, locations: Sequence[Location], at: datetime
    ) -> Dict[str, int]:
        """Return a count for every location, keyed by location ID."""
        ...
