"""
Occupancy Repository Interface

Abstracts the current-status cache (one row per location) and the
append-only occupancy history.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from src.domain.entities.occupancy import HistoryRecord, LocationStatus


class IOccupancyRepository(ABC):
    """Interface for occupancy status/history repository implementations."""

    @abstractmethod
    async def list_current_statuses(self) -> List[LocationStatus]:
        """
        Return the cached current status of every location, joined with the
        location name and capacity, ordered by location ID.
        """
        pass

    @abstractmethod
    async def get_current_status(self, location_id: str) -> Optional[LocationStatus]:
        """
        Return the cached current status of a single location.

        Args:
            location_id: The unique identifier of the location

        Returns:
            The cached status if present, None otherwise
        """
        pass

    @abstractmethod
    async def fetch_recent_history(
        self,
        location_id: str,
        since: datetime,
        limit: Optional[int] = None,
    ) -> List[HistoryRecord]:
        """
        Fetch history rows recorded at or after ``since``.

        Args:
            location_id: The unique identifier of the location
            since: Lower bound (inclusive) of the history window
            limit: Keep only the most recent ``limit`` rows when provided

        Returns:
            History rows in ascending timestamp order
        """
        pass

    @abstractmethod
    async def write_cycle(
        self,
        statuses: Sequence[LocationStatus],
        history: Sequence[HistoryRecord],
    ) -> None:
        """
        Upsert the current statuses and append the history rows atomically.

        Either every write of the cycle is committed or none is.

        Raises:
            RegenerationError: If the cycle could not be persisted
        """
        pass

    @abstractmethod
    async def append_history(self, history: Sequence[HistoryRecord]) -> int:
        """
        Append history rows atomically, used for backfilling.

        Returns:
            Number of rows written

        Raises:
            RegenerationError: If the rows could not be persisted
        """
        pass
