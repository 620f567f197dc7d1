"""
Location Repository Interface

Abstracts read access to the monitored locations and their capacities.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities.occupancy import Location


class ILocationRepository(ABC):
    """Interface for Location repository implementations."""

    @abstractmethod
    async def find_all(self) -> List[Location]:
        """
        Return every monitored location ordered by location ID.

        Returns:
            List of locations
        """
        pass

    @abstractmethod
    async def find_by_id(self, location_id: str) -> Optional[Location]:
        """
        Find a location by its ID.

        Args:
            location_id: The unique identifier of the location

        Returns:
            The location if found, None otherwise
        """
        pass
