"""
Application Use Case - Regenerate Occupancy

Reads a fresh count for every location and persists one status upsert plus
one history row per location as a single all-or-nothing cycle. Also backs
the history backfill used to bootstrap a new deployment.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

import structlog

from src.domain.entities.errors import RegenerationError
from src.domain.entities.occupancy import HistoryRecord, Location, LocationStatus
from src.domain.ports.occupancy_source import IOccupancySource
from src.domain.repositories.location_repository import ILocationRepository
from src.domain.repositories.occupancy_repository import IOccupancyRepository
from src.domain.services.occupancy_color import heatmap_color

logger = structlog.get_logger(__name__)


class RegenerateOccupancyUseCase:
    """Runs regeneration cycles against the status cache and history log."""

    def __init__(
        self,
        location_repository: ILocationRepository,
        occupancy_repository: IOccupancyRepository,
        occupancy_source: IOccupancySource,
    ) -> None:
        self._location_repository = location_repository
        self._occupancy_repository = occupancy_repository
        self._occupancy_source = occupancy_source

    async def execute(self, now: Optional[datetime] = None) -> List[LocationStatus]:
        """Regenerate the status of every location at ``now``.

        Raises:
            RegenerationError: If counts are missing or the cycle could not
                be persisted. Nothing is written in that case.
        """
        now = now or datetime.now(timezone.utc)
        locations = await self._location_repository.find_all()
        if not locations:
            logger.warning("regeneration.no_locations")
            return []

        counts = await self._occupancy_source.read_counts(locations, now)

        statuses: List[LocationStatus] = []
        history: List[HistoryRecord] = []
        for location in locations:
            count = self._bounded_count(location, counts)
            statuses.append(
                LocationStatus(
                    location_id=location.location_id,
                    current_count=count,
                    color=heatmap_color(count, location.capacity),
                    status_timestamp=now,
                    name=location.name,
                    capacity=location.capacity,
                )
            )
            history.append(
                HistoryRecord(
                    location_id=location.location_id,
                    current_count=count,
                    timestamp=now,
                )
            )

        await self._occupancy_repository.write_cycle(statuses, history)

        logger.info(
            "regeneration.cycle_written",
            locations=len(statuses),
            rows=len(statuses) + len(history),
            timestamp=now.isoformat(),
        )
        return statuses

    async def seed_history(
        self,
        hours_back: int = 24,
        interval_minutes: int = 5,
        now: Optional[datetime] = None,
    ) -> int:
        """Backfill history rows from ``hours_back`` ago up to ``now``.

        Returns:
            Number of history rows written
        """
        if hours_back <= 0:
            raise ValueError("hours_back must be positive")
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")

        now = now or datetime.now(timezone.utc)
        locations = await self._location_repository.find_all()
        if not locations:
            logger.warning("regeneration.seed_skipped", reason="no_locations")
            return 0

        step = timedelta(minutes=interval_minutes)
        cursor = now - timedelta(hours=hours_back)
        history: List[HistoryRecord] = []

        while cursor <= now:
            counts = await self._occupancy_source.read_counts(locations, cursor)
            for location in locations:
                history.append(
                    HistoryRecord(
                        location_id=location.location_id,
                        current_count=self._bounded_count(location, counts),
                        timestamp=cursor,
                    )
                )
            cursor += step

        written = await self._occupancy_repository.append_history(history)
        logger.info(
            "regeneration.history_seeded",
            locations=len(locations),
            rows=written,
            hours_back=hours_back,
            interval_minutes=interval_minutes,
        )
        return written

    @staticmethod
    def _bounded_count(location: Location, counts: Dict[str, int]) -> int:
        if location.location_id not in counts:
            raise RegenerationError(
                f"No occupancy count available for location {location.location_id}",
                {"location_id": location.location_id},
            )

        count = max(0, int(counts[location.location_id]))
        if location.capacity > 0:
            count = min(count, location.capacity)
        return count


def summarize_statuses(statuses: Sequence[LocationStatus]) -> Dict[str, int]:
    """Map location ID to current count, mainly for task results."""
    return {status.location_id: status.current_count for status in statuses}
