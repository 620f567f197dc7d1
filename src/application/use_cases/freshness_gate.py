"""
Application Use Case - Freshness Gate

Serves the cached current state of every location when it is fresh, or
regenerates it first when any entry is older than the freshness threshold,
the cache is empty, or a known location has no cached entry yet. Predictions are computed on every serve and are
never cached.

Regeneration is single-flight per gate instance: the first stale caller
regenerates while concurrent callers wait on the lock, re-read the cache
and serve it without writing.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Collection, Dict, List, Optional, Sequence, Tuple

import structlog

from src.application.dtos.snapshot_dto import SnapshotEntryDTO, SnapshotResponseDTO
from src.application.models import PredictionOptions
from src.application.use_cases.prediction_orchestrator import PredictionOrchestrator
from src.application.use_cases.regenerate_occupancy_use_case import (
    RegenerateOccupancyUseCase,
)
from src.domain.entities.occupancy import FreshnessState, HistoryRecord, LocationStatus
from src.domain.repositories.location_repository import ILocationRepository
from src.domain.repositories.occupancy_repository import IOccupancyRepository
from src.domain.services.occupancy_color import heatmap_color

logger = structlog.get_logger(__name__)


def history_statistics(history: Sequence[HistoryRecord]) -> Dict[str, Any]:
    """Average count, sample count, spanned hours and latest timestamp."""
    if not history:
        return {
            "average_count": None,
            "sample_count": 0,
            "window_hours": None,
            "latest_timestamp": None,
        }

    total = sum(record.current_count for record in history)
    first, last = history[0].timestamp, history[-1].timestamp
    span_seconds = (last - first).total_seconds()

    return {
        "average_count": round(total / len(history), 2),
        "sample_count": len(history),
        "window_hours": round(span_seconds / 3600, 2) if span_seconds > 0 else 0.0,
        "latest_timestamp": last,
    }


class FreshnessGate:
    """Decides between serving and regenerating the occupancy snapshot."""

    def __init__(
        self,
        occupancy_repository: IOccupancyRepository,
        regenerate_use_case: RegenerateOccupancyUseCase,
        orchestrator: PredictionOrchestrator,
        prediction_options: Optional[PredictionOptions] = None,
        threshold_seconds: int = 60,
        history_window_hours: int = 6,
        history_limit: int = 50,
        location_repository: Optional[ILocationRepository] = None,
    ) -> None:
        if threshold_seconds < 0:
            raise ValueError("threshold_seconds must not be negative")

        self._occupancy_repository = occupancy_repository
        self._regenerate_use_case = regenerate_use_case
        self._orchestrator = orchestrator
        self._prediction_options = prediction_options or PredictionOptions()
        self._threshold_seconds = threshold_seconds
        self._history_window = timedelta(hours=history_window_hours)
        self._history_limit = history_limit
        self._location_repository = location_repository
        self._lock = asyncio.Lock()

    @property
    def threshold_seconds(self) -> int:
        return self._threshold_seconds

    def evaluate(
        self,
        statuses: Sequence[LocationStatus],
        now: datetime,
        expected_ids: Optional[Collection[str]] = None,
    ) -> FreshnessState:
        """
        Fresh iff there is at least one entry, every id in ``expected_ids``
        has one, and none exceeds the threshold.
        """
        if not statuses:
            return FreshnessState.STALE

        if expected_ids:
            cached = {status.location_id for status in statuses}
            if any(location_id not in cached for location_id in expected_ids):
                return FreshnessState.STALE

        for status in statuses:
            if status.age_seconds(now) > self._threshold_seconds:
                return FreshnessState.STALE
        return FreshnessState.FRESH

    async def refresh(
        self, now: Optional[datetime] = None
    ) -> Tuple[FreshnessState, List[LocationStatus]]:
        """Return the cache state seen on arrival and the rows to serve."""
        now = now or datetime.now(timezone.utc)
        expected_ids = await self._known_location_ids()

        statuses = await self._occupancy_repository.list_current_statuses()
        if self.evaluate(statuses, now, expected_ids) is FreshnessState.FRESH:
            return FreshnessState.FRESH, statuses

        async with self._lock:
            statuses = await self._occupancy_repository.list_current_statuses()
            if self.evaluate(statuses, now, expected_ids) is FreshnessState.FRESH:
                logger.debug("snapshot.regeneration_joined", rows=len(statuses))
                return FreshnessState.FRESH, statuses

            logger.info(
                "snapshot.stale",
                rows=len(statuses),
                locations=len(expected_ids),
                threshold_seconds=self._threshold_seconds,
            )
            await self._regenerate_use_case.execute(now)
            statuses = await self._occupancy_repository.list_current_statuses()
            logger.info("snapshot.regenerated", rows=len(statuses))

        return FreshnessState.STALE, statuses

    async def _known_location_ids(self) -> List[str]:
        if self._location_repository is None:
            return []
        locations = await self._location_repository.find_all()
        return [location.location_id for location in locations]

    async def execute(self, now: Optional[datetime] = None) -> SnapshotResponseDTO:
        now = now or datetime.now(timezone.utc)
        state, statuses = await self.refresh(now)

        entries = [await self._build_entry(status, now) for status in statuses]

        return SnapshotResponseDTO(
            success=True,
            source=state,
            generated_at=now,
            data=entries,
        )

    async def _build_entry(
        self, status: LocationStatus, now: datetime
    ) -> SnapshotEntryDTO:
        history = await self._occupancy_repository.fetch_recent_history(
            status.location_id,
            since=now - self._history_window,
            limit=self._history_limit,
        )
        options = self._prediction_options
        result = self._orchestrator.predict(
            [record.to_sample() for record in history], options
        )
        predicted = status.current_count if result.is_fallback else result.prediction
        stats = history_statistics(history)

        return SnapshotEntryDTO(
            location_id=status.location_id,
            name=status.name,
            capacity=status.capacity,
            current_count=status.current_count,
            color=status.color or heatmap_color(status.current_count, status.capacity),
            status_timestamp=status.status_timestamp,
            predicted_count=predicted,
            prediction_confidence=result.confidence,
            prediction_method=result.method,
            prediction_horizon_minutes=result.horizon_minutes,
            history_average_count=stats["average_count"],
            history_sample_count=stats["sample_count"],
            history_window_hours=stats["window_hours"],
            history_latest_timestamp=stats["latest_timestamp"],
        )
