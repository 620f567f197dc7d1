"""Use case returning the history and a short-term forecast for one location."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from src.application.dtos.snapshot_dto import (
    CurrentStatusDTO,
    HistoryPointDTO,
    LocationHistoryResponseDTO,
    LocationPredictionDTO,
)
from src.application.models import PredictionOptions
from src.application.use_cases.prediction_orchestrator import PredictionOrchestrator
from src.domain.entities.errors import LocationNotFoundError
from src.domain.entities.prediction import ConfidenceLevel, PredictionMethod
from src.domain.repositories.location_repository import ILocationRepository
from src.domain.repositories.occupancy_repository import IOccupancyRepository
from src.domain.services.occupancy_color import UNKNOWN_COLOR, occupancy_percentage


class GetLocationHistoryUseCase:
    """Use case for reading the recent history of a location."""

    def __init__(
        self,
        location_repository: ILocationRepository,
        occupancy_repository: IOccupancyRepository,
        orchestrator: PredictionOrchestrator,
        prediction_options: Optional[PredictionOptions] = None,
        history_limit: int = 50,
    ) -> None:
        if history_limit <= 0:
            raise ValueError("history_limit must be positive")
        self._location_repository = location_repository
        self._occupancy_repository = occupancy_repository
        self._orchestrator = orchestrator
        self._prediction_options = prediction_options or PredictionOptions()
        self._history_limit = history_limit

    async def execute(
        self,
        location_id: str,
        hours: int = 24,
        now: Optional[datetime] = None,
    ) -> LocationHistoryResponseDTO:
        if hours <= 0:
            raise ValueError("hours must be positive")

        location = await self._location_repository.find_by_id(location_id)
        if location is None:
            raise LocationNotFoundError(location_id)

        now = now or datetime.now(timezone.utc)
        status = await self._occupancy_repository.get_current_status(location_id)
        history = await self._occupancy_repository.fetch_recent_history(
            location_id, since=now - timedelta(hours=hours)
        )

        current = CurrentStatusDTO(
            count=status.current_count if status else 0,
            color=(status.color or UNKNOWN_COLOR) if status else UNKNOWN_COLOR,
            last_updated=status.status_timestamp if status else None,
        )

        options = self._prediction_options
        if history:
            # the window is returned in full, the forecast only sees its tail
            recent = history[-self._history_limit :]
            result = self._orchestrator.predict(
                [record.to_sample() for record in recent], options
            )
            prediction = LocationPredictionDTO(
                count=result.prediction,
                confidence=result.confidence,
                method=result.method,
                horizon_minutes=result.horizon_minutes,
            )
        else:
            prediction = LocationPredictionDTO(
                count=current.count,
                confidence=ConfidenceLevel.LOW,
                method=PredictionMethod.FALLBACK,
                horizon_minutes=options.horizon_minutes,
            )

        return LocationHistoryResponseDTO(
            location_id=location.location_id,
            name=location.name,
            capacity=location.capacity,
            current=current,
            history=[
                HistoryPointDTO(
                    timestamp=record.timestamp,
                    count=record.current_count,
                    occupancy_rate=occupancy_percentage(
                        record.current_count, location.capacity
                    ),
                )
                for record in history
            ],
            prediction=prediction,
            hours=hours,
        )
