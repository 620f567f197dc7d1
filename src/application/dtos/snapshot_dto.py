"""
Application DTOs - Snapshot

Data Transfer Objects for the heatmap snapshot and per-location history
responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.domain.entities.occupancy import FreshnessState
from src.domain.entities.prediction import ConfidenceLevel, PredictionMethod


class SnapshotEntryDTO(BaseModel):
    """Cached current state of one location plus a live prediction."""

    location_id: str
    name: str
    capacity: int
    current_count: int = Field(ge=0)
    color: str
    status_timestamp: datetime
    predicted_count: int = Field(ge=0, description="Forecast at the horizon")
    prediction_confidence: ConfidenceLevel
    prediction_method: PredictionMethod
    prediction_horizon_minutes: int
    history_average_count: Optional[float] = Field(
        default=None, description="Mean count over the history window"
    )
    history_sample_count: int = 0
    history_window_hours: Optional[float] = Field(
        default=None, description="Hours spanned by the history window"
    )
    history_latest_timestamp: Optional[datetime] = None


class SnapshotResponseDTO(BaseModel):
    """Response returned by the freshness gate."""

    success: bool = True
    source: FreshnessState = Field(
        description="fresh when served from cache, stale when regenerated first"
    )
    generated_at: datetime
    data: List[SnapshotEntryDTO] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "source": "fresh",
                "generated_at": "2024-09-09T12:00:30Z",
                "data": [
                    {
                        "location_id": "canteen",
                        "name": "Main Canteen",
                        "capacity": 200,
                        "current_count": 84,
                        "color": "#eab308",
                        "status_timestamp": "2024-09-09T12:00:00Z",
                        "predicted_count": 88,
                        "prediction_confidence": "medium",
                        "prediction_method": "exponential_moving_average",
                        "prediction_horizon_minutes": 15,
                        "history_average_count": 79.4,
                        "history_sample_count": 50,
                        "history_window_hours": 4.08,
                        "history_latest_timestamp": "2024-09-09T12:00:00Z",
                    }
                ],
            }
        }
    }


class HistoryPointDTO(BaseModel):
    """One history row with its occupancy percentage."""

    timestamp: datetime
    count: int
    occupancy_rate: int = Field(description="Percent of capacity, 0 when unknown")


class CurrentStatusDTO(BaseModel):
    """Current status section of the location history response."""

    count: int
    color: str
    last_updated: Optional[datetime] = None


class LocationPredictionDTO(BaseModel):
    count: int
    confidence: ConfidenceLevel
    method: PredictionMethod
    horizon_minutes: int


class LocationHistoryResponseDTO(BaseModel):
    """Response for the per-location history endpoint."""

    location_id: str
    name: str
    capacity: int
    current: CurrentStatusDTO
    history: List[HistoryPointDTO] = Field(default_factory=list)
    prediction: LocationPredictionDTO
    hours: int
