"""Pydantic request and response models for the HTTP API."""

from .health_dto import ApplicationInfoDTO, DependencyStatusDTO, SystemHealthDTO
from .prediction_dto import (
    PredictionMetricsDTO,
    PredictionRequestDTO,
    PredictionResultDTO,
    SampleDTO,
)
from .snapshot_dto import (
    CurrentStatusDTO,
    HistoryPointDTO,
    LocationHistoryResponseDTO,
    LocationPredictionDTO,
    SnapshotEntryDTO,
    SnapshotResponseDTO,
)

__all__ = [
    "SystemHealthDTO",
    "DependencyStatusDTO",
    "ApplicationInfoDTO",
    "SampleDTO",
    "PredictionRequestDTO",
    "PredictionMetricsDTO",
    "PredictionResultDTO",
    "SnapshotEntryDTO",
    "SnapshotResponseDTO",
    "HistoryPointDTO",
    "CurrentStatusDTO",
    "LocationPredictionDTO",
    "LocationHistoryResponseDTO",
]
