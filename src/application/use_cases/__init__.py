"""Application use cases."""

from .freshness_gate import FreshnessGate, history_statistics
from .health_use_cases import GetApplicationInfoUseCase, GetHealthStatusUseCase
from .location_history_use_case import GetLocationHistoryUseCase
from .prediction_orchestrator import PredictionOrchestrator
from .regenerate_occupancy_use_case import RegenerateOccupancyUseCase

__all__ = [
    "FreshnessGate",
    "history_statistics",
    "GetApplicationInfoUseCase",
    "GetHealthStatusUseCase",
    "GetLocationHistoryUseCase",
    "PredictionOrchestrator",
    "RegenerateOccupancyUseCase",
]
