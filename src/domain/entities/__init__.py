"""Entities and value objects shared by every layer."""

from .errors import (
    DomainError,
    InsufficientDataError,
    LocationNotFoundError,
    ModelNotInitializedError,
    RegenerationError,
)
from .health import ApplicationInfo, DependencyStatus, ServiceStatus, SystemHealth
from .occupancy import FreshnessState, HistoryRecord, Location, LocationStatus, Sample
from .prediction import (
    ConfidenceLevel,
    FitResult,
    FittedPoint,
    ForecastMethod,
    PredictionMethod,
    PredictionMetrics,
    PredictionResult,
    TuningResult,
)

__all__ = [
    "Sample",
    "Location",
    "LocationStatus",
    "HistoryRecord",
    "FreshnessState",
    "ConfidenceLevel",
    "ForecastMethod",
    "PredictionMethod",
    "PredictionMetrics",
    "PredictionResult",
    "FitResult",
    "FittedPoint",
    "TuningResult",
    "SystemHealth",
    "DependencyStatus",
    "ServiceStatus",
    "ApplicationInfo",
    "DomainError",
    "InsufficientDataError",
    "ModelNotInitializedError",
    "LocationNotFoundError",
    "RegenerationError",
]
