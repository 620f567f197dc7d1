"""Domain entities for occupancy predictions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ConfidenceLevel(str, Enum):
    """Coarse trustworthiness label attached to every prediction."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ForecastMethod(str, Enum):
    """Smoothing models the orchestrator can run."""

    LINEAR_TREND = "linear_trend"
    EMA = "exponential_moving_average"


class PredictionMethod(str, Enum):
    """Method reported on a prediction result."""

    LINEAR_TREND = "linear_trend"
    EMA = "exponential_moving_average"
    FALLBACK = "fallback"


@dataclass(slots=True)
class PredictionMetrics:
    """Backtest error metrics; ``mse`` and ``rmse`` depend on the model."""

    mae: float = 0.0
    mape: float = 0.0
    mse: Optional[float] = None
    rmse: Optional[float] = None

    def as_dict(self) -> Dict[str, float]:
        payload = {"mae": self.mae, "mape": self.mape}
        if self.mse is not None:
            payload["mse"] = self.mse
        if self.rmse is not None:
            payload["rmse"] = self.rmse
        return payload


@dataclass(slots=True)
class FittedPoint:
    """A historical point together with its one-step-ahead fitted value."""

    timestamp: datetime
    value: int
    fitted: int


@dataclass(slots=True)
class FitResult:
    """Outcome of fitting the linear-trend model to a series."""

    fitted: List[FittedPoint] = field(default_factory=list)
    forecasts: List[int] = field(default_factory=list)
    metrics: PredictionMetrics = field(
        default_factory=lambda: PredictionMetrics(mse=0.0)
    )


@dataclass(slots=True)
class TuningResult:
    """Best smoothing parameters found by the grid search."""

    alpha: float
    beta: float
    mse: float
    metrics: Optional[PredictionMetrics] = None


@dataclass(slots=True)
class PredictionResult:
    """Uniform result returned by the prediction orchestrator."""

    prediction: int
    confidence: ConfidenceLevel
    method: PredictionMethod
    horizon_minutes: int
    forecasts: List[int] = field(default_factory=list)
    metrics: Optional[PredictionMetrics] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    data_points: int = 0
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.method == PredictionMethod.FALLBACK
