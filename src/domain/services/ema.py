"""
Domain Service - Exponential Moving Average Smoother

    EMA_t = alpha * X_t + (1 - alpha) * EMA_{t-1},  alpha = 2 / (periods + 1)

Predictions extrapolate the last single-step change of the EMA. The horizon
is a fractional multiplier of that change (hours ahead), not a step count.
Input series are expected in ascending timestamp order.
"""

from __future__ import annotations

from typing import Optional, Sequence

from src.domain.entities.errors import InsufficientDataError, ModelNotInitializedError
from src.domain.entities.occupancy import Sample
from src.domain.entities.prediction import ConfidenceLevel, PredictionMetrics
from src.domain.services.confidence import ConfidenceClassifier
from src.domain.services.forecast_metrics import (
    backtest_error_metrics,
    clamp_prediction,
)

DEFAULT_PERIODS = 12


class EmaModel:
    """Single-parameter exponential smoother with trend extrapolation."""

    name = "exponential_moving_average"

    def __init__(self, alpha: Optional[float] = None, periods: int = DEFAULT_PERIODS):
        if periods < 1:
            raise ValueError(f"periods must be at least 1, got {periods}")
        if alpha is not None and not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")

        self.periods = periods
        self.alpha = float(alpha) if alpha is not None else 2 / (periods + 1)
        self.ema: Optional[float] = None
        self.previous_ema: Optional[float] = None

    @property
    def initialized(self) -> bool:
        return self.ema is not None

    @property
    def current_ema(self) -> float:
        if self.ema is None:
            raise ModelNotInitializedError("EmaModel")
        return self.ema

    @property
    def trend(self) -> float:
        if self.ema is None or self.previous_ema is None:
            raise ModelNotInitializedError("EmaModel")
        return self.ema - self.previous_ema

    def initialize(self, series: Sequence[Sample]) -> None:
        """Seed with the mean of the first ``periods`` values, fold the rest."""
        if len(series) == 0:
            raise InsufficientDataError(required=1, received=0)

        seed = series[: min(self.periods, len(series))]
        self.ema = sum(sample.value for sample in seed) / len(seed)
        self.previous_ema = self.ema

        for sample in series[len(seed) :]:
            self.update(sample.value)

    def update(self, value: float) -> None:
        if self.ema is None:
            raise ModelNotInitializedError("EmaModel")
        self.previous_ema = self.ema
        self.ema = self.alpha * value + (1 - self.alpha) * self.previous_ema

    def predict(self, hours_ahead: float = 1.0) -> int:
        return clamp_prediction(self.current_ema + self.trend * hours_ahead)

    def calculate_confidence(self, series: Sequence[Sample]) -> ConfidenceLevel:
        return ConfidenceClassifier.from_variability(
            [sample.value for sample in series]
        )

    @staticmethod
    def calculate_metrics(
        actual: Sequence[float], predicted: Sequence[float]
    ) -> PredictionMetrics:
        return backtest_error_metrics(actual, predicted)
