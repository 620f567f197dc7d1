"""
Domain Service - Linear Trend Smoother

Holt's two-parameter exponential smoothing. The model keeps a smoothed
level and a smoothed per-step trend:

    L_t = alpha * X_t + (1 - alpha) * (L_{t-1} + T_{t-1})
    T_t = beta * (L_t - L_{t-1}) + (1 - beta) * T_{t-1}
    F_{t+h} = L_t + h * T_t

Instances hold mutable state and are meant to be created per call.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import structlog

from src.domain.entities.errors import (
    DomainError,
    InsufficientDataError,
    ModelNotInitializedError,
)
from src.domain.entities.occupancy import Sample
from src.domain.entities.prediction import (
    FitResult,
    FittedPoint,
    PredictionMetrics,
    TuningResult,
)
from src.domain.services.forecast_metrics import clamp_prediction, holt_error_metrics

logger = structlog.get_logger(__name__)

DEFAULT_ALPHA = 0.3
DEFAULT_BETA = 0.3
DEFAULT_GRID = (0.1, 0.2, 0.3, 0.4, 0.5)


def _validate_smoothing(name: str, value: float) -> float:
    if not 0.0 < value < 1.0:
        raise ValueError(f"{name} must be between 0 and 1 (exclusive), got {value}")
    return float(value)


class LinearTrendModel:
    """Level + trend smoother with grid-search auto-tuning."""

    name = "linear_trend"

    def __init__(self, alpha: float = DEFAULT_ALPHA, beta: float = DEFAULT_BETA):
        self.alpha = _validate_smoothing("alpha", alpha)
        self.beta = _validate_smoothing("beta", beta)
        self.level: Optional[float] = None
        self.trend: Optional[float] = None

    @property
    def initialized(self) -> bool:
        return self.level is not None and self.trend is not None

    def initialize(self, series: Sequence[Sample]) -> None:
        """Seed level with the first value and trend with the first difference."""
        if len(series) < 2:
            raise InsufficientDataError(required=2, received=len(series))

        self.level = float(series[0].value)
        self.trend = float(series[1].value - series[0].value)

    def update(self, value: float) -> None:
        if not self.initialized:
            raise ModelNotInitializedError("LinearTrendModel")

        previous_level = self.level
        self.level = self.alpha * value + (1 - self.alpha) * (
            previous_level + self.trend
        )
        self.trend = self.beta * (self.level - previous_level) + (
            1 - self.beta
        ) * self.trend

        if not (math.isfinite(self.level) and math.isfinite(self.trend)):
            raise ArithmeticError("Linear trend state diverged")

    def forecast(self, steps: int = 1) -> int:
        if not self.initialized:
            raise ModelNotInitializedError("LinearTrendModel")
        return clamp_prediction(self.level + steps * self.trend)

    def fit(self, series: Sequence[Sample], forecast_steps: int = 1) -> FitResult:
        """Fit to a historical series and forecast ``forecast_steps`` ahead.

        Fewer than three points produce a flat forecast of the last value
        and zero metrics.
        """
        if len(series) < 3:
            last_value = series[-1].value if series else 0
            return FitResult(
                fitted=[
                    FittedPoint(
                        timestamp=sample.timestamp,
                        value=sample.value,
                        fitted=sample.value,
                    )
                    for sample in series
                ],
                forecasts=[last_value] * forecast_steps,
                metrics=PredictionMetrics(mae=0.0, mape=0.0, mse=0.0),
            )

        ordered = sorted(series, key=lambda sample: sample.timestamp)
        self.initialize(ordered[:2])

        fitted: List[FittedPoint] = []
        actuals: List[float] = []
        predictions: List[float] = []

        for index, sample in enumerate(ordered):
            if index >= 2:
                # The one-step-ahead forecast for index i only sees i - 1.
                self.update(ordered[index - 1].value)
                forecast = self.forecast(1)
                actuals.append(sample.value)
                predictions.append(forecast)
            else:
                forecast = sample.value

            fitted.append(
                FittedPoint(
                    timestamp=sample.timestamp, value=sample.value, fitted=forecast
                )
            )

        self.update(ordered[-1].value)

        forecasts = [self.forecast(h) for h in range(1, forecast_steps + 1)]
        metrics = holt_error_metrics(actuals, predictions)

        return FitResult(fitted=fitted, forecasts=forecasts, metrics=metrics)

    @classmethod
    def auto_tune(
        cls,
        series: Sequence[Sample],
        alpha_range: Optional[Sequence[float]] = None,
        beta_range: Optional[Sequence[float]] = None,
    ) -> TuningResult:
        """Grid-search alpha/beta minimising in-sample one-step MSE.

        Ties keep the first pair encountered. Pairs that fail are skipped.
        """
        alphas = tuple(alpha_range) if alpha_range else DEFAULT_GRID
        betas = tuple(beta_range) if beta_range else DEFAULT_GRID

        best = TuningResult(alpha=DEFAULT_ALPHA, beta=DEFAULT_BETA, mse=math.inf)

        for alpha in alphas:
            for beta in betas:
                try:
                    result = cls(alpha, beta).fit(series, 1)
                except (ValueError, ArithmeticError, DomainError) as exc:
                    logger.debug(
                        "linear_trend.auto_tune.pair_skipped",
                        alpha=alpha,
                        beta=beta,
                        error=str(exc),
                    )
                    continue

                mse = result.metrics.mse if result.metrics.mse is not None else 0.0
                if mse < best.mse:
                    best = TuningResult(
                        alpha=alpha, beta=beta, mse=mse, metrics=result.metrics
                    )

        return best
