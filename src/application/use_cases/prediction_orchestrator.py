"""
Application Use Case - Prediction Orchestrator

Runs one of the smoothing models over the history of a single location and
always returns a ``PredictionResult``. Short series degrade to a fallback
result carrying the last observed value; unexpected failures degrade the
same way with an ``error`` attached.
"""

from __future__ import annotations

import math
from datetime import datetime
from numbers import Integral, Real
from statistics import median
from typing import Iterable, List, Optional, Sequence

import structlog

from src.application.models import PredictionOptions
from src.domain.entities.occupancy import Sample
from src.domain.entities.prediction import (
    ConfidenceLevel,
    ForecastMethod,
    PredictionMethod,
    PredictionMetrics,
    PredictionResult,
)
from src.domain.services.confidence import ConfidenceClassifier
from src.domain.services.ema import EmaModel
from src.domain.services.linear_trend import DEFAULT_ALPHA, LinearTrendModel

logger = structlog.get_logger(__name__)

MAX_FORECAST_STEPS = 100


class PredictionOrchestrator:
    """Selects, builds and runs a forecasting model per call."""

    def predict(
        self,
        samples: Iterable[Sample],
        options: Optional[PredictionOptions] = None,
    ) -> PredictionResult:
        options = options or PredictionOptions()
        accepted: List[Sample] = []
        series: List[Sample] = []

        try:
            series = self.normalize(samples, accepted)

            if len(series) < options.min_data_points:
                logger.debug(
                    "prediction.fallback",
                    reason="insufficient_data",
                    data_points=len(series),
                    min_data_points=options.min_data_points,
                )
                return self._fallback(series, options)

            if options.method == ForecastMethod.LINEAR_TREND:
                return self._predict_linear_trend(series, options)
            return self._predict_ema(series, options)
        except Exception as exc:  # noqa: BLE001 - forecasting never raises
            logger.warning(
                "prediction.failed",
                method=options.method.value,
                data_points=len(series),
                error=str(exc),
                exc_info=True,
            )
            # a rejected series falls back to the last sample that validated
            return self._fallback(series or accepted[-1:], options, error=str(exc))

    @staticmethod
    def normalize(
        samples: Iterable[Sample], accepted: Optional[List[Sample]] = None
    ) -> List[Sample]:
        """
        Validate every sample and return them in ascending time order.

        Samples that pass validation are appended to ``accepted`` as they are
        read, so a caller keeps the valid prefix when a later sample raises.
        """
        normalized: List[Sample] = accepted if accepted is not None else []
        for index, sample in enumerate(samples):
            timestamp = getattr(sample, "timestamp", None)
            value = getattr(sample, "value", None)

            if not isinstance(timestamp, datetime):
                raise ValueError(f"Sample {index} has no valid timestamp")
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ValueError(f"Sample {index} has a non-numeric value")
            if not isinstance(value, Integral):
                if not float(value).is_integer():
                    raise ValueError(f"Sample {index} value {value} is not a count")
            if value < 0:
                raise ValueError(f"Sample {index} value {value} is negative")

            normalized.append(Sample(timestamp=timestamp, value=int(value)))

        # sorted() is stable, equal timestamps keep their input order
        return sorted(normalized, key=lambda item: item.timestamp)

    @staticmethod
    def infer_interval_minutes(series: Sequence[Sample]) -> Optional[float]:
        """Median positive spacing between consecutive samples, in minutes."""
        if len(series) < 2:
            return None

        deltas = [
            (series[i].timestamp - series[i - 1].timestamp).total_seconds()
            for i in range(1, len(series))
        ]
        valid = [delta for delta in deltas if delta > 0]
        if not valid:
            return None
        return median(valid) / 60

    def resolve_steps(
        self, series: Sequence[Sample], options: PredictionOptions
    ) -> int:
        """Number of linear-trend steps covering ``horizon_minutes``."""
        if options.forecast_steps is not None:
            return options.forecast_steps

        interval = self.infer_interval_minutes(series)
        if not interval:
            return 1
        steps = max(1, math.ceil(options.horizon_minutes / interval))
        return min(steps, MAX_FORECAST_STEPS)

    def _predict_linear_trend(
        self, series: Sequence[Sample], options: PredictionOptions
    ) -> PredictionResult:
        steps = self.resolve_steps(series, options)

        if options.auto_tune:
            tuning = LinearTrendModel.auto_tune(
                series, options.alpha_grid, options.beta_grid
            )
            alpha, beta = tuning.alpha, tuning.beta
        else:
            alpha = options.alpha if options.alpha is not None else DEFAULT_ALPHA
            beta = options.beta

        fit = LinearTrendModel(alpha, beta).fit(series, steps)
        mse = fit.metrics.mse or 0.0
        metrics = PredictionMetrics(
            mae=fit.metrics.mae,
            mape=fit.metrics.mape,
            mse=mse,
            rmse=round(math.sqrt(mse), 2),
        )

        logger.debug(
            "prediction.linear_trend",
            alpha=alpha,
            beta=beta,
            forecast_steps=steps,
            data_points=len(series),
        )

        return PredictionResult(
            prediction=fit.forecasts[-1],
            confidence=ConfidenceClassifier.from_error(metrics.mape),
            method=PredictionMethod.LINEAR_TREND,
            horizon_minutes=options.horizon_minutes,
            forecasts=list(fit.forecasts),
            metrics=metrics,
            parameters={
                "alpha": alpha,
                "beta": beta,
                "forecast_steps": steps,
                "auto_tuned": options.auto_tune,
            },
            data_points=len(series),
        )

    def _predict_ema(
        self, series: Sequence[Sample], options: PredictionOptions
    ) -> PredictionResult:
        hours_ahead = options.hours_ahead

        model = EmaModel(alpha=options.alpha, periods=options.periods)
        model.initialize(series)
        prediction = model.predict(hours_ahead)

        metrics = self._ema_backtest(series, options)

        return PredictionResult(
            prediction=prediction,
            confidence=model.calculate_confidence(series),
            method=PredictionMethod.EMA,
            horizon_minutes=options.horizon_minutes,
            forecasts=[prediction],
            metrics=metrics,
            parameters={
                "alpha": model.alpha,
                "periods": model.periods,
                "ema": round(model.current_ema, 2),
                "trend": round(model.trend, 2),
                "hours_ahead": hours_ahead,
            },
            data_points=len(series),
        )

    @staticmethod
    def _ema_backtest(
        series: Sequence[Sample], options: PredictionOptions
    ) -> Optional[PredictionMetrics]:
        """Score one-step predictions of models rebuilt on growing prefixes."""
        periods = options.periods
        if len(series) <= periods + 1:
            return None

        actual: List[int] = []
        predicted: List[int] = []
        for index in range(periods, len(series) - 1):
            model = EmaModel(alpha=options.alpha, periods=periods)
            model.initialize(series[: index + 1])
            predicted.append(model.predict(1))
            actual.append(series[index + 1].value)

        return EmaModel.calculate_metrics(actual, predicted)

    def _fallback(
        self,
        series: Sequence[Sample],
        options: PredictionOptions,
        error: Optional[str] = None,
    ) -> PredictionResult:
        last_value = series[-1].value if series else 0
        if options.method == ForecastMethod.LINEAR_TREND:
            steps = self.resolve_steps(series, options)
        else:
            steps = 1

        return PredictionResult(
            prediction=last_value,
            confidence=ConfidenceLevel.LOW,
            method=PredictionMethod.FALLBACK,
            horizon_minutes=options.horizon_minutes,
            forecasts=[last_value] * steps,
            metrics=None,
            parameters={},
            data_points=len(series),
            error=error,
        )
