"""Numeric helpers shared by the smoothing models."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from src.domain.entities.prediction import PredictionMetrics


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def clamp_prediction(value: float) -> int:
    """Round a raw model output and clamp it to a non-negative count."""
    return max(0, round_half_up(value))


def _round2(value: float) -> float:
    return round(float(value), 2)


def holt_error_metrics(
    actual: Sequence[float], forecast: Sequence[float]
) -> PredictionMetrics:
    """MSE, MAE and MAPE over one-step-ahead errors.

    MAPE ignores zero actuals in the numerator but averages over every
    scored point.
    """
    if len(actual) == 0:
        return PredictionMetrics(mae=0.0, mape=0.0, mse=0.0)

    y_true = np.asarray(actual, dtype=float)
    y_pred = np.asarray(forecast, dtype=float)
    errors = y_true - y_pred

    mse = float(np.mean(errors**2))
    mae = float(np.mean(np.abs(errors)))

    nonzero = y_true != 0
    pct = np.zeros_like(errors)
    pct[nonzero] = np.abs(errors[nonzero] / y_true[nonzero])
    mape = float(np.sum(pct) / len(errors) * 100.0)

    return PredictionMetrics(mae=_round2(mae), mape=_round2(mape), mse=_round2(mse))


def backtest_error_metrics(
    actual: Sequence[float], predicted: Sequence[float]
) -> PredictionMetrics:
    """MAE, RMSE and MAPE for paired actual/predicted values.

    Empty or mismatched inputs yield all-zero metrics. MAPE is averaged over
    the non-zero actuals only.
    """
    if len(actual) == 0 or len(actual) != len(predicted):
        return PredictionMetrics(mae=0.0, mape=0.0, rmse=0.0)

    y_true = np.asarray(actual, dtype=float)
    y_pred = np.asarray(predicted, dtype=float)
    errors = y_true - y_pred

    mae = float(np.mean(np.abs(errors)))
    rmse = float(np.sqrt(np.mean(errors**2)))

    mask = y_true != 0
    if np.any(mask):
        mape = float(np.mean(np.abs(errors[mask] / y_true[mask])) * 100.0)
    else:
        mape = 0.0

    return PredictionMetrics(mae=_round2(mae), mape=_round2(mape), rmse=_round2(rmse))
