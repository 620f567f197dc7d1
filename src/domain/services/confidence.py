"""Map forecast error or data variability to a confidence label."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from src.domain.entities.prediction import ConfidenceLevel


class ConfidenceClassifier:
    """Three-level confidence classification rules."""

    HIGH_MAPE = 20.0
    MEDIUM_MAPE = 40.0

    HIGH_CV = 0.15
    MEDIUM_CV = 0.35

    MIN_VARIABILITY_POINTS = 3

    @classmethod
    def from_error(cls, mape: float) -> ConfidenceLevel:
        """Classify by backtest MAPE (percent)."""
        if mape < cls.HIGH_MAPE:
            return ConfidenceLevel.HIGH
        if mape < cls.MEDIUM_MAPE:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW

    @classmethod
    def from_variability(cls, values: Sequence[float]) -> ConfidenceLevel:
        """Classify by the coefficient of variation of the raw values."""
        if len(values) < cls.MIN_VARIABILITY_POINTS:
            return ConfidenceLevel.LOW

        data = np.asarray(values, dtype=float)
        mean = float(np.mean(data))
        if mean == 0:
            return ConfidenceLevel.LOW

        cv = float(np.std(data)) / mean
        if cv < cls.HIGH_CV:
            return ConfidenceLevel.HIGH
        if cv < cls.MEDIUM_CV:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
