from __future__ import annotations

import pytest

from src.domain.entities.errors import InsufficientDataError, ModelNotInitializedError
from src.domain.entities.prediction import ConfidenceLevel
from src.domain.services.ema import EmaModel
from tests.conftest import make_series


def test_alpha_is_derived_from_periods() -> None:
    assert EmaModel(periods=12).alpha == pytest.approx(2 / 13)
    assert EmaModel(alpha=0.5).alpha == 0.5


@pytest.mark.parametrize("kwargs", [{"periods": 0}, {"alpha": 0.0}, {"alpha": 1.5}])
def test_invalid_configuration_is_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        EmaModel(**kwargs)


def test_initialize_requires_a_sample() -> None:
    with pytest.raises(InsufficientDataError):
        EmaModel().initialize([])


def test_predict_before_initialize_raises() -> None:
    with pytest.raises(ModelNotInitializedError):
        EmaModel().predict(1)


def test_quarter_hour_prediction_follows_positive_trend() -> None:
    model = EmaModel(periods=5)

    model.initialize(make_series([50, 55, 60, 58, 62, 65]))

    # seed = mean of the first five values, then 65 is folded in
    assert model.previous_ema == pytest.approx(57.0)
    assert model.current_ema == pytest.approx(57.0 + (65 - 57.0) / 3)
    assert model.trend == pytest.approx(8 / 3)
    prediction = model.predict(0.25)
    assert prediction == 60
    assert prediction >= 57


def test_initialize_folds_every_remaining_sample() -> None:
    model = EmaModel(alpha=0.5, periods=1)

    model.initialize(make_series([10, 20, 30]))

    # 10 -> 15 -> 22.5
    assert model.current_ema == pytest.approx(22.5)
    assert model.trend == pytest.approx(7.5)


def test_short_series_has_zero_trend() -> None:
    model = EmaModel(periods=12)

    model.initialize(make_series([40, 44]))

    assert model.current_ema == pytest.approx(42.0)
    assert model.trend == 0
    assert model.predict(3) == 42


def test_prediction_is_clamped_to_zero() -> None:
    model = EmaModel(periods=1)

    model.initialize(make_series([10, 0]))

    assert model.predict(1) == 0


@pytest.mark.parametrize(
    "values,expected",
    [
        ([100, 100, 100], ConfidenceLevel.HIGH),
        ([90, 100, 110], ConfidenceLevel.HIGH),
        ([70, 100, 130], ConfidenceLevel.MEDIUM),
        ([1, 2, 3], ConfidenceLevel.LOW),
        ([0, 0, 0], ConfidenceLevel.LOW),
        ([100, 100], ConfidenceLevel.LOW),
    ],
)
def test_confidence_from_variability(values, expected) -> None:
    assert EmaModel().calculate_confidence(make_series(values)) is expected


def test_calculate_metrics_skips_zero_actuals_in_mape() -> None:
    metrics = EmaModel.calculate_metrics([10, 0, 20], [12, 1, 18])

    assert metrics.mae == pytest.approx(1.67)
    assert metrics.rmse == pytest.approx(1.73)
    assert metrics.mape == pytest.approx(15.0)
    assert metrics.mse is None


@pytest.mark.parametrize("actual,predicted", [([], []), ([1, 2], [1])])
def test_calculate_metrics_returns_zeros_for_unusable_input(actual, predicted) -> None:
    metrics = EmaModel.calculate_metrics(actual, predicted)

    assert (metrics.mae, metrics.rmse, metrics.mape) == (0.0, 0.0, 0.0)
