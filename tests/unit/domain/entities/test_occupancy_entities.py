from datetime import timedelta

from src.domain.entities.errors import LocationNotFoundError
from src.domain.entities.occupancy import HistoryRecord, LocationStatus
from src.domain.entities.prediction import (
    ConfidenceLevel,
    PredictionMethod,
    PredictionResult,
)


def test_status_age_is_measured_against_now(now) -> None:
    status = LocationStatus(
        location_id="canteen",
        current_count=10,
        color=None,
        status_timestamp=now - timedelta(seconds=61),
    )

    assert status.age_seconds(now) == 61


def test_history_record_converts_to_sample(now) -> None:
    record = HistoryRecord(location_id="library", current_count=7, timestamp=now)

    sample = record.to_sample()

    assert sample.timestamp == now
    assert sample.value == 7


def test_fallback_flag() -> None:
    result = PredictionResult(
        prediction=3,
        confidence=ConfidenceLevel.LOW,
        method=PredictionMethod.FALLBACK,
        horizon_minutes=15,
    )

    assert result.is_fallback
    assert result.forecasts == []


def test_location_not_found_message() -> None:
    error = LocationNotFoundError("nowhere")

    assert error.message == "Location with ID nowhere not found"
