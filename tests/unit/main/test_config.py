from __future__ import annotations

from src.main.config import AppSettings, get_settings
from src.domain.entities.prediction import ForecastMethod
from src.shared.consts import EnumEnvironment


def test_get_settings_loads_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DB_MONGO_URI", raising=False)
    settings = get_settings()
    assert settings.database.mongo_uri.startswith("mongodb://")
    assert settings.environment == EnumEnvironment.DEVELOPMENT


def test_settings_respect_environment_variables(monkeypatch) -> None:
    monkeypatch.setenv("DB_MONGO_URI", "mongodb://test")
    monkeypatch.setenv("SERVICE_TITLE", "Testing")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = AppSettings()

    assert settings.database.mongo_uri == "mongodb://test"
    assert settings.service.title == "Testing"
    assert settings.logging.level.value == "DEBUG"


def test_forecast_and_snapshot_sections(monkeypatch) -> None:
    monkeypatch.setenv("FORECAST_METHOD", "linear_trend")
    monkeypatch.setenv("FORECAST_HORIZON_MINUTES", "30")
    monkeypatch.setenv("SNAPSHOT_FRESHNESS_THRESHOLD_SECONDS", "120")
    monkeypatch.setenv("GENERATOR_SEED", "7")

    settings = AppSettings()

    assert settings.forecast.method is ForecastMethod.LINEAR_TREND
    assert settings.forecast.horizon_minutes == 30
    assert settings.forecast.periods == 12
    assert settings.snapshot.freshness_threshold_seconds == 120
    assert settings.snapshot.history_window_hours == 6
    assert settings.generator.seed == 7
    assert settings.generator.interval_minutes == 1


def test_snapshot_defaults() -> None:
    settings = AppSettings()

    assert settings.snapshot.freshness_threshold_seconds == 60
    assert settings.forecast.method is ForecastMethod.EMA
    assert settings.database.database_name == "crowdcast"
