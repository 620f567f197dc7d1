from __future__ import annotations

import pytest

from src.infrastructure import settings as worker_settings


@pytest.fixture(autouse=True)
def reset_cache(monkeypatch):
    monkeypatch.setattr(worker_settings, "_settings", None)


def test_worker_settings_read_shared_prefixes(monkeypatch) -> None:
    monkeypatch.setenv("DB_MONGO_URI", "mongodb://db:27017/?replicaSet=rs0")
    monkeypatch.setenv("GENERATOR_SEED", "11")
    monkeypatch.setenv("GENERATOR_TIMEZONE", "Europe/Lisbon")

    loaded = worker_settings.get_settings()

    assert loaded.database.mongo_uri == "mongodb://db:27017/?replicaSet=rs0"
    assert loaded.database.database_name == "crowdcast"
    assert loaded.generator.seed == 11
    assert loaded.generator.timezone == "Europe/Lisbon"
    assert loaded.generator.variation == 0.2


def test_worker_settings_are_cached() -> None:
    assert worker_settings.get_settings() is worker_settings.get_settings()
