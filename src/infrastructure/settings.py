"""
Worker-side settings.

Celery tasks must not import the composition root, so the few values they
need are read here from the same ``DB_`` and ``GENERATOR_`` variables the API
uses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkerDatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )

    mongo_uri: str = "mongodb://localhost:27017/crowdcast?replicaSet=rs0"
    database_name: str = "crowdcast"


class WorkerGeneratorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GENERATOR_", case_sensitive=False, extra="ignore"
    )

    variation: float = Field(default=0.2, ge=0.0, lt=1.0)
    seed: Optional[int] = None
    timezone: Optional[str] = None


class WorkerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    database: WorkerDatabaseSettings = Field(default_factory=WorkerDatabaseSettings)
    generator: WorkerGeneratorSettings = Field(default_factory=WorkerGeneratorSettings)


_settings: WorkerSettings | None = None


def get_settings() -> WorkerSettings:
    """Load once per worker process."""
    global _settings
    if _settings is None:
        _settings = WorkerSettings()
    return _settings
