"""Explicit configuration accepted by the prediction orchestrator."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.domain.entities.prediction import ForecastMethod

DEFAULT_GRID: Tuple[float, ...] = (0.1, 0.2, 0.3, 0.4, 0.5)


class PredictionOptions(BaseModel):
    """Validated knobs for a single prediction call.

    ``horizon_minutes`` is the only horizon callers set. The EMA model turns
    it into a fractional hour multiplier; the linear-trend model turns it
    into a step count based on the sampling interval of the series, unless
    ``forecast_steps`` is given explicitly.
    """

    method: ForecastMethod = Field(
        default=ForecastMethod.EMA, description="Smoothing model to run"
    )
    min_data_points: int = Field(
        default=3,
        ge=1,
        description="Below this many samples the fallback result is returned",
    )
    horizon_minutes: int = Field(
        default=15, ge=1, le=360, description="Forecast horizon in minutes"
    )
    alpha: Optional[float] = Field(
        default=None,
        gt=0.0,
        lt=1.0,
        description=(
            "Level smoothing weight. Defaults to 0.3 for the linear trend model "
            "and to 2 / (periods + 1) for the EMA model."
        ),
    )
    beta: float = Field(
        default=0.3, gt=0.0, lt=1.0, description="Trend smoothing weight"
    )
    periods: int = Field(
        default=12, ge=1, description="EMA seed window and alpha derivation"
    )
    auto_tune: bool = Field(
        default=True,
        description="Grid-search alpha/beta before fitting the linear trend model",
    )
    alpha_grid: Tuple[float, ...] = Field(
        default=DEFAULT_GRID, min_length=1, description="Alpha candidates"
    )
    beta_grid: Tuple[float, ...] = Field(
        default=DEFAULT_GRID, min_length=1, description="Beta candidates"
    )
    forecast_steps: Optional[int] = Field(
        default=None,
        ge=1,
        le=100,
        description="Explicit step count for the linear trend model",
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("alpha_grid", "beta_grid")
    @classmethod
    def validate_grid(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        for candidate in value:
            if not 0.0 < candidate < 1.0:
                raise ValueError(
                    f"Grid values must be between 0 and 1 (exclusive), got {candidate}"
                )
        return value

    @property
    def hours_ahead(self) -> float:
        return self.horizon_minutes / 60
