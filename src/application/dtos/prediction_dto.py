"""
Application DTOs - Prediction

Data Transfer Objects for ad-hoc forecasts produced by the prediction
orchestrator.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.application.models import PredictionOptions
from src.domain.entities.occupancy import Sample
from src.domain.entities.prediction import (
    ConfidenceLevel,
    PredictionMethod,
    PredictionMetrics,
    PredictionResult,
)

# Largest series accepted per request, the EMA backtest grows with its square
MAX_REQUEST_SAMPLES = 1000


class SampleDTO(BaseModel):
    """A single observation posted for forecasting."""

    timestamp: datetime
    value: int = Field(ge=0, description="Observed occupancy count")

    def to_domain(self) -> Sample:
        return Sample(timestamp=self.timestamp, value=self.value)


class PredictionRequestDTO(BaseModel):
    """Payload accepted by the ad-hoc prediction endpoint."""

    samples: List[SampleDTO] = Field(
        default_factory=list,
        max_length=MAX_REQUEST_SAMPLES,
        description="Historical series, any order",
    )
    options: PredictionOptions = Field(
        default_factory=PredictionOptions,
        description="Model selection and tuning knobs",
    )

    def to_samples(self) -> List[Sample]:
        return [sample.to_domain() for sample in self.samples]

    model_config = {
        "json_schema_extra": {
            "example": {
                "samples": [
                    {"timestamp": "2024-09-09T12:00:00Z", "value": 50},
                    {"timestamp": "2024-09-09T12:05:00Z", "value": 55},
                    {"timestamp": "2024-09-09T12:10:00Z", "value": 60},
                    {"timestamp": "2024-09-09T12:15:00Z", "value": 58},
                ],
                "options": {
                    "method": "linear_trend",
                    "horizon_minutes": 15,
                    "auto_tune": True,
                },
            }
        }
    }


class PredictionMetricsDTO(BaseModel):
    """Backtest error metrics attached to a prediction."""

    mae: float
    mape: float
    mse: Optional[float] = None
    rmse: Optional[float] = None

    @classmethod
    def from_domain(cls, metrics: PredictionMetrics) -> "PredictionMetricsDTO":
        return cls(
            mae=metrics.mae, mape=metrics.mape, mse=metrics.mse, rmse=metrics.rmse
        )


class PredictionResultDTO(BaseModel):
    """JSON representation of a prediction result."""

    prediction: int = Field(ge=0, description="Forecast occupancy count")
    confidence: ConfidenceLevel
    method: PredictionMethod
    horizon_minutes: int
    forecasts: List[int] = Field(default_factory=list)
    metrics: Optional[PredictionMetricsDTO] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
    data_points: int = Field(default=0, description="Samples used for the forecast")
    error: Optional[str] = Field(
        default=None, description="Set when the forecast degraded to fallback"
    )

    @classmethod
    def from_domain(cls, result: PredictionResult) -> "PredictionResultDTO":
        return cls(
            prediction=result.prediction,
            confidence=result.confidence,
            method=result.method,
            horizon_minutes=result.horizon_minutes,
            forecasts=list(result.forecasts),
            metrics=(
                PredictionMetricsDTO.from_domain(result.metrics)
                if result.metrics is not None
                else None
            ),
            parameters=dict(result.parameters),
            data_points=result.data_points,
            error=result.error,
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "prediction": 61,
                "confidence": "high",
                "method": "linear_trend",
                "horizon_minutes": 15,
                "forecasts": [61, 62, 64],
                "metrics": {"mae": 2.1, "mape": 3.6, "mse": 5.3, "rmse": 2.3},
                "parameters": {
                    "alpha": 0.5,
                    "beta": 0.1,
                    "forecast_steps": 3,
                    "auto_tuned": True,
                },
                "data_points": 4,
                "error": None,
            }
        }
    }
