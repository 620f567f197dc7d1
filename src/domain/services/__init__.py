"""Domain services: forecasting models, confidence rules and color mapping."""

from .confidence import ConfidenceClassifier
from .ema import EmaModel
from .linear_trend import LinearTrendModel
from .occupancy_color import heatmap_color, occupancy_percentage

__all__ = [
    "ConfidenceClassifier",
    "EmaModel",
    "LinearTrendModel",
    "heatmap_color",
    "occupancy_percentage",
]
