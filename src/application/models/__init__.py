"""Application-level configuration structures."""

from .prediction_options import PredictionOptions
from .system_info import SystemInfo

__all__ = ["PredictionOptions", "SystemInfo"]
