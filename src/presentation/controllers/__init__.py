"""FastAPI routers mounted by ``src.main.app``."""

from .heatmap_controller import router as heatmap_router
from .predictions_controller import router as predictions_router
from .system_controller import router as system_router

__all__ = ["heatmap_router", "predictions_router", "system_router"]
