"""HTTP routers for the heatmap, prediction and system endpoints."""

from src.presentation import controllers

__all__ = ["controllers"]
