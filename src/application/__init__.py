"""Use cases, request/response DTOs and option models."""

from src.application import dtos, models, use_cases

__all__ = ["dtos", "models", "use_cases"]
