"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InsufficientDataError(DomainError):
    """Raised when a forecasting model receives fewer points than it needs."""

    def __init__(
        self,
        required: int,
        received: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Insufficient data to initialize: need at least {required} "
            f"data point(s), got {received}"
        )
        merged = {"required": required, "received": received}
        merged.update(details or {})
        super().__init__(message, merged)


class ModelNotInitializedError(DomainError):
    """Raised when a forecasting model is used before initialization."""

    def __init__(self, model_name: str, details: Optional[Dict[str, Any]] = None):
        message = f"{model_name} must be initialized before use"
        super().__init__(message, details)


class LocationNotFoundError(DomainError):
    """Raised when a location cannot be found."""

    def __init__(self, location_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"Location with ID {location_id} not found"
        super().__init__(message, details)


class RegenerationError(DomainError):
    """Raised when a snapshot regeneration cycle could not be persisted."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
