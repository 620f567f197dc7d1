"""
Cross-cutting helpers used by every layer: environment and log-level enums,
the structlog setup and the Docker secret loader. Nothing here may import
from the domain, application or infrastructure packages.
"""

from .consts import EnumEnvironment, EnumLogLevel, EnumLogRenderer
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "EnumEnvironment",
    "EnumLogLevel",
    "EnumLogRenderer",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
