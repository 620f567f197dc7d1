"""
Logging Configuration - Shared Layer

structlog on top of the standard library. Both structlog events and records
from third-party loggers go through one ``ProcessorFormatter`` so the API,
the Celery worker and the drivers share a single output format.

Logging is configured twice: once at import time from ``LOG_*`` variables,
then again from :class:`~src.main.config.AppSettings` once they load.
"""

import logging
import os
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import Processor

from src.shared.consts import SERVICE_NAME, EnumEnvironment, EnumLogRenderer

# Driver and broker libraries that are chatty at INFO
NOISY_LOGGERS = ("pymongo", "kombu", "amqp", "celery.beat")


def _value(item: Any) -> Optional[str]:
    return getattr(item, "value", item)


def _pick_renderer(renderer: Optional[str], environment: str) -> Processor:
    if renderer is None:
        production = environment == EnumEnvironment.PRODUCTION.value
        renderer = EnumLogRenderer.JSON.value if production else EnumLogRenderer.CONSOLE.value
    if renderer == EnumLogRenderer.JSON.value:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _common_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _build_handlers(file_path: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if file_path:
        handlers.append(logging.FileHandler(file_path))
    return handlers


def configure_logging(
    level: Optional[str] = None,
    renderer: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: str = "development",
) -> None:
    """
    Install the structlog pipeline and replace the root handlers.

    Args:
        level: Log level name, ``LOG_LEVEL`` or INFO when omitted.
        renderer: ``console`` or ``json``. ``LOG_RENDERER`` when omitted, and
            JSON in production when neither is set.
        file_path: Extra file handler target, ``LOG_FILE_PATH`` when omitted.
        environment: Deployment environment name.
    """
    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    file_path = file_path or os.environ.get("LOG_FILE_PATH")
    environment = environment.lower()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_common_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _pick_renderer(
                renderer or os.environ.get("LOG_RENDERER") or None, environment
            ),
        ],
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in _build_handlers(file_path):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_common_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)

    structlog.get_logger(__name__).info(
        "logging.configured",
        level=level_name,
        environment=environment,
        file_path=file_path,
    )


def update_logging_from_settings(settings: Any) -> None:
    """Reconfigure from the loaded ``AppSettings``."""
    section = settings.logging
    configure_logging(
        level=_value(section.level),
        renderer=_value(section.renderer),
        file_path=section.file_path,
        environment=_value(settings.environment),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
