"""
Composition root.

Settings, the dependency-injection container and the two process entry
points (``app`` for the HTTP API, ``worker`` for Celery) live here. Nothing
outside this package imports from it except the presentation wiring.
"""

from .config import AppSettings, get_settings
from .container import AppContainer, get_container, init_container

__all__ = [
    "AppContainer",
    "AppSettings",
    "get_container",
    "get_settings",
    "init_container",
]
