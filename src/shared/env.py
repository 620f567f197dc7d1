"""Environment utilities for resolving Docker secret files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict

import structlog

logger = structlog.get_logger(__name__)


def load_secret_file_variables() -> Dict[str, str]:
    """
    Resolve environment variables that follow Docker secret conventions.

    For every KEY_FILE entry, read the referenced file and expose its
    contents via KEY unless KEY is already set. Unreadable files are logged
    and skipped.

    Returns:
        Mapping of resolved variable names to the file they were read from
    """
    resolved: Dict[str, str] = {}

    for key, file_path in list(os.environ.items()):
        if not key.endswith("_FILE") or not file_path:
            continue
        target_key = key[: -len("_FILE")]
        if os.environ.get(target_key):
            continue
        try:
            os.environ[target_key] = Path(file_path).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "env.secret_file.load_failed", key=key, path=file_path, error=str(exc)
            )
            continue
        resolved[target_key] = file_path

    return resolved


# DB_MONGO_URI_FILE and friends must be resolved before settings are read.
load_secret_file_variables()
