"""Celery tasks producing synthetic occupancy data."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

from src.application.use_cases.regenerate_occupancy_use_case import (
    summarize_statuses,
)
from src.infrastructure.services.celery_config import (
    GENERATION_TASK,
    SEED_TASK,
    celery_app,
)
from src.infrastructure.services.tasks.base import (
    CallbackTask,
    build_regeneration_use_case,
    logger,
)


@celery_app.task(bind=True, base=CallbackTask, name=GENERATION_TASK)
def generate_occupancy_cycle(self) -> dict[str, Any]:
    """Regenerate the current status of every location."""

    use_case, database = build_regeneration_use_case()
    try:
        now = datetime.now(timezone.utc)
        statuses = asyncio.run(use_case.execute(now))
        return {
            "locations": len(statuses),
            "counts": summarize_statuses(statuses),
            "timestamp": now.isoformat(),
        }
    except Exception as exc:
        logger.error("generation.cycle_failed", error=str(exc), exc_info=exc)
        raise
    finally:
        database.close()


@celery_app.task(bind=True, base=CallbackTask, name=SEED_TASK)
def seed_occupancy_history(
    self, hours_back: int = 24, interval_minutes: int = 5
) -> dict[str, Any]:
    """Backfill ``hours_back`` hours of history at ``interval_minutes`` spacing."""

    use_case, database = build_regeneration_use_case()
    try:
        written = asyncio.run(
            use_case.seed_history(
                hours_back=hours_back, interval_minutes=interval_minutes
            )
        )
        return {
            "rows": written,
            "hours_back": hours_back,
            "interval_minutes": interval_minutes,
        }
    except Exception as exc:
        logger.error("generation.seed_failed", error=str(exc), exc_info=exc)
        raise
    finally:
        database.close()
