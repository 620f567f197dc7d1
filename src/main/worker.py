"""
Worker Entry Point - Main Layer

Runs a Celery worker consuming the occupancy generation queue with an
embedded beat scheduler, so one process both schedules and executes the
periodic cycle.
"""

import os

from src.main.config import get_settings
from src.shared import configure_logging, get_logger, update_logging_from_settings

configure_logging()
update_logging_from_settings(get_settings())

logger = get_logger(__name__)

WORKER_ARGV = [
    "worker",
    "--loglevel=info",
    "--beat",
    "--concurrency=2",
    "--max-tasks-per-child=100",
]


def create_worker():
    """Build the Celery app from the loaded settings.

    The broker and backend URLs are also exported so that the task module,
    which builds its own default app on import, connects to the same services.
    """
    from src.infrastructure.services.celery_config import create_celery_app

    settings = get_settings()
    os.environ.setdefault("CELERY_BROKER_URL", settings.celery.broker_url)
    os.environ.setdefault("CELERY_RESULT_BACKEND", settings.celery.result_backend_url)

    worker_app = create_celery_app(
        broker_url=settings.celery.broker_url,
        backend_url=settings.celery.result_backend_url,
        generation_interval_minutes=settings.generator.interval_minutes,
    )
    logger.info(
        "worker.configured",
        app_name=worker_app.main,
        interval_minutes=settings.generator.interval_minutes,
    )
    return worker_app


def main():
    from src.infrastructure.services.celery_config import GENERATION_QUEUE

    worker_app = create_worker()
    logger.info("worker.starting", queue=GENERATION_QUEUE)
    worker_app.worker_main([*WORKER_ARGV, f"--queues={GENERATION_QUEUE}"])


if __name__ == "__main__":
    main()
