"""
API Entry Point - Main Layer

Builds the FastAPI application: wires the container, mounts the system,
heatmap and prediction routers and ties MongoDB setup and teardown to the
application lifespan.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.main.config import get_settings
from src.main.container import app_lifespan, init_container
from src.presentation.controllers import (
    heatmap_router,
    predictions_router,
    system_router,
)
from src.shared import configure_logging, get_logger, update_logging_from_settings

# Bootstrap from LOG_* first so settings errors are logged too
configure_logging()
update_logging_from_settings(get_settings())

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("api.starting")

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("api.stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    init_container(settings)

    app = FastAPI(
        title=settings.service.title,
        description=settings.service.description,
        version=settings.service.version,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    for router in (system_router, heatmap_router, predictions_router):
        app.include_router(router)
    return app


app = create_app()


def serve() -> None:
    """Console entry point, runs the module-level app under uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main.app:app",
        host=settings.service.host,
        port=settings.service.port,
        reload=settings.service.reload,
        log_config=None,
    )
