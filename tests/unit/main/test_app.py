from __future__ import annotations

import pytest
from dependency_injector import providers

from src.main import app as module_app
from src.main.app import create_app
from src.main.container import get_container


class _StubMongoDatabase:
    async def create_indexes(self) -> None:
        pass

    def close(self) -> None:
        pass


@pytest.mark.asyncio
async def test_create_app_initializes_lifespan() -> None:
    app = create_app()
    get_container().mongo_database.override(providers.Object(_StubMongoDatabase()))
    assert app.title

    async with app.router.lifespan_context(app):
        assert app.state.started_at is not None

    # Ensure module-level app is instantiated
    assert isinstance(module_app.app, type(app))


def test_app_exposes_heatmap_and_prediction_routes() -> None:
    app = create_app()
    paths = {route.path for route in app.routes}

    assert "/heatmap/map-data" in paths
    assert "/heatmap/locations/{location_id}/history" in paths
    assert "/predictions" in paths
    assert "/health" in paths
