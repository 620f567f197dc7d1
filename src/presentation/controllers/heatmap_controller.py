"""
Presentation Layer - Heatmap Controller

Serves the freshness-gated occupancy snapshot of every location and the
recent history of a single location.
"""

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.application.dtos.snapshot_dto import (
    LocationHistoryResponseDTO,
    SnapshotResponseDTO,
)
from src.application.use_cases.freshness_gate import FreshnessGate
from src.application.use_cases.location_history_use_case import (
    GetLocationHistoryUseCase,
)
from src.domain.entities.errors import LocationNotFoundError, RegenerationError
from src.main.container import AppContainer

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/heatmap", tags=["Heatmap"])


@router.get(
    "/map-data",
    response_model=SnapshotResponseDTO,
    summary="Current occupancy of every location",
    description="""
    Serve the cached current status of every location together with a live
    short-horizon prediction and history statistics. When any cached status is
    older than the freshness threshold the whole set is regenerated first.
    """,
)
@inject
async def get_map_data(
    freshness_gate: FreshnessGate = Depends(Provide[AppContainer.freshness_gate]),
) -> SnapshotResponseDTO:
    try:
        snapshot = await freshness_gate.execute()
    except RegenerationError as exc:
        logger.error("snapshot.regeneration_failed", error=exc.message)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message
        )
    except Exception as exc:  # pragma: no cover - defensive logging
        logger.error("snapshot.unexpected_error", error=str(exc), exc_info=exc)
        raise HTTPException(status_code=500, detail="Internal server error")

    if not snapshot.data:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No occupancy data available",
        )
    return snapshot


@router.get(
    "/locations/{location_id}/history",
    response_model=LocationHistoryResponseDTO,
    summary="History and forecast of one location",
)
@inject
async def get_location_history(
    location_id: str,
    hours: int = Query(24, ge=1, le=168, description="History window in hours"),
    history_use_case: GetLocationHistoryUseCase = Depends(
        Provide[AppContainer.get_location_history_use_case]
    ),
) -> LocationHistoryResponseDTO:
    try:
        return await history_use_case.execute(location_id, hours=hours)
    except LocationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    except Exception as exc:  # pragma: no cover - defensive logging
        logger.error(
            "location_history.unexpected_error",
            location_id=location_id,
            error=str(exc),
            exc_info=exc,
        )
        raise HTTPException(status_code=500, detail="Internal server error")
