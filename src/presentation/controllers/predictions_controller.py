"""
Presentation Layer - Predictions Controller

Exposes an endpoint to forecast an arbitrary posted occupancy series.
"""

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from src.application.dtos.prediction_dto import (
    PredictionRequestDTO,
    PredictionResultDTO,
)
from src.application.use_cases.prediction_orchestrator import PredictionOrchestrator
from src.main.container import AppContainer

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/predictions", tags=["Predictions"])


@router.post(
    "",
    response_model=PredictionResultDTO,
    summary="Forecast a posted occupancy series",
    description="""
    Run the selected smoothing model over the posted samples and return the
    forecast at the requested horizon. Series shorter than `min_data_points`
    produce a low-confidence fallback result carrying the last observed value.
    The endpoint never fails because of the model itself; degraded forecasts
    report `method = fallback` and an `error` message.
    """,
)
@inject
async def predict_series(
    request: PredictionRequestDTO,
    orchestrator: PredictionOrchestrator = Depends(
        Provide[AppContainer.prediction_orchestrator]
    ),
) -> PredictionResultDTO:
    result = orchestrator.predict(request.to_samples(), request.options)
    logger.debug(
        "prediction.served",
        method=result.method.value,
        data_points=result.data_points,
        fallback=result.is_fallback,
    )
    return PredictionResultDTO.from_domain(result)
