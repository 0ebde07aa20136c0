"""
Performance API Endpoints for BetSage.

Aggregates over stored predictions. Only available when DATABASE_URL is set.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from betsage.api.dependencies import require_recorder
from betsage.monitoring.prediction_recorder import PredictionRecorder
from betsage.prediction.schemas import SportPerformance

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Performance"])


@router.get("/performance", response_model=List[SportPerformance])
async def get_performance(recorder: PredictionRecorder = Depends(require_recorder)):
    """
    Per-sport totals and average edges across all recorded predictions.

    Example:
        GET /performance

        Response:
        [
            {"sport": "NBA", "totalPredictions": 42, "avgSpreadEdge": 1.8, "avgTotalEdge": -0.4}
        ]
    """
    return await recorder.performance()
