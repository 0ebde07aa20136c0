"""
Prediction API Endpoints.

The one endpoint that costs money: every call may hit both The Odds API and
Claude, so it sits behind the per-client rate limiter.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from betsage.api.dependencies import enforce_rate_limit, get_prediction_service
from betsage.prediction.schemas import PredictionBundle
from betsage.prediction.service import PredictionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Predictions"])


class PredictionRequest(BaseModel):
    """Body of POST /predictions."""
    sport: str = Field(..., min_length=1, max_length=20, description="Sport code: nba, nhl, cbb, nfl or mlb")


@router.post(
    "/predictions",
    response_model=PredictionBundle,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_rate_limit)],
)
async def create_predictions(
    body: PredictionRequest,
    service: PredictionService = Depends(get_prediction_service),
):
    """
    Generate predictions for today's games in one sport.

    Rate limited per client (10 requests per hour by default).

    Example:
        POST /predictions
        {"sport": "nba"}

        Response:
        {
            "games": [{"id": "...", "homeTeam": "...", "spreadEdge": 2.5, ...}],
            "lastUpdated": "2025-01-15T18:00:00.000Z",
            "sport": "NBA"
        }
    """
    return await service.generate(body.sport)
