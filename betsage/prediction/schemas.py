"""
Pydantic models for validated model output.

Field names follow the camelCase JSON the model is asked to produce; the
Python attributes are snake_case.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Line = Union[float, str]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        allow_inf_nan=False,
    )


class PredictedScore(_CamelModel):
    home: float
    away: float


class PredictionRecord(_CamelModel):
    """One game's prediction, as returned by the model."""
    id: str = Field(..., min_length=1)
    home_team: str
    away_team: str
    game_time: str
    spread: Line
    total: Line
    predicted_score: PredictedScore
    predicted_spread: float
    predicted_total: float
    spread_edge: float
    total_edge: float
    spread_win_prob: float = Field(..., ge=0, le=1)
    total_win_prob: float = Field(..., ge=0, le=1)
    kelly_spread: float
    kelly_total: float
    recommendation: str
    confidence: str
    key_factors: List[str] = Field(default_factory=list)


class PredictionBundle(_CamelModel):
    """Top-level prediction payload returned to API callers."""
    games: List[PredictionRecord]
    last_updated: str
    sport: str
    message: Optional[str] = None

    @field_validator("sport")
    @classmethod
    def upper_sport(cls, v: str) -> str:
        return v.strip().upper()


class SportPerformance(_CamelModel):
    """Aggregate statistics over recorded predictions for one sport."""
    sport: str
    total_predictions: int
    avg_spread_edge: Optional[float] = None
    avg_total_edge: Optional[float] = None
