"""
Prediction pipeline.

Formats odds for the model, calls it, and validates what comes back.
"""

from .extractor import extract_predictions
from .formatter import FormattedGame, format_games, NOT_AVAILABLE
from .oracle import ClaudeOracle
from .schemas import PredictionBundle, PredictionRecord, SportPerformance
from .service import PredictionService

__all__ = [
    "extract_predictions",
    "FormattedGame",
    "format_games",
    "NOT_AVAILABLE",
    "ClaudeOracle",
    "PredictionBundle",
    "PredictionRecord",
    "SportPerformance",
    "PredictionService",
]
