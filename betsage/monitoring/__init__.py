"""Prediction persistence and performance aggregates."""

from .prediction_recorder import PredictionRecorder

__all__ = ["PredictionRecorder"]
