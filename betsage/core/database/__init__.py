"""Optional persistence for accepted predictions."""

from .models import Base, PredictionRow
from .connection import create_engine, create_session_factory

__all__ = ["Base", "PredictionRow", "create_engine", "create_session_factory"]
