"""
SQLAlchemy ORM Models for BetSage.

One append-only table holding every validated prediction.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import String, Integer, Float, Text, DateTime, JSON, Index, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class PredictionRow(Base):
    """
    A single game prediction as accepted from the model.

    Lines are stored as text because the provider sentinel "N/A" can appear
    in place of a number. Strings written by the model are unbounded
    Text.
    """
    __tablename__ = "predictions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sport: Mapped[str] = mapped_column(String(10), nullable=False)
    game_id: Mapped[str] = mapped_column(Text, nullable=False)
    home_team: Mapped[str] = mapped_column(Text, nullable=False)
    away_team: Mapped[str] = mapped_column(Text, nullable=False)
    game_time: Mapped[Optional[str]] = mapped_column(Text)

    spread: Mapped[Optional[str]] = mapped_column(Text)
    total: Mapped[Optional[str]] = mapped_column(Text)

    predicted_home_score: Mapped[float] = mapped_column(Float, nullable=False)
    predicted_away_score: Mapped[float] = mapped_column(Float, nullable=False)
    predicted_spread: Mapped[float] = mapped_column(Float, nullable=False)
    predicted_total: Mapped[float] = mapped_column(Float, nullable=False)

    spread_edge: Mapped[float] = mapped_column(Float, nullable=False)
    total_edge: Mapped[float] = mapped_column(Float, nullable=False)
    spread_win_prob: Mapped[float] = mapped_column(Float, nullable=False)
    total_win_prob: Mapped[float] = mapped_column(Float, nullable=False)
    kelly_spread: Mapped[float] = mapped_column(Float, nullable=False)
    kelly_total: Mapped[float] = mapped_column(Float, nullable=False)

    recommendation: Mapped[str] = mapped_column(Text, nullable=False)
    confidence: Mapped[str] = mapped_column(Text, nullable=False)
    key_factors: Mapped[List[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp()
    )

    __table_args__ = (
        Index("idx_predictions_sport", "sport"),
        Index("idx_predictions_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PredictionRow {self.sport} {self.away_team} @ {self.home_team}>"
