"""
Prediction Recorder for BetSage.

Stores every accepted prediction and serves per-sport aggregates for the
/performance endpoint.
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from betsage.core.database.connection import create_session_factory
from betsage.core.database.models import Base, PredictionRow
from betsage.prediction.schemas import PredictionBundle, PredictionRecord, SportPerformance

logger = logging.getLogger(__name__)


class PredictionRecorder:
    """
    Append-only store of validated predictions.

    Example:
        >>> recorder = PredictionRecorder(engine)
        >>> await recorder.create_tables()
        >>> await recorder.record("nba", bundle)
        2
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory: async_sessionmaker[AsyncSession] = create_session_factory(engine)

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Prediction tables ready")

    async def record(self, sport: str, bundle: PredictionBundle) -> int:
        """
        Insert one row per game in ``bundle``.

        Returns:
            Number of rows written.
        """
        rows = [self._to_row(sport, game) for game in bundle.games]
        if not rows:
            return 0

        async with self.session_factory() as session:
            try:
                session.add_all(rows)
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error(f"Database session rollback: {e}")
                raise

        logger.info(f"Recorded {len(rows)} {sport.upper()} predictions")
        return len(rows)

    async def performance(self) -> List[SportPerformance]:
        """Per-sport prediction count and average spread/total edge."""
        query = (
            select(
                PredictionRow.sport,
                func.count(PredictionRow.id),
                func.avg(PredictionRow.spread_edge),
                func.avg(PredictionRow.total_edge),
            )
            .group_by(PredictionRow.sport)
            .order_by(PredictionRow.sport)
        )

        async with self.session_factory() as session:
            result = await session.execute(query)
            return [
                SportPerformance(
                    sport=sport,
                    total_predictions=count,
                    avg_spread_edge=round(float(avg_spread), 2) if avg_spread is not None else None,
                    avg_total_edge=round(float(avg_total), 2) if avg_total is not None else None,
                )
                for sport, count, avg_spread, avg_total in result.all()
            ]

    async def close(self) -> None:
        await self.engine.dispose()

    @staticmethod
    def _to_row(sport: str, game: PredictionRecord) -> PredictionRow:
        return PredictionRow(
            sport=sport.upper(),
            game_id=game.id,
            home_team=game.home_team,
            away_team=game.away_team,
            game_time=game.game_time,
            spread=str(game.spread),
            total=str(game.total),
            predicted_home_score=game.predicted_score.home,
            predicted_away_score=game.predicted_score.away,
            predicted_spread=game.predicted_spread,
            predicted_total=game.predicted_total,
            spread_edge=game.spread_edge,
            total_edge=game.total_edge,
            spread_win_prob=game.spread_win_prob,
            total_win_prob=game.total_win_prob,
            kelly_spread=game.kelly_spread,
            kelly_total=game.kelly_total,
            recommendation=game.recommendation,
            confidence=game.confidence,
            key_factors=list(game.key_factors),
        )
