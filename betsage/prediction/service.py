"""
Prediction pipeline.

odds fetch (cached) -> roster filter -> format -> oracle -> extract/validate
-> optional record. Each stage depends on the previous one, so the stages run
sequentially; blocking HTTP calls run in worker threads.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from betsage.collectors.odds_api import OddsAPIClient
from betsage.collectors.rosters import RosterFilter, roster_filter_for
from betsage.core.errors import InvalidInputError
from betsage.prediction.extractor import extract_predictions
from betsage.prediction.formatter import DEFAULT_GAME_LIMIT, format_games
from betsage.prediction.oracle import ClaudeOracle
from betsage.prediction.prompts import utc_timestamp
from betsage.prediction.schemas import PredictionBundle

if TYPE_CHECKING:
    from betsage.monitoring.prediction_recorder import PredictionRecorder

logger = logging.getLogger(__name__)


class PredictionService:
    """Runs the full prediction flow for one sport."""

    def __init__(
        self,
        odds_client: OddsAPIClient,
        oracle: ClaudeOracle,
        recorder: Optional["PredictionRecorder"] = None,
        game_limit: int = DEFAULT_GAME_LIMIT,
        roster_sports: Iterable[str] = ("cbb",),
        roster_lookup: Callable[[str], Optional[RosterFilter]] = roster_filter_for,
        recorder_timeout: float = 10.0,
    ):
        self.odds_client = odds_client
        self.oracle = oracle
        self.recorder = recorder
        self.game_limit = game_limit
        self.roster_sports = {s.lower() for s in roster_sports}
        self.roster_lookup = roster_lookup
        self.recorder_timeout = recorder_timeout

    async def generate(self, sport: str) -> PredictionBundle:
        """
        Produce validated predictions for today's ``sport`` slate.

        Raises:
            InvalidInputError: Unknown sport code.
            UpstreamError: Odds provider or model call failed.
            ParseError / SchemaValidationError: Unusable model output.
        """
        if not isinstance(sport, str) or not sport.strip():
            raise InvalidInputError("sport is required")
        sport = sport.strip().lower()

        raw_games = await asyncio.to_thread(self.odds_client.fetch, sport)
        if not raw_games:
            return self._empty(sport)

        if sport in self.roster_sports:
            roster = self.roster_lookup(sport)
            if roster is not None:
                raw_games = roster.filter_games(raw_games)
                if not raw_games:
                    return self._empty(
                        sport,
                        message=f"No {sport.upper()} games involving ranked teams today"
                    )

        games = format_games(raw_games, limit=self.game_limit)
        raw_text = await asyncio.to_thread(self.oracle.predict, sport, games)

        bundle = extract_predictions(
            raw_text,
            expected_sport=sport,
            expected_ids=[g.id for g in games],
        )
        logger.info(f"Validated {len(bundle.games)} {sport.upper()} predictions")

        await self._record(sport, bundle)
        return bundle

    async def _record(self, sport: str, bundle: PredictionBundle) -> None:
        if self.recorder is None or not bundle.games:
            return
        try:
            await asyncio.wait_for(self.recorder.record(sport, bundle), timeout=self.recorder_timeout)
        except Exception as e:
            logger.error(f"Failed to record {sport.upper()} predictions: {e}")

    @staticmethod
    def _empty(sport: str, message: Optional[str] = None) -> PredictionBundle:
        return PredictionBundle(
            games=[],
            last_updated=utc_timestamp(),
            sport=sport.upper(),
            message=message,
        )
