"""
Shared application state and FastAPI dependencies.

The limiter, the odds cache and the recorder are owned by one AppState
instance; endpoints reach them only through the ``get_*`` dependencies so
tests can swap them with ``app.dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from betsage.collectors.odds_api import OddsAPIClient
from betsage.core.cache import TTLCache
from betsage.core.config import Settings, settings
from betsage.core.errors import PersistenceNotConfiguredError, RateLimitExceededError
from betsage.core.rate_limiter import FixedWindowRateLimiter
from betsage.monitoring.prediction_recorder import PredictionRecorder
from betsage.prediction.oracle import ClaudeOracle
from betsage.prediction.service import PredictionService

logger = logging.getLogger(__name__)


class AppState:
    """Application state container."""

    def __init__(self, config: Settings):
        self.config = config
        self.rate_limiter = FixedWindowRateLimiter(
            max_requests=config.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
        )
        self.odds_cache: TTLCache = TTLCache(ttl_seconds=config.CACHE_TTL_SECONDS)
        self.recorder: Optional[PredictionRecorder] = None
        self._service: Optional[PredictionService] = None

    @property
    def service(self) -> PredictionService:
        if self._service is None:
            self._service = build_prediction_service(self.config, self.odds_cache, self.recorder)
        return self._service

    def set_recorder(self, recorder: Optional[PredictionRecorder]) -> None:
        self.recorder = recorder
        if self._service is not None:
            self._service.recorder = recorder


def build_prediction_service(
    config: Settings,
    cache: TTLCache,
    recorder: Optional[PredictionRecorder] = None,
) -> PredictionService:
    """Wire the odds client, oracle and recorder from settings."""
    odds_client = OddsAPIClient(
        api_key=config.ODDS_API_KEY,
        cache=cache,
        base_url=config.ODDS_API_BASE_URL,
        region=config.ODDS_API_REGION,
        timeout=config.ODDS_API_TIMEOUT,
    )
    oracle = ClaudeOracle(
        api_key=config.ANTHROPIC_API_KEY,
        model=config.ANTHROPIC_MODEL,
        max_tokens=config.ANTHROPIC_MAX_TOKENS,
        timeout=config.ANTHROPIC_TIMEOUT,
        api_url=config.ANTHROPIC_API_URL,
    )
    return PredictionService(
        odds_client=odds_client,
        oracle=oracle,
        recorder=recorder,
        game_limit=config.GAME_LIMIT,
        roster_sports=config.roster_sports,
        recorder_timeout=config.RECORDER_TIMEOUT,
    )


state = AppState(settings)


def get_rate_limiter() -> FixedWindowRateLimiter:
    return state.rate_limiter


def get_prediction_service() -> PredictionService:
    return state.service


def get_recorder() -> Optional[PredictionRecorder]:
    return state.recorder


def require_recorder(
    recorder: Optional[PredictionRecorder] = Depends(get_recorder),
) -> PredictionRecorder:
    if recorder is None:
        raise PersistenceNotConfiguredError("Prediction storage is not configured (set DATABASE_URL)")
    return recorder


def client_key(request: Request) -> str:
    """Remote address of the caller."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def enforce_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """Reject the request with 429 once the caller's hourly quota is used."""
    decision = limiter.allow(client_key(request))
    if not decision.allowed:
        raise RateLimitExceededError(
            limiter.max_requests,
            decision.retry_after_minutes,
            window_seconds=limiter.window_seconds,
        )
