"""
Pytest configuration and shared fixtures for BetSage testing.

This file provides:
- Environment configuration for tests
- A controllable clock for the limiter and cache
- Mock data factories for Odds API events and Claude replies
- Stubbed HTTP sessions and a FastAPI test client wired to them
"""

import json
import os
from typing import Any, Callable, Dict, Generator, List, Optional
from unittest.mock import MagicMock

import pytest


# ============================================================================
# Environment Configuration
# ============================================================================

# Must be set before betsage.core.config is imported
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("DATABASE_URL", None)
os.environ["STATIC_DIR"] = "__no_static_dir__"


# ============================================================================
# Clock
# ============================================================================

class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Test Data Factories
# ============================================================================

def make_raw_game(
    event_id: str = "evt1",
    home_team: str = "Boston Celtics",
    away_team: str = "Miami Heat",
    commence_time: str = "2025-01-15T00:30:00Z",
    spread: Optional[float] = -6.5,
    total: Optional[float] = 218.5,
    moneyline_home: Optional[int] = -250,
    moneyline_away: Optional[int] = 205,
) -> Dict[str, Any]:
    """Build an Odds API event with one bookmaker quoting all three markets."""
    markets = []
    if spread is not None:
        markets.append({
            "key": "spreads",
            "outcomes": [
                {"name": home_team, "price": -110, "point": spread},
                {"name": away_team, "price": -110, "point": -spread},
            ],
        })
    if total is not None:
        markets.append({
            "key": "totals",
            "outcomes": [
                {"name": "Over", "price": -110, "point": total},
                {"name": "Under", "price": -110, "point": total},
            ],
        })
    if moneyline_home is not None or moneyline_away is not None:
        outcomes = []
        if moneyline_home is not None:
            outcomes.append({"name": home_team, "price": moneyline_home})
        if moneyline_away is not None:
            outcomes.append({"name": away_team, "price": moneyline_away})
        markets.append({"key": "h2h", "outcomes": outcomes})

    return {
        "id": event_id,
        "sport_key": "basketball_nba",
        "commence_time": commence_time,
        "home_team": home_team,
        "away_team": away_team,
        "bookmakers": [
            {"key": "draftkings", "title": "DraftKings", "markets": markets}
        ],
    }


def make_prediction(game_id: str = "evt1", **overrides) -> Dict[str, Any]:
    """One game prediction in the shape the prompt asks Claude for."""
    prediction = {
        "id": game_id,
        "homeTeam": "Boston Celtics",
        "awayTeam": "Miami Heat",
        "gameTime": "2025-01-15T00:30:00Z",
        "spread": "-6.5",
        "total": "218.5",
        "predictedScore": {"home": 114, "away": 105},
        "predictedSpread": -9,
        "predictedTotal": 219,
        "spreadEdge": 3.4,
        "totalEdge": -0.6,
        "spreadWinProb": 0.56,
        "totalWinProb": 0.49,
        "kellySpread": 2.1,
        "kellyTotal": 0,
        "recommendation": "HOME -6.5",
        "confidence": "Medium",
        "keyFactors": ["Celtics rank 2nd in net rating", "Heat on second night of back-to-back"],
    }
    prediction.update(overrides)
    return prediction


def make_bundle(game_ids: List[str], sport: str = "NBA") -> Dict[str, Any]:
    return {
        "games": [make_prediction(gid) for gid in game_ids],
        "lastUpdated": "2025-01-14T18:00:00.000Z",
        "sport": sport,
    }


def make_response(payload: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> MagicMock:
    """A requests.Response stand-in."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    response.text = json.dumps(payload)
    response.headers = headers or {}
    return response


def claude_reply(text: str) -> Dict[str, Any]:
    """Messages API body carrying ``text`` as a single text block."""
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
    }


@pytest.fixture
def raw_game_factory() -> Callable[..., Dict[str, Any]]:
    return make_raw_game


@pytest.fixture
def prediction_factory() -> Callable[..., Dict[str, Any]]:
    return make_prediction


@pytest.fixture
def bundle_factory() -> Callable[..., Dict[str, Any]]:
    return make_bundle


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    return make_response


@pytest.fixture
def claude_reply_factory() -> Callable[[str], Dict[str, Any]]:
    return claude_reply


@pytest.fixture
def sample_raw_games() -> List[Dict[str, Any]]:
    return [
        make_raw_game("evt1", "Boston Celtics", "Miami Heat"),
        make_raw_game("evt2", "Denver Nuggets", "Phoenix Suns", spread=-3.0, total=229.5,
                      moneyline_home=-150, moneyline_away=130),
    ]


@pytest.fixture
def odds_session(sample_raw_games) -> MagicMock:
    """requests.Session stub that serves ``sample_raw_games``."""
    session = MagicMock()
    session.get.return_value = make_response(
        sample_raw_games,
        headers={"x-requests-used": "12", "x-requests-remaining": "488"},
    )
    return session


@pytest.fixture
def claude_session() -> MagicMock:
    """requests.Session stub answering with a fenced bundle for evt1/evt2."""
    session = MagicMock()
    text = "```json\n" + json.dumps(make_bundle(["evt1", "evt2"]), indent=2) + "\n```"
    session.post.return_value = make_response(claude_reply(text))
    return session


# ============================================================================
# FastAPI Test Client
# ============================================================================

@pytest.fixture
def make_api_client() -> Generator[Callable, None, None]:
    """
    Factory for a TestClient with the prediction service and limiter replaced.

    Usage:
        def test_endpoint(make_api_client, service):
            client = make_api_client(service=service)
            response = client.post("/predictions", json={"sport": "nba"})
    """
    from fastapi.testclient import TestClient

    from betsage.api import dependencies
    from betsage.api.app import app
    from betsage.core.rate_limiter import FixedWindowRateLimiter

    def _create(service=None, limiter=None, recorder=None):
        if limiter is None:
            limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=3600)
        app.dependency_overrides[dependencies.get_rate_limiter] = lambda: limiter
        if service is not None:
            app.dependency_overrides[dependencies.get_prediction_service] = lambda: service
        app.dependency_overrides[dependencies.get_recorder] = lambda: recorder
        return TestClient(app)

    yield _create

    app.dependency_overrides.clear()
