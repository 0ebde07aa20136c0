"""
Reduce raw Odds API events to the fields the model needs.

Every formatted game has the same keys; anything the provider left out is
the ``"N/A"`` sentinel so the prompt always shows a uniform shape.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

NOT_AVAILABLE = "N/A"

DEFAULT_GAME_LIMIT = 10

Line = Union[float, int, str]


@dataclass
class FormattedGame:
    """Minimal game view sent to the oracle."""
    id: str
    home_team: str
    away_team: str
    game_time: str
    spread: Line = NOT_AVAILABLE
    total: Line = NOT_AVAILABLE
    moneyline_home: Line = NOT_AVAILABLE
    moneyline_away: Line = NOT_AVAILABLE

    def to_prompt_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "homeTeam": self.home_team,
            "awayTeam": self.away_team,
            "gameTime": self.game_time,
            "spread": self.spread,
            "total": self.total,
            "moneylineHome": self.moneyline_home,
            "moneylineAway": self.moneyline_away,
        }


def _find_market(bookmaker: Optional[Dict], key: str) -> Optional[Dict]:
    if not bookmaker:
        return None
    for market in bookmaker.get("markets") or []:
        if market.get("key") == key:
            return market
    return None


def _first_point(market: Optional[Dict]) -> Line:
    outcomes = (market or {}).get("outcomes") or []
    if not outcomes:
        return NOT_AVAILABLE
    point = outcomes[0].get("point")
    return NOT_AVAILABLE if point is None else point


def _price_for(market: Optional[Dict], team: str) -> Line:
    for outcome in (market or {}).get("outcomes") or []:
        if outcome.get("name") == team:
            price = outcome.get("price")
            return NOT_AVAILABLE if price is None else price
    return NOT_AVAILABLE


def format_game(game: Dict[str, Any], position: int) -> FormattedGame:
    """
    Format one event using its first bookmaker's quotes.

    Args:
        game: Raw provider event.
        position: 1-based position, used for the id when the event has none.
    """
    bookmakers = game.get("bookmakers") or []
    bookmaker = bookmakers[0] if bookmakers else None

    home_team = game.get("home_team") or NOT_AVAILABLE
    away_team = game.get("away_team") or NOT_AVAILABLE
    h2h = _find_market(bookmaker, "h2h")

    return FormattedGame(
        id=str(game.get("id") or f"game{position}"),
        home_team=home_team,
        away_team=away_team,
        game_time=game.get("commence_time") or NOT_AVAILABLE,
        spread=_first_point(_find_market(bookmaker, "spreads")),
        total=_first_point(_find_market(bookmaker, "totals")),
        moneyline_home=_price_for(h2h, home_team),
        moneyline_away=_price_for(h2h, away_team),
    )


def format_games(games: Sequence[Dict[str, Any]], limit: int = DEFAULT_GAME_LIMIT) -> List[FormattedGame]:
    """Format at most ``limit`` games, keeping provider order."""
    return [format_game(game, i) for i, game in enumerate(games[:limit], start=1)]
