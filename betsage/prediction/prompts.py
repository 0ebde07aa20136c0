"""Prompt templates for the game analysis request."""

import json
from datetime import datetime, timezone
from typing import Optional, Sequence

from betsage.prediction.formatter import FormattedGame

SPORT_PERSONAS = {
    "nba": "You are an expert NBA analyst. Analyze these games and predict with Half Kelly sizing.",
    "nhl": "You are an expert NHL analyst. Analyze these games with focus on goalie matchups and Half Kelly sizing.",
    "cbb": "You are an expert college basketball analyst focusing on AP Top 25 teams with Half Kelly sizing.",
    "nfl": (
        "You are an expert NFL analyst. Analyze these games considering matchups, "
        "injuries, weather, and coaching with Half Kelly sizing."
    ),
    "mlb": (
        "You are an expert MLB analyst. Analyze these games considering pitching matchups, "
        "bullpen strength, ballpark factors, and weather with Half Kelly sizing."
    ),
}

DEFAULT_PERSONA = "You are an expert sports analyst. Analyze these games with Half Kelly sizing."


def system_prompt_for(sport: str) -> str:
    return SPORT_PERSONAS.get(sport, DEFAULT_PERSONA)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_prediction_prompt(
    sport: str,
    games: Sequence[FormattedGame],
    now: Optional[datetime] = None,
) -> str:
    """
    Build the single-turn analysis request for ``games``.

    The example block at the end is the exact shape the extractor validates,
    including the id echo used to match predictions back to input games.
    """
    sport_label = sport.upper()
    games_json = json.dumps([g.to_prompt_dict() for g in games], indent=2)
    example_id = games[0].id if games else "game1"

    return f"""You are an expert sports analyst. Here are today's {sport_label} games with current betting lines:

{games_json}

For each game:
1. Analyze team form, matchups, and efficiency
2. Generate predicted final score
3. Calculate edge %: (your win probability - implied odds probability) * 100
4. Apply Kelly Criterion: Kelly % = (edge * b - (1 - win_prob)) / b where b = (American odds to decimal - 1)
5. IMPORTANT: Calculate HALF KELLY (multiply Kelly result by 0.5) - this is what sharp bettors use
6. Flag games where |edge| > 3%

Copy each game's "id" exactly as given above into its prediction. Only return games from the list above.

Return ONLY valid JSON in this exact format (no markdown, no explanations):
{{
  "games": [
    {{
      "id": "{example_id}",
      "homeTeam": "Team",
      "awayTeam": "Team",
      "gameTime": "ISO timestamp",
      "spread": "-4.5",
      "total": "224.5",
      "predictedScore": {{"home": 112, "away": 108}},
      "predictedSpread": -4,
      "predictedTotal": 220,
      "spreadEdge": 2.5,
      "totalEdge": -1.8,
      "spreadWinProb": 0.54,
      "totalWinProb": 0.48,
      "kellySpread": 1.05,
      "kellyTotal": 0,
      "recommendation": "HOME -4.5",
      "confidence": "Medium",
      "keyFactors": ["Key insight 1", "Key insight 2"]
    }}
  ],
  "lastUpdated": "{utc_timestamp(now)}",
  "sport": "{sport_label}"
}}"""
