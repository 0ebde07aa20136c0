"""
Ranked-team allow-lists.

College basketball slates run to well over a hundred games a day, so for
``cbb`` we only send games involving an AP Top 25 team to the model.

Membership is a case-insensitive substring test on trimmed names. That
over-matches on purpose: "Kansas" also admits "Arkansas" and "Kansas St
Wildcats", and "Michigan" admits "Central Michigan". Provider team names
carry mascots ("Duke Blue Devils"), so exact matching would miss nearly
everything.
"""

import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

# AP Top 25, 2025-26 preseason poll
AP_TOP_25 = (
    "Purdue",
    "Houston",
    "Florida",
    "St. John's",
    "Duke",
    "Michigan",
    "BYU",
    "Kentucky",
    "Texas Tech",
    "UConn",
    "Alabama",
    "Louisville",
    "Arizona",
    "Tennessee",
    "Iowa State",
    "Illinois",
    "Gonzaga",
    "Kansas",
    "Auburn",
    "Creighton",
    "Arkansas",
    "Michigan State",
    "Wisconsin",
    "UCLA",
    "North Carolina",
)

ROSTERS: Dict[str, Iterable[str]] = {
    "cbb": AP_TOP_25,
}


class RosterFilter:
    """Restricts a slate to games involving at least one listed team."""

    def __init__(self, entries: Iterable[str]):
        self.entries = tuple(
            e.strip().lower() for e in entries if e and e.strip()
        )

    def is_member(self, home_team: Optional[str], away_team: Optional[str]) -> bool:
        """True if either team name contains any roster entry."""
        for name in (home_team, away_team):
            normalized = (name or "").strip().lower()
            if normalized and any(entry in normalized for entry in self.entries):
                return True
        return False

    def filter_games(self, games: List[dict]) -> List[dict]:
        kept = [g for g in games if self.is_member(g.get("home_team"), g.get("away_team"))]
        logger.info(f"Roster filter kept {len(kept)} of {len(games)} games")
        return kept


def roster_filter_for(sport: str) -> Optional[RosterFilter]:
    """Return the roster filter for ``sport``, or None if it has no roster."""
    entries = ROSTERS.get(sport)
    if entries is None:
        return None
    return RosterFilter(entries)
