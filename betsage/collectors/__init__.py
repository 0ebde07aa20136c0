"""
Market data collection.

Live odds from The Odds API and the ranked-team filters applied to them.
"""

from .odds_api import OddsAPIClient, APIQuotaInfo
from .rosters import RosterFilter, roster_filter_for

__all__ = [
    "OddsAPIClient",
    "APIQuotaInfo",
    "RosterFilter",
    "roster_filter_for",
]
