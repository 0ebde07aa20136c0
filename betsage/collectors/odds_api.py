"""
The Odds API Client for US sports.

Fetches current spreads, totals and moneylines for one sport at a time,
caching each sport's slate so repeated requests within the TTL reuse it.

API Documentation: https://the-odds-api.com/liveapi/guides/v4/
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from betsage.core.cache import TTLCache
from betsage.core.errors import ConfigurationError, InvalidInputError, UpstreamError
from betsage.core.http_session import ThreadLocalSession

logger = logging.getLogger(__name__)

RawGame = Dict[str, Any]


@dataclass
class APIQuotaInfo:
    """API quota usage information."""
    requests_used: int
    requests_remaining: int


class OddsAPIClient:
    """
    Client for The Odds API.

    Example:
        >>> client = OddsAPIClient(api_key="...")
        >>> games = client.fetch("nba")
        >>> for game in games:
        ...     print(f"{game['away_team']} @ {game['home_team']}")
    """

    BASE_URL = "https://api.the-odds-api.com/v4"

    # Internal sport codes -> provider sport keys
    SPORTS = {
        "nba": "basketball_nba",
        "nhl": "icehockey_nhl",
        "cbb": "basketball_ncaab",
        "nfl": "americanfootball_nfl",
        "mlb": "baseball_mlb",
    }

    DEFAULT_REGION = "us"
    MARKETS = "spreads,totals,h2h"
    ODDS_FORMAT = "american"

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[TTLCache] = None,
        base_url: str = BASE_URL,
        region: str = DEFAULT_REGION,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the Odds API client.

        Args:
            api_key: The Odds API key. Only required once a request goes out.
            cache: Shared TTL cache; a private 5-minute cache is used if None.
            base_url: API root, overridable for testing.
            region: Bookmaker region (default: 'us').
            timeout: Per-request timeout in seconds.
            session: Session shared by all threads; one per thread if None.
        """
        self.api_key = api_key
        self.cache = cache if cache is not None else TTLCache(ttl_seconds=300)
        self.base_url = base_url.rstrip("/")
        self.region = region
        self.timeout = timeout
        self._sessions = ThreadLocalSession(session)
        self.last_quota: Optional[APIQuotaInfo] = None

    @property
    def session(self) -> requests.Session:
        """Session for the calling thread."""
        return self._sessions.get()

    @classmethod
    def supported_sports(cls) -> List[str]:
        return sorted(cls.SPORTS)

    def sport_key(self, sport: str) -> str:
        """Map an internal sport code to the provider's key."""
        sport_key = self.SPORTS.get(sport)
        if sport_key is None:
            raise InvalidInputError(
                f"Invalid sport '{sport}'. Supported: {', '.join(self.supported_sports())}"
            )
        return sport_key

    def fetch(self, sport: str) -> List[RawGame]:
        """
        Get the current slate with spreads, totals and moneylines.

        Args:
            sport: Internal sport code ('nba', 'nhl', 'cbb', 'nfl', 'mlb')

        Returns:
            Raw provider event objects, unchanged.

        Raises:
            InvalidInputError: Unknown sport code (no request is made).
            UpstreamError: Non-success status or transport failure.
        """
        sport_key = self.sport_key(sport)

        cache_key = f"odds_{sport}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Using cached data for {sport}")
            return cached

        params = {
            "regions": self.region,
            "markets": self.MARKETS,
            "oddsFormat": self.ODDS_FORMAT,
        }
        data = self._make_request(f"/sports/{sport_key}/odds/", params)

        if not isinstance(data, list):
            raise UpstreamError("Odds API returned an unexpected payload (expected a list of games)")

        logger.info(f"Fetched {len(data)} games for {sport} from Odds API")
        self.cache.set(cache_key, data)
        return data

    def _make_request(self, endpoint: str, params: Dict) -> Any:
        """
        Make a single API request. Failures are not retried.

        Returns:
            Decoded JSON body
        """
        if not self.api_key:
            raise ConfigurationError("ODDS_API_KEY not set. Get one at https://the-odds-api.com/")

        params = dict(params, apiKey=self.api_key)

        logger.info(f"Requesting: {endpoint}")
        try:
            response = self.session.get(
                f"{self.base_url}{endpoint}",
                params=params,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Odds API request failed: {e}") from e

        if not response.ok:
            raise UpstreamError(
                f"Odds API error: {response.status_code}",
                upstream_status=response.status_code
            )

        self._record_quota(response)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Odds API returned invalid JSON: {e}") from e

    def _record_quota(self, response: requests.Response) -> None:
        used = response.headers.get("x-requests-used")
        remaining = response.headers.get("x-requests-remaining")
        if used is None and remaining is None:
            return
        try:
            self.last_quota = APIQuotaInfo(
                requests_used=int(float(used or 0)),
                requests_remaining=int(float(remaining or 0))
            )
        except ValueError:
            logger.warning(f"Unreadable quota headers: used={used!r} remaining={remaining!r}")
            return

        logger.info(
            f"API quota: {self.last_quota.requests_used} used, "
            f"{self.last_quota.requests_remaining} remaining"
        )
