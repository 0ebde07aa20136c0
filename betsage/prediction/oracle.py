"""
Claude Messages API adapter.

Sends the analysis prompt as one user turn and returns the concatenated text
of the reply. Interpretation of that text happens in ``extractor``.
"""

import logging
from typing import Optional, Sequence

import requests

from betsage.core.errors import ConfigurationError, UpstreamError
from betsage.core.http_session import ThreadLocalSession
from betsage.prediction.formatter import FormattedGame
from betsage.prediction.prompts import build_prediction_prompt, system_prompt_for

logger = logging.getLogger(__name__)


class ClaudeOracle:
    """
    Prediction oracle backed by Anthropic's Messages API.

    A single attempt is made per call; timeouts and non-success statuses
    surface as UpstreamError.
    """

    API_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"
    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        timeout: float = 120.0,
        api_url: str = API_URL,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.api_url = api_url
        self._sessions = ThreadLocalSession(session)

    @property
    def session(self) -> requests.Session:
        return self._sessions.get()

    def predict(self, sport: str, games: Sequence[FormattedGame]) -> str:
        """
        Ask the model to analyze ``games``.

        Args:
            sport: Internal sport code.
            games: Formatted games to embed in the prompt.

        Returns:
            Raw reply text, all text blocks joined.
        """
        if not self.api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY not set")

        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt_for(sport),
            "messages": [
                {"role": "user", "content": build_prediction_prompt(sport, games)}
            ],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.API_VERSION,
            "content-type": "application/json",
        }

        logger.info(f"Requesting {self.model} analysis for {len(games)} {sport.upper()} games")
        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Claude API request failed: {e}") from e

        if not response.ok:
            logger.error(f"Claude API error: {response.status_code} {response.text[:300]}")
            raise UpstreamError(
                f"Claude API error: {response.status_code}",
                upstream_status=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"Claude API returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamError("Claude API returned an unexpected payload")

        text = "".join(
            block.get("text", "")
            for block in data.get("content") or []
            if block.get("type") == "text"
        )
        logger.info(f"Claude response: {text[:500]}")
        return text
