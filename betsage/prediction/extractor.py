"""
Recover a validated PredictionBundle from free-form model text.

The model is asked for bare JSON but often wraps it in a Markdown fence or
adds a sentence before or after. We tolerate that noise and nothing more:

1. Trim whitespace; if the text opens with a ``` fence, strip every fence
   marker (with or without a language tag).
2. Take the span from the first ``{`` to the last ``}``.
3. ``json.loads`` it. Malformed JSON, including the NaN and Infinity
   constants Python would otherwise accept, is a ParseError; no repair is
   attempted.
4. Validate the result against the prediction schema and, when known, the
   sport and the game ids we sent. Failures here are SchemaValidationError.
"""

import json
import logging
import re
from typing import Iterable, Optional

from pydantic import ValidationError

from betsage.core.errors import ParseError, SchemaValidationError
from betsage.prediction.schemas import PredictionBundle

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*")
_JSON_SPAN_RE = re.compile(r"\{.*\}", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Trim ``text`` and remove Markdown fence markers if it starts with one."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_RE.sub("", text).strip()
    return text


def find_json_span(text: str) -> str:
    """Return the greedy first-``{``-to-last-``}`` span of ``text``."""
    match = _JSON_SPAN_RE.search(text)
    if not match:
        raise ParseError("no structured payload found")
    return match.group(0)


def _reject_constant(name: str) -> None:
    # json.loads otherwise accepts NaN, Infinity and -Infinity
    raise ValueError(f"{name} is not a valid JSON value")


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors()[:5]:
        location = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}")
    more = error.error_count() - len(parts)
    if more > 0:
        parts.append(f"... {more} more")
    return "; ".join(parts)


def extract_predictions(
    raw_text: str,
    expected_sport: Optional[str] = None,
    expected_ids: Optional[Iterable[str]] = None,
) -> PredictionBundle:
    """
    Parse and validate the model's reply.

    Args:
        raw_text: Reply text from the oracle.
        expected_sport: Sport code we asked about; the reply must match it.
        expected_ids: Game ids we sent; every returned game must use one of
            them, at most once.

    Returns:
        Validated PredictionBundle with ``sport`` upper-cased.

    Raises:
        ParseError: No JSON object span, or the span is not valid JSON.
        SchemaValidationError: Valid JSON that does not fit the schema or
            does not correspond to the games we sent.
    """
    span = find_json_span(strip_code_fences(raw_text or ""))

    try:
        payload = json.loads(span, parse_constant=_reject_constant)
    except ValueError as e:
        raise ParseError(f"Malformed JSON in model response: {e}") from e

    if not isinstance(payload, dict):
        raise SchemaValidationError("Model response is not a JSON object")

    try:
        bundle = PredictionBundle.model_validate(payload)
    except ValidationError as e:
        raise SchemaValidationError(
            f"Model response does not match prediction schema: {_format_validation_error(e)}"
        ) from e

    if expected_sport is not None and bundle.sport != expected_sport.strip().upper():
        raise SchemaValidationError(
            f"Model response is for sport {bundle.sport}, expected {expected_sport.upper()}"
        )

    if expected_ids is not None:
        _check_game_identity(bundle, set(expected_ids))

    return bundle


def _check_game_identity(bundle: PredictionBundle, expected_ids: set) -> None:
    seen = set()
    for game in bundle.games:
        if game.id not in expected_ids:
            raise SchemaValidationError(f"Model returned unknown game id '{game.id}'")
        if game.id in seen:
            raise SchemaValidationError(f"Model returned game id '{game.id}' more than once")
        seen.add(game.id)

    missing = expected_ids - seen
    if missing:
        logger.warning(f"Model skipped {len(missing)} of {len(expected_ids)} games: {sorted(missing)}")
