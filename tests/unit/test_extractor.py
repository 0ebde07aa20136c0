"""
Unit tests for the response extractor/validator.

Tests verify:
    - Fenced and unfenced payloads extract to identical results
    - Leading/trailing prose is tolerated
    - ParseError for missing or malformed JSON
    - SchemaValidationError for shape, sport and game-id violations
"""

import json

import pytest

from betsage.core.errors import ParseError, SchemaValidationError
from betsage.prediction.extractor import extract_predictions, find_json_span, strip_code_fences


@pytest.fixture
def payload(bundle_factory):
    return bundle_factory(["evt1", "evt2"])


@pytest.fixture
def payload_text(payload):
    return json.dumps(payload, indent=2)


class TestFenceStripping:

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_surrounding_whitespace(self):
        assert strip_code_fences('  \n```json\n{"a": 1}\n```  \n') == '{"a": 1}'

    def test_unfenced_text_untouched(self):
        assert strip_code_fences('Here you go: {"a": 1}') == 'Here you go: {"a": 1}'

    def test_greedy_span(self):
        text = 'Note {"a": {"b": 1}} and {"c": 2} done'

        assert find_json_span(text) == '{"a": {"b": 1}} and {"c": 2}'


class TestExtraction:

    def test_fenced_equals_unfenced(self, payload_text):
        fenced = extract_predictions(f"```json\n{payload_text}\n```")
        unfenced = extract_predictions(payload_text)

        assert fenced == unfenced
        assert fenced.model_dump() == unfenced.model_dump()

    def test_prose_around_payload(self, payload_text):
        bundle = extract_predictions(f"Here are my predictions:\n{payload_text}\nGood luck!")

        assert len(bundle.games) == 2

    def test_fields_are_mapped(self, payload_text):
        bundle = extract_predictions(payload_text)
        game = bundle.games[0]

        assert bundle.sport == "NBA"
        assert bundle.last_updated == "2025-01-14T18:00:00.000Z"
        assert game.id == "evt1"
        assert game.predicted_score.home == 114
        assert game.spread == "-6.5"
        assert game.spread_win_prob == 0.56
        assert game.key_factors[0] == "Celtics rank 2nd in net rating"

    def test_output_uses_camel_case(self, payload_text):
        dumped = extract_predictions(payload_text).model_dump(by_alias=True, exclude_none=True)

        assert set(dumped) == {"games", "lastUpdated", "sport"}
        assert "spreadEdge" in dumped["games"][0]
        assert dumped["games"][0]["predictedScore"] == {"home": 114.0, "away": 105.0}

    def test_sport_is_upper_cased(self, bundle_factory):
        bundle = extract_predictions(json.dumps(bundle_factory(["evt1"], sport="nba")))

        assert bundle.sport == "NBA"

    def test_empty_games_list(self):
        bundle = extract_predictions('{"games": [], "lastUpdated": "2025-01-14T18:00:00Z", "sport": "NHL"}')

        assert bundle.games == []

    def test_numeric_strings_coerced(self, prediction_factory):
        game = prediction_factory(spreadEdge="2.5", predictedTotal="221")
        text = json.dumps({"games": [game], "lastUpdated": "t", "sport": "NBA"})

        bundle = extract_predictions(text)

        assert bundle.games[0].spread_edge == 2.5
        assert bundle.games[0].predicted_total == 221.0

    def test_missing_key_factors_defaults_empty(self, prediction_factory):
        game = prediction_factory()
        del game["keyFactors"]

        bundle = extract_predictions(json.dumps({"games": [game], "lastUpdated": "t", "sport": "NBA"}))

        assert bundle.games[0].key_factors == []


class TestParseErrors:

    @pytest.mark.parametrize("text", [
        "",
        "I could not find any games today.",
        "```json\n```",
        "[1, 2, 3]",
    ])
    def test_no_payload(self, text):
        with pytest.raises(ParseError, match="no structured payload found"):
            extract_predictions(text)

    def test_malformed_json(self):
        with pytest.raises(ParseError) as exc_info:
            extract_predictions('{"games": [ {"id": "evt1",, } ], "sport": "NBA"}')

        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_truncated_reply(self, payload_text):
        # A max_tokens cutoff leaves an unbalanced object
        truncated = payload_text[: len(payload_text) // 2] + "}"

        with pytest.raises(ParseError):
            extract_predictions(truncated)

    def test_parse_error_is_not_schema_error(self):
        with pytest.raises(ParseError) as exc_info:
            extract_predictions("{not json}")

        assert not isinstance(exc_info.value, SchemaValidationError)

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_constants_rejected(self, payload_text, constant):
        text = payload_text.replace("\"spreadEdge\": 3.4", f"\"spreadEdge\": {constant}", 1)
        assert text != payload_text

        with pytest.raises(ParseError) as exc_info:
            extract_predictions(text)

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert constant in exc_info.value.message


class TestSchemaValidation:

    @pytest.mark.parametrize("missing", ["games", "lastUpdated", "sport"])
    def test_top_level_fields_required(self, payload, missing):
        del payload[missing]

        with pytest.raises(SchemaValidationError):
            extract_predictions(json.dumps(payload))

    def test_games_must_be_list(self):
        with pytest.raises(SchemaValidationError):
            extract_predictions('{"games": {"id": "evt1"}, "lastUpdated": "t", "sport": "NBA"}')

    @pytest.mark.parametrize("field", ["id", "homeTeam", "predictedScore", "spreadEdge", "recommendation"])
    def test_game_fields_required(self, payload, field):
        del payload["games"][0][field]

        with pytest.raises(SchemaValidationError) as exc_info:
            extract_predictions(json.dumps(payload))

        assert "games.0" in exc_info.value.message

    def test_wrong_type(self, payload):
        payload["games"][1]["totalEdge"] = "large"

        with pytest.raises(SchemaValidationError):
            extract_predictions(json.dumps(payload))

    @pytest.mark.parametrize("value", ["NaN", "inf", "-Infinity"])
    def test_non_finite_number_strings_rejected(self, payload, value):
        payload["games"][0]["totalEdge"] = value

        with pytest.raises(SchemaValidationError):
            extract_predictions(json.dumps(payload))

    def test_probability_out_of_range(self, payload):
        payload["games"][0]["spreadWinProb"] = 54

        with pytest.raises(SchemaValidationError):
            extract_predictions(json.dumps(payload))

    def test_sport_mismatch(self, payload):
        with pytest.raises(SchemaValidationError, match="expected NHL"):
            extract_predictions(json.dumps(payload), expected_sport="nhl")

    def test_sport_match_is_case_insensitive(self, payload):
        bundle = extract_predictions(json.dumps(payload), expected_sport="nba")

        assert bundle.sport == "NBA"


class TestGameIdentity:

    def test_permutation_accepted(self, payload):
        payload["games"].reverse()

        bundle = extract_predictions(json.dumps(payload), expected_ids=["evt1", "evt2"])

        assert [g.id for g in bundle.games] == ["evt2", "evt1"]

    def test_subset_accepted(self, payload):
        payload["games"] = payload["games"][:1]

        bundle = extract_predictions(json.dumps(payload), expected_ids=["evt1", "evt2"])

        assert len(bundle.games) == 1

    def test_unknown_id_rejected(self, payload):
        payload["games"][1]["id"] = "game2"

        with pytest.raises(SchemaValidationError, match="unknown game id 'game2'"):
            extract_predictions(json.dumps(payload), expected_ids=["evt1", "evt2"])

    def test_duplicate_id_rejected(self, payload):
        payload["games"][1]["id"] = "evt1"

        with pytest.raises(SchemaValidationError, match="more than once"):
            extract_predictions(json.dumps(payload), expected_ids=["evt1", "evt2"])
