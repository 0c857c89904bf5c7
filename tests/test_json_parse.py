"""Tests for the response validation pipeline steps."""
import pytest

from sophrosyne.llm.errors import InvalidResponse, JsonParsingFailed
from sophrosyne.llm.json_parse import (
    envelope_error,
    extract_content,
    parse_envelope,
    parse_json_object,
    require_journey_shape,
)


class TestParseEnvelope:
    def test_object(self):
        assert parse_envelope(b'{"choices": []}') == {"choices": []}

    @pytest.mark.parametrize("raw", [b"", b"not json", b"[1, 2]", b'"text"', b"\xff\xfe"])
    def test_rejects_non_objects(self, raw):
        with pytest.raises(InvalidResponse):
            parse_envelope(raw)


class TestEnvelopeError:
    def test_code_and_message(self):
        assert envelope_error({"error": {"code": 429, "message": "slow"}}) == (429, "slow")

    def test_generic_message(self):
        assert envelope_error({"error": {"code": 400}}) == (400, "Unknown API error")

    @pytest.mark.parametrize("env", [{}, {"error": "boom"}, {"error": {"code": "429"}}, {"error": {"code": True}}])
    def test_no_usable_error(self, env):
        assert envelope_error(env) is None


class TestExtractContent:
    def test_first_choice(self):
        env = {"choices": [{"message": {"content": "one"}}, {"message": {"content": "two"}}]}
        assert extract_content(env) == "one"

    @pytest.mark.parametrize("env", [
        {},
        {"choices": []},
        {"choices": ["x"]},
        {"choices": [{}]},
        {"choices": [{"message": "hi"}]},
        {"choices": [{"message": {"content": ""}}]},
        {"choices": [{"message": {"content": 42}}]},
    ])
    def test_invalid(self, env):
        with pytest.raises(InvalidResponse):
            extract_content(env)


class TestParseJsonObject:
    def test_plain(self):
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_code_fenced(self):
        assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    @pytest.mark.parametrize("content", ["{}", "[1]", "nope", '{"a": '])
    def test_invalid(self, content):
        with pytest.raises(JsonParsingFailed):
            parse_json_object(content)


class TestJourneyShape:
    def test_days(self):
        j = {"path": {"days": [{"verse": "v"}]}}
        assert require_journey_shape(j) is j

    def test_weeks(self):
        j = {"path": {"weeks": [{"title": "w", "days": []}]}}
        assert require_journey_shape(j) is j

    @pytest.mark.parametrize("j", [{"days": [1]}, {"path": "x"}, {"path": {}}, {"path": {"days": [], "weeks": []}}])
    def test_invalid(self, j):
        with pytest.raises(InvalidResponse):
            require_journey_shape(j)
