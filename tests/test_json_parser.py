"""Tests for JSON extraction from model output."""

from __future__ import annotations

import pytest

from skillx.models.skills import GapAnalysis
from skillx.utils.json_parser import DecodeError, extract_json, parse_model


class TestExtractJson:
    def test_plain_object(self):
        assert extract_json('{"match_score": 90}') == {"match_score": 90}

    def test_plain_array(self):
        assert extract_json('["go", "docker"]') == ["go", "docker"]

    def test_fenced_block(self):
        text = '```json\n{"skills": ["go"]}\n```'
        assert extract_json(text) == {"skills": ["go"]}

    def test_object_with_surrounding_prose(self):
        text = 'Here is the analysis:\n{"analysis": [], "match_score": 12}\nHope this helps.'
        assert extract_json(text) == {"analysis": [], "match_score": 12}

    def test_array_with_surrounding_prose(self):
        assert extract_json('Skills: ["rust", "wasm"] as requested') == ["rust", "wasm"]

    def test_truncated_object_is_repaired(self):
        text = '{"project_name": "X", "roadmap": [{"phase_name": "Basics", "estimated_hours": 4}'
        result = extract_json(text)
        assert result["project_name"] == "X"
        assert result["roadmap"][0]["estimated_hours"] == 4

    def test_empty_input(self):
        with pytest.raises(DecodeError):
            extract_json("   ")
        with pytest.raises(DecodeError):
            extract_json(None)

    def test_no_json(self):
        with pytest.raises(DecodeError, match="Could not extract JSON"):
            extract_json("I am unable to comply.")

    def test_bare_scalar_is_rejected(self):
        with pytest.raises(DecodeError):
            extract_json("42")


class TestParseModel:
    def test_valid(self):
        result = parse_model(GapAnalysis, {"analysis": [], "match_score": 70})
        assert result.match_score == 70

    def test_wrong_shape(self):
        with pytest.raises(DecodeError, match="Expected JSON object"):
            parse_model(GapAnalysis, ["go"])

    def test_validation_error_becomes_decode_error(self):
        with pytest.raises(DecodeError, match="Invalid GapAnalysis"):
            parse_model(GapAnalysis, {"match_score": "lots"})

    def test_decode_error_is_value_error(self):
        assert issubclass(DecodeError, ValueError)
