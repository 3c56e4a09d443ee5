"""Tests for the result decoder."""

import json

import pytest

from archivr.llm.decoder import (
    decode_analysis,
    decode_collection_suggestions,
    decode_search_intent,
    extract_json,
)
from archivr.llm.types import AnalysisResult

FALLBACK = AnalysisResult(tags=["untagged"], mood="neutral", confidence=0.3)


class TestExtractJson:
    """Tests for extract_json."""

    def test_plain_object(self):
        """Test a bare JSON object."""
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_object_surrounded_by_prose(self):
        """Test an object embedded in chatter."""
        assert extract_json('Sure! Here you go: {"a": 1} Hope that helps.') == {"a": 1}

    def test_code_fence(self):
        """Test JSON wrapped in a markdown code block."""
        raw = 'Here:\n```json\n{"a": [1, 2]}\n```\n'
        assert extract_json(raw) == {"a": [1, 2]}

    def test_fenced_note_before_object(self):
        """Test a fenced block without JSON does not hide a later object."""
        raw = "```text\nnote: analyzing\n```\n{\"a\": 1}"
        assert extract_json(raw) == {"a": 1}

    def test_prefers_object_over_array(self):
        """Test that an object wins when both shapes are present."""
        assert extract_json('[1, 2] and {"a": 1}') == {"a": 1}

    def test_array_when_no_object(self):
        """Test that an array is returned when there is no object."""
        assert extract_json("tags: [1, 2, 3]") == [1, 2, 3]

    def test_prefer_array(self):
        """Test that prefer='array' returns the whole array of objects."""
        raw = '[{"name": "A"}, {"name": "B"}]'
        assert extract_json(raw, prefer="array") == [{"name": "A"}, {"name": "B"}]

    def test_multiple_brace_groups(self):
        """Test that the first parseable group is used when the widest span is invalid."""
        raw = 'first {not json} then {"a": 1} and {"b": 2}'
        assert extract_json(raw) == {"a": 1}

    @pytest.mark.parametrize("raw", [None, "", "no json here", "{broken", "}{", "[[[["])
    def test_nothing_parseable(self, raw):
        """Test inputs without usable JSON."""
        assert extract_json(raw) is None

    def test_deep_nesting_does_not_raise(self):
        """Test that pathological nesting degrades instead of raising."""
        raw = "[" * 100000 + "]" * 100000

        assert decode_analysis(raw) == FALLBACK


class TestDecodeAnalysis:
    """Tests for decode_analysis."""

    def test_round_trip(self, valid_result):
        """Test that a valid result JSON decodes to the same object."""
        expected = AnalysisResult.model_validate(valid_result)

        decoded = decode_analysis(json.dumps(expected.model_dump(by_alias=True)))

        assert decoded == expected
        assert decoded.model_dump(by_alias=True) == valid_result

    def test_fields(self, valid_json):
        """Test decoded field values."""
        result = decode_analysis(valid_json)

        assert result.tags == ["recipe", "comfort-food", "cozy", "dinner-ideas"]
        assert result.suggested_collection == "Recipes"
        assert result.mood == "warm"
        assert result.confidence == 0.85
        assert not result.is_fallback

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "I cannot help with that.",
            "[1, 2, 3]",
            '{"tags": []}',
            '{"tags": "recipe"}',
            '{"mood": "happy"}',
            '{"tags": [1, 2]}',
            '{"tags": ["a"], "confidence": "high"}',
            "{} {}",
        ],
    )
    def test_unusable_output_falls_back(self, raw):
        """Test that unusable output yields the exact fallback value."""
        result = decode_analysis(raw)

        assert result == FALLBACK
        assert result.is_fallback

    def test_none_falls_back(self):
        """Test that None is handled."""
        assert decode_analysis(None) == FALLBACK

    def test_tags_are_normalized(self):
        """Test tags are lowercased, hyphenated and de-duplicated."""
        raw = json.dumps({"tags": ["Dark Academia", "dark_academia", " Travel ", "Outfit Inspo"]})

        result = decode_analysis(raw)

        assert result.tags == ["dark-academia", "travel", "outfit-inspo"]

    def test_tags_capped_at_six(self):
        """Test that extra tags are dropped."""
        raw = json.dumps({"tags": [f"tag-{i}" for i in range(10)]})

        assert len(decode_analysis(raw).tags) == 6

    def test_confidence_clamped(self):
        """Test out-of-range confidence is clamped into [0, 1]."""
        assert decode_analysis('{"tags": ["a"], "confidence": 1.7}').confidence == 1.0
        assert decode_analysis('{"tags": ["a"], "confidence": -2}').confidence == 0.0

    def test_missing_optional_fields(self):
        """Test optional fields default sensibly."""
        result = decode_analysis('{"tags": ["recipe", "food", "cozy", "dinner"]}')

        assert result.suggested_collection is None
        assert result.mood is None
        assert result.confidence == 0.3

    def test_extra_prose_and_fence(self, valid_json):
        """Test typical chatty model output."""
        raw = f"Here is the analysis:\n```json\n{valid_json}\n```"

        assert decode_analysis(raw).suggested_collection == "Recipes"

    def test_round_trip_with_backticks_in_values(self, valid_result):
        """Test string values containing code fences survive decoding."""
        valid_result["suggestedCollection"] = "Use ```code``` here"
        expected = AnalysisResult.model_validate(valid_result)

        decoded = decode_analysis(json.dumps(valid_result))

        assert decoded == expected
        assert decoded.suggested_collection == "Use ```code``` here"

    def test_fenced_note_before_result(self, valid_json):
        """Test a fenced note ahead of the result JSON is ignored."""
        raw = f"```text\nnote: analyzing\n```\n{valid_json}"

        assert decode_analysis(raw).suggested_collection == "Recipes"


class TestDecodeCollectionSuggestions:
    """Tests for decode_collection_suggestions."""

    def test_array_of_suggestions(self):
        """Test a well formed array."""
        raw = json.dumps(
            [
                {"name": "Food", "emoji": "🍕", "tags": ["Recipe", "comfort food"]},
                {"name": "Trips", "emoji": "✈️", "tags": ["travel"]},
            ]
        )

        suggestions = decode_collection_suggestions(raw)

        assert [s.name for s in suggestions] == ["Food", "Trips"]
        assert suggestions[0].tags == ["recipe", "comfort-food"]

    def test_malformed_entries_skipped(self):
        """Test entries without a name are skipped."""
        raw = '[{"name": "Food"}, {"emoji": "x"}, "junk"]'

        assert [s.name for s in decode_collection_suggestions(raw)] == ["Food"]

    def test_unusable_output(self):
        """Test that garbage yields an empty list."""
        assert decode_collection_suggestions("nope") == []


class TestDecodeSearchIntent:
    """Tests for decode_search_intent."""

    def test_valid(self):
        """Test a well formed intent."""
        intent = decode_search_intent('{"matchingTags": ["recipe"], "keywords": ["pasta"]}')

        assert intent.matching_tags == ["recipe"]
        assert intent.keywords == ["pasta"]

    def test_unusable_output(self):
        """Test that garbage yields an empty intent."""
        intent = decode_search_intent("nope")

        assert intent.matching_tags == []
        assert intent.keywords == []
