"""
Tests for JSON extraction from free-form model output.

System role: Verification of the analysis output parser
"""

import pytest

from backend.core.exceptions import ParseError
from backend.core.therapy.json_extraction import extract_json, parse_json_object


class TestExtractJson:
    """Test suite for extract_json()."""

    def test_plain_object_is_returned_unchanged(self) -> None:
        assert extract_json('{"a": 1}') == '{"a": 1}'

    def test_markdown_fences_are_stripped(self) -> None:
        text = '```json\n{"emotionalState": "calm"}\n```'
        assert extract_json(text) == '{"emotionalState": "calm"}'

    def test_surrounding_prose_is_ignored(self) -> None:
        text = 'Here is the analysis: {"riskLevel": 2} Let me know if you need more.'
        assert extract_json(text) == '{"riskLevel": 2}'

    def test_nested_objects_are_kept_whole(self) -> None:
        text = 'result {"a": {"b": {"c": 1}}, "d": 2} trailing'
        assert extract_json(text) == '{"a": {"b": {"c": 1}}, "d": 2}'

    def test_only_first_object_is_returned(self) -> None:
        assert extract_json('{"a": 1} and {"b": 2}') == '{"a": 1}'

    def test_braces_inside_strings_are_not_counted(self) -> None:
        text = '{"note": "use } and { freely", "x": "\\"}"} tail'
        assert extract_json(text) == '{"note": "use } and { freely", "x": "\\"}"}'

    def test_unbalanced_prefix_falls_through_to_balanced_object(self) -> None:
        assert extract_json('x { y {"a": 1}') == '{"a": 1}'

    @pytest.mark.parametrize("text", ["", "no json here", "{ never closed", "} {"])
    def test_missing_object_raises_parse_error(self, text: str) -> None:
        with pytest.raises(ParseError):
            extract_json(text)


class TestParseJsonObject:
    """Test suite for parse_json_object()."""

    def test_decodes_object(self) -> None:
        assert parse_json_object('```\n{"themes": ["sleep"]}\n```') == {"themes": ["sleep"]}

    def test_invalid_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_json_object("{'single': 'quotes'}")

    def test_array_only_output_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_json_object("[1, 2, 3]")
