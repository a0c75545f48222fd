"""Tests for JSON extraction from generated text."""

import pytest

from knotable.content.parsing import (
    extract_json_object,
    find_json_object,
    iter_json_objects,
)
from knotable.llm.errors import MalformedGenerationResponseError


class TestFindJsonObject:
    def test_plain_object(self) -> None:
        assert find_json_object('{"a": 1}') == '{"a": 1}'

    def test_object_after_prose(self) -> None:
        text = 'Here is your result: {"milestones": [{"title": "x"}]} Enjoy!'
        assert find_json_object(text) == '{"milestones": [{"title": "x"}]}'

    def test_first_of_two_objects(self) -> None:
        assert find_json_object('{"a": 1} and {"b": 2}') == '{"a": 1}'

    def test_braces_inside_strings_ignored(self) -> None:
        text = 'x {"code": "if (a) { b } else {", "n": 1} y'
        assert find_json_object(text) == '{"code": "if (a) { b } else {", "n": 1}'

    def test_escaped_quote_inside_string(self) -> None:
        text = r'{"q": "say \"}\" now"}'
        assert find_json_object(text) == text

    def test_no_brace(self) -> None:
        assert find_json_object("just prose") is None

    def test_unclosed_object(self) -> None:
        assert find_json_object("{ never closed") is None

    def test_unclosed_outer_yields_inner_object(self) -> None:
        assert find_json_object('{"a": {"b": 1}') == '{"b": 1}'

    def test_unclosed_brace_before_object_skipped(self) -> None:
        text = 'Use {name to mark blanks. Result: {"milestones": []}'
        assert find_json_object(text) == '{"milestones": []}'

    def test_iter_yields_all_candidates(self) -> None:
        text = '{n} then {"a": 1}'
        assert list(iter_json_objects(text)) == ["{n}", '{"a": 1}']


class TestExtractJsonObject:
    def test_embedded_json_parsed(self) -> None:
        text = 'Here is your result: {"milestones":[{"bloomLevel": 1}]}'
        assert extract_json_object(text) == {"milestones": [{"bloomLevel": 1}]}

    def test_unclosed_brace_in_prose(self) -> None:
        text = 'Use {name to mark blanks. Result: {"milestones": []}'
        assert extract_json_object(text) == {"milestones": []}

    def test_placeholder_before_payload_skipped(self) -> None:
        text = 'Set {n} items: {"questions": [{"question": "Q1"}]}'
        assert extract_json_object(text) == {"questions": [{"question": "Q1"}]}

    def test_markdown_fence(self) -> None:
        text = '```json\n{"questions": []}\n```'
        assert extract_json_object(text) == {"questions": []}

    def test_prose_without_braces(self) -> None:
        with pytest.raises(MalformedGenerationResponseError) as exc_info:
            extract_json_object("Sorry, I cannot help with that.")
        assert exc_info.value.raw_text == "Sorry, I cannot help with that."
        assert exc_info.value.reason == "no JSON object found"

    def test_invalid_json(self) -> None:
        with pytest.raises(MalformedGenerationResponseError) as exc_info:
            extract_json_object("{'single': 'quotes'}")
        assert exc_info.value.reason.startswith("invalid JSON:")

    def test_empty_text(self) -> None:
        with pytest.raises(MalformedGenerationResponseError):
            extract_json_object("")
