"""Tests for JSON recovery from model output."""

import json

import pytest

from ai_quiz.generation.errors import MalformedResponse
from ai_quiz.generation.extractor import extract_json, find_object, iter_object_candidates, strip_code_fence


class TestStripCodeFence:
    """Test fence removal."""

    def test_plain_text_untouched(self):
        assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'

    def test_removes_tagged_fence(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_untagged_fence(self):
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_single_line_fence(self):
        assert strip_code_fence('```json {"a": 1}```') == '{"a": 1}'


class TestExtractJson:
    """Test extract_json."""

    def test_parses_plain_json(self, quiz_json: str, quiz_payload: dict):
        assert extract_json(quiz_json) == quiz_payload

    @pytest.mark.parametrize("tag", ["json", "JSON", ""])
    def test_fenced_json_matches_inner_content(self, quiz_json: str, tag: str):
        """Test that fencing does not change the result."""
        fenced = f"```{tag}\n{quiz_json}\n```"

        assert extract_json(fenced) == json.loads(quiz_json)

    def test_leading_and_trailing_prose(self, quiz_json: str, quiz_payload: dict):
        text = f"Sure! Here is your quiz:\n{quiz_json}\nLet me know if you want more."

        assert extract_json(text) == quiz_payload

    def test_fence_with_trailing_commentary(self):
        text = '```json\n{"message": "Nice work!"}\n```\nHope this helps.'

        assert extract_json(text) == {"message": "Nice work!"}

    def test_skips_unparseable_block(self):
        """Test that the first block that decodes wins."""
        text = 'Schema: {topic: string} Answer: {"message": "Keep going!"}'

        assert extract_json(text) == {"message": "Keep going!"}

    @pytest.mark.parametrize(
        "text, expected",
        [
            ('Note {"oops} then {"message": "hello world"}', {"message": "hello world"}),
            ('Schema: {topic: "string} Answer: {"message": "Keep going!"}', {"message": "Keep going!"}),
        ],
    )
    def test_stray_quote_does_not_hide_later_object(self, text: str, expected: dict):
        assert extract_json(text) == expected

    def test_nested_objects_kept_whole(self):
        text = 'Output -> {"outer": {"inner": [1, 2]}, "k": "v"} done'

        assert extract_json(text) == {"outer": {"inner": [1, 2]}, "k": "v"}

    def test_braces_inside_strings(self):
        text = 'Reply: {"message": "Use {braces} wisely } ok"} end'

        assert extract_json(text) == {"message": "Use {braces} wisely } ok"}

    def test_no_object_raises(self):
        with pytest.raises(MalformedResponse):
            extract_json("I could not come up with a quiz, sorry.")

    def test_unbalanced_object_raises(self):
        with pytest.raises(MalformedResponse):
            extract_json('Here you go: {"topic": "Space", "questions": [')

    def test_empty_text_raises(self):
        with pytest.raises(MalformedResponse):
            extract_json("")

    def test_non_text_raises(self):
        with pytest.raises(MalformedResponse):
            extract_json(None)


class TestIterObjectCandidates:
    """Test the balanced block scanner."""

    def test_yields_top_level_blocks_in_order(self):
        blocks = list(iter_object_candidates('a {"x": {"y": 1}} b {"z": 2} c'))

        assert blocks == ['{"x": {"y": 1}}', '{"z": 2}']

    def test_ignores_stray_closing_brace(self):
        assert list(iter_object_candidates('} {"a": 1}')) == ['{"a": 1}']

    def test_skips_unclosed_block(self):
        assert list(iter_object_candidates('{"open {"a": 1}')) == ['{"a": 1}']


class TestFindObject:
    """Test locating a single block."""

    def test_returns_slice_bounds(self):
        text = 'x {"a": 1} y'

        assert find_object(text) == (2, 10)

    def test_starts_at_position(self):
        text = '{"a": 1} {"b": 2}'

        start, end = find_object(text, 1)

        assert text[start:end] == '{"b": 2}'

    def test_none_without_block(self):
        assert find_object("no braces here") is None
