"""Tests for the embedded JSON decoder."""

from verisite.domain.errors import ParseError
from verisite.domain.services.json_decoder import decode_json_object


def test_decodes_bare_object():
    """Test decoding a reply that is only JSON."""
    result = decode_json_object('{"verdict": "true"}')
    assert result.ok
    assert result.value == {"verdict": "true"}


def test_decodes_object_inside_code_fence():
    """Test decoding JSON wrapped in prose and a Markdown fence."""
    text = 'Sure! Here it is:\n```json\n{"a": {"b": [1, 2]}}\n```\nHope this helps.'
    result = decode_json_object(text)
    assert result.ok
    assert result.value == {"a": {"b": [1, 2]}}


def test_skips_unbalanced_brace_before_object():
    """Test that a stray brace does not hide a later valid object."""
    result = decode_json_object('Use {curly braces} like this: {"ok": true}')
    assert result.ok
    assert result.value == {"ok": True}


def test_no_object_returns_parse_error():
    """Test that text without JSON yields a tagged error carrying the raw text."""
    result = decode_json_object("I cannot help with that.")
    assert not result.ok
    assert isinstance(result.error, ParseError)
    assert result.error.raw_text == "I cannot help with that."


def test_empty_and_none_input():
    """Test empty input never raises."""
    assert not decode_json_object("").ok
    assert not decode_json_object(None).ok


def test_top_level_array_is_not_an_object():
    """Test that arrays are not accepted, but objects inside them are."""
    result = decode_json_object('[1, 2, {"x": 1}]')
    assert result.ok
    assert result.value == {"x": 1}
