from __future__ import annotations

import pytest

from babel_fish.core.translation.pipeline.output_processor import (
    ParseError,
    parse_batch,
    parse_single,
    strip_code_fence,
)

# json.loads raises ValueError past the int digit limit and RecursionError on deep nesting
HUGE_NUMBER_REPLY = '{"toCustomerLanguage": ["x"], "translation": "x", "n": ' + "9" * 5000 + "}"
DEEPLY_NESTED_REPLY = "[" * 200000 + "]" * 200000


def test_strip_code_fence_with_and_without_language_tag() -> None:
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('Here:\n```json\n[]\n```\nDone') == "[]"
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


def test_parse_single_plain_text() -> None:
    result = parse_single("  你好 \n", expect_json=False)
    assert result.translation == "你好"
    assert result.toned_original is None


def test_parse_single_empty_plain_text_fails() -> None:
    with pytest.raises(ParseError):
        parse_single("   ", expect_json=False)


def test_parse_single_tone_json_in_fence() -> None:
    reply = '```json\n{"tonedOriginal": "Good day!", "translation": "日安！"}\n```'
    result = parse_single(reply, expect_json=True)
    assert result.translation == "日安！"
    assert result.toned_original == "Good day!"


@pytest.mark.parametrize(
    "reply",
    [
        "not json",
        '["a list"]',
        '{"tonedOriginal": "Hi"}',
        '{"translation": 3}',
        pytest.param(HUGE_NUMBER_REPLY, id="huge-number"),
        pytest.param(DEEPLY_NESTED_REPLY, id="deeply-nested"),
    ],
)
def test_parse_single_tone_failures(reply: str) -> None:
    with pytest.raises(ParseError):
        parse_single(reply, expect_json=True)


def test_parse_batch_valid() -> None:
    parsed = parse_batch('{"toCustomerLanguage": ["你好", "再见"], "toAgentLanguage": []}')
    assert parsed is not None
    assert parsed.to_customer_language == ["你好", "再见"]
    assert parsed.to_agent_language == []


def test_parse_batch_single_field_and_fence() -> None:
    parsed = parse_batch('```json\n{"toAgentLanguage": ["Hello"]}\n```')
    assert parsed is not None
    assert parsed.to_customer_language == []
    assert parsed.to_agent_language == ["Hello"]


def test_parse_batch_drops_non_strings() -> None:
    parsed = parse_batch('{"toCustomerLanguage": ["a", 1, null, "b"], "toAgentLanguage": "x"}')
    assert parsed is not None
    assert parsed.to_customer_language == ["a", "b"]
    assert parsed.to_agent_language == []


@pytest.mark.parametrize(
    "reply",
    [
        "garbage",
        "[1, 2]",
        '{"translations": []}',
        "null",
        '"text"',
        pytest.param(HUGE_NUMBER_REPLY, id="huge-number"),
        pytest.param(DEEPLY_NESTED_REPLY, id="deeply-nested"),
    ],
)
def test_parse_batch_rejects_bad_shapes(reply: str) -> None:
    assert parse_batch(reply) is None
