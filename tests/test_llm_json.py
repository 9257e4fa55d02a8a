from __future__ import annotations

import pytest

from langotron.llm_json import parse_json_payload, strip_code_fence


def test_strip_code_fence() -> None:
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}') == '{"a": 1}'
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('{"word": "air"}', {"word": "air"}),
        ('```json\n{"word": "air"}\n```', {"word": "air"}),
        ('Sure! {"word": "air"} Enjoy.', {"word": "air"}),
        ("[1, 2]", [1, 2]),
    ],
)
def test_parse_json_payload(text, expected) -> None:
    assert parse_json_payload(text) == expected


@pytest.mark.parametrize("text", ["", "plain words", '{"word": "air"', "} {"])
def test_parse_json_payload_returns_none_for_unusable_text(text) -> None:
    assert parse_json_payload(text) is None
