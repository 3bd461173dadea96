"""Tests for content.parsing: tolerant JSON extraction."""

import json

import pytest

from conftest import raw_outcome
from content.parsing import escape_string_newlines, must_parse_reply, parse_reply, unfence


class TestParseReply:
    def test_plain_json(self) -> None:
        res = parse_reply('{"story": "ok"}')
        assert res.ok
        assert res.data == {"story": "ok"}

    def test_fenced_json(self) -> None:
        res = parse_reply('```json\n{"story": "ok"}\n```')
        assert res.data == {"story": "ok"}

    def test_surrounding_prose(self) -> None:
        res = parse_reply('Aqui está: {"a": 1} espero que ajude')
        assert res.data == {"a": 1}

    def test_typographic_quotes_inside_values_kept(self) -> None:
        raw = json.dumps(raw_outcome(story="O rei disse \u201cajoelhe-se\u201d e calou."), ensure_ascii=False)
        res = parse_reply(raw)
        assert res.ok, res.error
        assert res.data["story"] == "O rei disse \u201cajoelhe-se\u201d e calou."
        assert res.cleaned == raw

    def test_smart_quotes(self) -> None:
        res = parse_reply("{“story”: “ok”}")
        assert res.data == {"story": "ok"}

    def test_trailing_commas(self) -> None:
        res = parse_reply('{"a": [1, 2,], "b": 3,}')
        assert res.data == {"a": [1, 2], "b": 3}

    def test_raw_newline_in_string(self) -> None:
        res = parse_reply('{"story": "linha um\nlinha dois"}')
        assert res.data == {"story": "linha um\nlinha dois"}

    def test_garbage_reports_error(self) -> None:
        res = parse_reply("sem json aqui")
        assert not res.ok
        assert res.error

    def test_non_object_root(self) -> None:
        res = parse_reply("[1, 2]")
        assert not res.ok

    def test_empty(self) -> None:
        assert not parse_reply("").ok


class TestHelpers:
    def test_unfence_without_fence(self) -> None:
        assert unfence("  {}  ") == "{}"

    def test_escape_keeps_escaped_quotes(self) -> None:
        s = '{"a": "diz \\"oi\\"\nfim"}'
        assert escape_string_newlines(s) == '{"a": "diz \\"oi\\"\\nfim"}'

    def test_newline_outside_string_untouched(self) -> None:
        assert escape_string_newlines('{\n"a": 1\n}') == '{\n"a": 1\n}'

    def test_must_parse_raises(self) -> None:
        with pytest.raises(ValueError):
            must_parse_reply("nada")
