"""Tests for antlsp.positions — UTF-16 conversion and cursor prefixes."""
from __future__ import annotations

import pytest
from lsprotocol import types as lsp
from pygls.workspace import PositionCodec

from antlsp.frontend.token import Token, TokenKind
from antlsp.positions import (
    client_to_char_offset,
    identifier_prefix_before_cursor,
    line_at,
    split_lines,
    token_range,
    token_to_range,
    utf16_len,
    utf16_to_char_offset,
)


def _ident(value: str, line: int, column: int) -> Token:
    return Token(TokenKind.IDENT, value, line, column)


class TestUtf16Len:
    def test_emoji_counts_as_surrogate_pair(self):
        assert utf16_len('a😀b') == 4

    @pytest.mark.parametrize('s', ['', 'x', 'let foo = 1', 'a_b_c123'])
    def test_ascii_matches_character_count(self, s):
        assert utf16_len(s) == len(s)

    def test_cjk_is_one_unit_per_character(self):
        assert utf16_len('变量') == 2


class TestTokenToRange:
    def test_cjk_prefix(self):
        text = '变量x = 1'
        assert token_to_range(text, _ident('x', 1, 3)) == (utf16_len('变量'), 3)

    def test_emoji_prefix_shifts_by_two(self):
        text = 'y = 1\n😀x = 2'
        assert token_to_range(text, _ident('x', 2, 2)) == (2, 3)

    def test_wide_token_value(self):
        text = 'a = 😀😀'
        tok = Token(TokenKind.IDENT, '😀😀', 1, 5)
        assert token_to_range(text, tok) == (4, 8)

    def test_missing_line_is_treated_as_empty(self):
        assert token_to_range('x = 1', _ident('abc', 7, 4)) == (0, 3)

    def test_token_range_is_zero_based(self):
        rng = token_range('x = 1\nyy = 2', _ident('yy', 2, 1))
        assert rng.start == lsp.Position(line=1, character=0)
        assert rng.end == lsp.Position(line=1, character=2)


class TestLines:
    def test_crlf_is_stripped(self):
        assert split_lines('a\r\nb\n') == ['a', 'b', '']

    def test_line_beyond_end_is_empty(self):
        assert line_at('a\nb', 5) == ''

    def test_utf16_to_char_offset_clamps(self):
        assert utf16_to_char_offset('abc', 10) == 3

    def test_utf16_to_char_offset_inside_surrogate_pair(self):
        assert utf16_to_char_offset('😀x', 1) == 0
        assert utf16_to_char_offset('😀x', 2) == 1


class TestIdentifierPrefix:
    def test_prefix_on_second_line(self):
        text = 'let foo_bar = 1\nfoo'
        assert identifier_prefix_before_cursor(text, lsp.Position(line=1, character=3)) == 'foo'

    def test_prefix_stops_at_cursor(self):
        text = 'let foo_bar = 1'
        assert identifier_prefix_before_cursor(text, lsp.Position(line=0, character=7)) == 'foo'

    def test_underscore_is_an_identifier_character(self):
        text = 'let foo_bar = 1'
        assert identifier_prefix_before_cursor(text, lsp.Position(line=0, character=11)) == 'foo_bar'

    def test_no_identifier_before_cursor(self):
        text = 'x = 1'
        assert identifier_prefix_before_cursor(text, lsp.Position(line=0, character=2)) == ''

    def test_cursor_beyond_line_end_clamps(self):
        text = 'a = 1\nfoo'
        assert identifier_prefix_before_cursor(text, lsp.Position(line=1, character=100)) == 'foo'

    def test_line_beyond_document_is_empty(self):
        assert identifier_prefix_before_cursor('foo', lsp.Position(line=3, character=2)) == ''

    def test_utf16_cursor_after_emoji(self):
        # '😀' is two UTF-16 units, so character 3 sits between 'a' and 'b'.
        text = '😀ab cd'
        assert identifier_prefix_before_cursor(text, lsp.Position(line=0, character=3)) == 'a'

    def test_cjk_identifier(self):
        text = '变量 = 1\n变'
        assert identifier_prefix_before_cursor(text, lsp.Position(line=1, character=1)) == '变'


UTF8 = PositionCodec(encoding=lsp.PositionEncodingKind.Utf8)
UTF32 = PositionCodec(encoding=lsp.PositionEncodingKind.Utf32)


class TestNegotiatedEncodings:
    def test_cjk_token_in_utf8(self):
        # each CJK character is three UTF-8 bytes
        assert token_to_range('变量 = 1', _ident('变量', 1, 1), UTF8) == (0, 6)

    def test_emoji_prefix_in_utf32(self):
        assert token_to_range('"😀" x', _ident('x', 1, 5), UTF32) == (4, 5)

    def test_utf8_column_to_char_offset(self):
        assert client_to_char_offset('é_x', 2, UTF8) == 1
        assert client_to_char_offset('é_x', 1, UTF8) == 0

    def test_cursor_prefix_in_utf8(self):
        text = 'naïve = 1\nx = "😀" + na + 1'
        # 'x = "' 5 bytes, emoji 4, '" + ' 4, 'na' 2
        position = lsp.Position(line=1, character=15)
        assert identifier_prefix_before_cursor(text, position, UTF8) == 'na'
