"""
Conversions between front-end and LSP coordinates.

The front end reports 1-based lines and 1-based columns counted in
characters (code points).  LSP positions are 0-based and measure columns in
the code units of the encoding negotiated at ``initialize`` (UTF-16 unless
the client asks for UTF-8 or UTF-32).  All translation between the two goes
through this module, using pygls' :class:`~pygls.workspace.PositionCodec` to
count code units.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from lsprotocol import types as lsp
from pygls.workspace import PositionCodec

if TYPE_CHECKING:
    from antlsp.frontend.token import Token

# Encoding every LSP client must support; used when no codec is negotiated.
UTF16 = PositionCodec(encoding=lsp.PositionEncodingKind.Utf16)


def utf16_len(s: str) -> int:
    """Number of UTF-16 code units needed to encode *s*."""
    return UTF16.client_num_units(s)


def split_lines(text: str) -> list[str]:
    """Split *text* on ``\\n`` only, matching the lexer's line counting.

    A trailing ``\\r`` is dropped from each line so CRLF documents map onto
    the same columns as LF ones.
    """
    return [line[:-1] if line.endswith('\r') else line for line in text.split('\n')]


def line_at(text: str, line: int) -> str:
    """Return 0-based *line* of *text*, or ``''`` when it does not exist."""
    lines = split_lines(text)
    return lines[line] if 0 <= line < len(lines) else ''


def client_to_char_offset(line: str, column: int, codec: PositionCodec = UTF16) -> int:
    """Character index in *line* corresponding to client column *column*.

    Columns past the end of the line clamp to its length; a column landing in
    the middle of a multi-unit character rounds down to the start of it.
    """
    units = 0
    for index, ch in enumerate(line):
        width = codec.client_num_units(ch)
        if units + width > column:
            return index
        units += width
    return len(line)


def utf16_to_char_offset(line: str, utf16_col: int) -> int:
    return client_to_char_offset(line, utf16_col, UTF16)


def token_to_range(text: str, token: Token, codec: PositionCodec = UTF16) -> tuple[int, int]:
    """Client ``(start, end)`` columns of *token* on its line in *text*."""
    line_text = line_at(text, token.line - 1)
    prefix = line_text[:max(token.column - 1, 0)]
    start = codec.client_num_units(prefix)
    return start, start + codec.client_num_units(token.value)


def token_range(text: str, token: Token, codec: PositionCodec = UTF16) -> lsp.Range:
    line = max(token.line - 1, 0)
    start, end = token_to_range(text, token, codec)
    return lsp.Range(
        start=lsp.Position(line=line, character=start),
        end=lsp.Position(line=line, character=end),
    )


def identifier_prefix_before_cursor(
    text: str,
    position: lsp.Position,
    codec: PositionCodec = UTF16,
) -> str:
    """Return the run of identifier characters ending at *position*.

    Identifier characters are alphanumerics and ``_``.  Returns ``''`` when
    the cursor is not directly preceded by one.
    """
    line_text = line_at(text, position.line)
    before = line_text[:client_to_char_offset(line_text, position.character, codec)]
    start = len(before)
    while start > 0 and (before[start - 1].isalnum() or before[start - 1] == '_'):
        start -= 1
    return before[start:]
