"""
TypedAnt lexer.

Turns source text into a flat list of :class:`Token` objects.  Lexical errors
(stray characters, unterminated strings) do not abort scanning: they are
collected in :attr:`Lexer.errors` and the offending input is skipped, so the
caller can decide what to do via :meth:`Lexer.contains_error`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .token import KEYWORDS, OPERATORS, Token, TokenKind

logger = logging.getLogger(__name__)

_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '"': '"', '\\': '\\', '0': '\0'}


@dataclass
class LexError:
    line: int        # 1-based
    column: int      # 1-based
    message: str


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == '_'


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == '_'


def unescape(literal: str) -> str:
    """Decode a quoted string literal (as it appears in a token) to its value."""
    body = literal[1:-1] if len(literal) >= 2 and literal.endswith('"') else literal[1:]
    out: list[str] = []
    chars = iter(body)
    for ch in chars:
        if ch == '\\':
            nxt = next(chars, '')
            out.append(_ESCAPES.get(nxt, nxt))
        else:
            out.append(ch)
    return ''.join(out)


class Lexer:
    def __init__(self, text: str, file: str = '<input>'):
        self.text = text
        self.file = file
        self.errors: list[LexError] = []
        self._tokens: list[Token] | None = None
        self._pos = 0
        self._line = 1
        self._column = 1

    def contains_error(self) -> bool:
        if self._tokens is None:
            self.get_tokens()
        return bool(self.errors)

    def get_tokens(self) -> list[Token]:
        if self._tokens is None:
            self._tokens = list(self._scan())
            if self.errors:
                logger.debug('%s: %d lexical error(s), first: %s',
                             self.file, len(self.errors), self.errors[0].message)
        return self._tokens

    # -- scanning -----------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        i = self._pos + offset
        return self.text[i] if i < len(self.text) else ''

    def _advance(self, n: int = 1) -> str:
        chunk = self.text[self._pos:self._pos + n]
        for ch in chunk:
            if ch == '\n':
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        self._pos += len(chunk)
        return chunk

    def _error(self, line: int, column: int, message: str) -> None:
        self.errors.append(LexError(line=line, column=column, message=message))

    def _scan(self):
        while self._pos < len(self.text):
            ch = self._peek()
            line, column = self._line, self._column

            if ch == '\n':
                self._advance()
                yield Token(TokenKind.NEWLINE, '\n', line, column)
            elif ch in ' \t\r':
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                while self._pos < len(self.text) and self._peek() != '\n':
                    self._advance()
            elif _is_digit(ch):
                yield self._number(line, column)
            elif _is_ident_start(ch):
                start = self._pos
                while self._pos < len(self.text) and _is_ident_char(self._peek()):
                    self._advance()
                word = self.text[start:self._pos]
                kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENT
                yield Token(kind, word, line, column)
            elif ch == '"':
                tok = self._string(line, column)
                if tok is not None:
                    yield tok
            else:
                op = next((o for o in OPERATORS if self.text.startswith(o, self._pos)), None)
                if op is None:
                    self._error(line, column, f'unexpected character {ch!r}')
                    self._advance()
                else:
                    self._advance(len(op))
                    yield Token(TokenKind.OP, op, line, column)

        yield Token(TokenKind.EOF, '', self._line, self._column)

    def _number(self, line: int, column: int) -> Token:
        start = self._pos
        while _is_digit(self._peek()):
            self._advance()
        kind = TokenKind.INT
        if self._peek() == '.' and _is_digit(self._peek(1)):
            kind = TokenKind.FLOAT
            self._advance()
            while _is_digit(self._peek()):
                self._advance()
        return Token(kind, self.text[start:self._pos], line, column)

    def _string(self, line: int, column: int) -> Token | None:
        start = self._pos
        self._advance()  # opening quote
        while True:
            ch = self._peek()
            if ch == '' or ch == '\n':
                self._error(line, column, 'unterminated string literal')
                return None
            self._advance()
            if ch == '\\':
                if self._peek() in ('', '\n'):
                    continue
                self._advance()
            elif ch == '"':
                return Token(TokenKind.STRING, self.text[start:self._pos], line, column)
