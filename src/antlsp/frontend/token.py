"""Token type shared by the lexer and parser."""
from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenKind(enum.Enum):
    INT = 'int literal'
    FLOAT = 'float literal'
    STRING = 'string literal'
    IDENT = 'identifier'
    KEYWORD = 'keyword'
    OP = 'operator'
    NEWLINE = 'newline'
    EOF = 'end of file'


KEYWORDS = frozenset({
    'let', 'func', 'return', 'if', 'else', 'while', 'true', 'false',
})

# Longest operators first so the lexer can match greedily.
OPERATORS = (
    '->', '==', '!=', '<=', '>=', '&&', '||',
    '+', '-', '*', '/', '%', '<', '>', '=', '!',
    '(', ')', '{', '}', ',', ':', ';',
)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int        # 1-based
    column: int      # 1-based, counted in characters

    def is_op(self, *ops: str) -> bool:
        return self.kind is TokenKind.OP and self.value in ops

    def is_keyword(self, *words: str) -> bool:
        return self.kind is TokenKind.KEYWORD and self.value in words
