"""
Front-end error types.

Parser and type-checker failures carry the offending :class:`Token`, an
error-kind tag and an optional human-readable message.  When the message is
absent the kind's value is used as the default text.
"""
from __future__ import annotations

import enum

from .token import Token


class FrontendError(Exception):
    """Base class for token-scoped front-end errors."""

    def __init__(self, token: Token, kind: enum.Enum, message: str | None = None):
        self.token = token
        self.kind = kind
        self.message = message
        super().__init__(message or str(kind))


class ParseErrorKind(str, enum.Enum):
    UNEXPECTED_TOKEN = 'unexpected token'
    EXPECTED_EXPRESSION = 'expected expression'
    EXPECTED_IDENTIFIER = 'expected identifier'
    EXPECTED_TYPE = 'expected type'
    UNCLOSED_BLOCK = 'unclosed block'
    INVALID_ASSIGNMENT_TARGET = 'invalid assignment target'
    NESTING_TOO_DEEP = 'nesting too deep'

    def __str__(self) -> str:
        return self.value


class TypeErrorKind(str, enum.Enum):
    UNDEFINED_VARIABLE = 'undefined variable'
    UNKNOWN_TYPE = 'unknown type'
    TYPE_MISMATCH = 'type mismatch'
    NOT_CALLABLE = 'not callable'
    ARITY_MISMATCH = 'wrong number of arguments'
    RETURN_OUTSIDE_FUNCTION = 'return outside function'
    REDEFINITION = 'redefinition'
    NESTING_TOO_DEEP = 'nesting too deep'

    def __str__(self) -> str:
        return self.value


class ParseError(FrontendError):
    def __init__(self, token: Token, kind: enum.Enum, message: str | None = None):
        super().__init__(token, kind, message)
        self.partial = None


class TypeCheckError(FrontendError):
    pass
