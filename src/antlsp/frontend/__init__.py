"""TypedAnt compiler front end: lexer, parser and type checker."""
from .token import Token, TokenKind
from .lexer import Lexer, LexError
from .parser import Parser
from .checker import TypeChecker
from .table import TypeTable
from .errors import FrontendError, ParseError, ParseErrorKind, TypeCheckError, TypeErrorKind

__all__ = [
    'Token', 'TokenKind', 'Lexer', 'LexError', 'Parser', 'TypeChecker',
    'TypeTable', 'FrontendError', 'ParseError', 'ParseErrorKind',
    'TypeCheckError', 'TypeErrorKind',
]
