"""
Analysis pipeline.

Drives the TypedAnt front end (lexer → parser → type checker) over one
snapshot of a document and reduces the outcome to at most one diagnostic:
the first error found.  Later stages never run once an earlier one fails.

Every pass builds from scratch; nothing is cached between calls.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlparse

from lsprotocol import types as lsp
from pygls.uris import to_fs_path
from pygls.workspace import PositionCodec

from antlsp.frontend import Lexer, Parser, ParseError, TypeChecker, TypeCheckError, TypeTable
from antlsp.handlers.diagnostics import error_diagnostic, lexer_diagnostic
from antlsp.positions import UTF16

logger = logging.getLogger(__name__)


def document_label(uri: str) -> str:
    """Filesystem path for ``file:`` URIs, otherwise the URI itself."""
    if urlparse(uri).scheme == 'file':
        path = to_fs_path(uri)
        if path:
            return path
    return uri


def analyze(
    text: str,
    uri: str,
    table: TypeTable,
    *,
    recover: bool = False,
    codec: PositionCodec = UTF16,
) -> lsp.Diagnostic | None:
    """Run the front end over *text*, populating *table*.

    Returns ``None`` on success, otherwise the diagnostic for the first error.

    With *recover* set, a parse failure still type-checks the statements
    completed before the error (errors from that check are ignored) so that
    *table* holds their bindings.  The returned diagnostic is the same either
    way.  Diagnostic columns are counted in the code units of *codec*.
    """
    label = document_label(uri)

    lexer = Lexer(text, label)
    tokens = lexer.get_tokens()
    if lexer.contains_error():
        logger.debug('analyze: %s → lexer error', uri)
        return lexer_diagnostic(label)

    try:
        program = Parser(tokens).parse_program()
    except ParseError as err:
        logger.debug('analyze: %s → parse error at %d:%d: %s',
                     uri, err.token.line, err.token.column, err)
        if recover and err.partial is not None:
            _check_partial(err.partial, table)
        return error_diagnostic(text, err, label, codec)

    try:
        TypeChecker(table).check_node(program)
    except TypeCheckError as err:
        logger.debug('analyze: %s → type error at %d:%d: %s',
                     uri, err.token.line, err.token.column, err)
        return error_diagnostic(text, err, label, codec)

    logger.debug('analyze: %s → ok', uri)
    return None


def _check_partial(program, table: TypeTable) -> None:
    try:
        TypeChecker(table).check_node(program)
    except TypeCheckError as err:
        logger.debug('analyze: partial check stopped at %d:%d: %s',
                     err.token.line, err.token.column, err)


@dataclass
class AnalysisResult:
    """Outcome of one pass: the (possibly partial) table plus the error, if any."""
    table: TypeTable
    diagnostic: lsp.Diagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None

    @property
    def diagnostics(self) -> list[lsp.Diagnostic]:
        return [] if self.diagnostic is None else [self.diagnostic]


def check(
    text: str,
    uri: str,
    *,
    recover: bool = False,
    codec: PositionCodec = UTF16,
) -> AnalysisResult:
    """Analyze *text* against a fresh, initialised :class:`TypeTable`."""
    table = TypeTable().init()
    diagnostic = analyze(text, uri, table, recover=recover, codec=codec)
    return AnalysisResult(table=table, diagnostic=diagnostic)
