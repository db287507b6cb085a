"""Convert front-end failures into LSP Diagnostic objects."""
from __future__ import annotations

from lsprotocol import types as lsp
from pygls.workspace import PositionCodec

from antlsp.frontend import FrontendError
from antlsp.positions import UTF16, token_range

LEXER_ERROR_MESSAGE = 'lexer error'


def lexer_diagnostic(label: str) -> lsp.Diagnostic:
    """Whole-document diagnostic for a lexical error (no position detail)."""
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=0, character=0),
            end=lsp.Position(line=0, character=0),
        ),
        message=LEXER_ERROR_MESSAGE,
        severity=lsp.DiagnosticSeverity.Error,
        source=label,
    )


def error_diagnostic(
    text: str,
    err: FrontendError,
    label: str,
    codec: PositionCodec = UTF16,
) -> lsp.Diagnostic:
    """Diagnostic spanning the offending token of a parse or type error.

    Columns are counted in the code units of *codec*.
    """
    return lsp.Diagnostic(
        range=token_range(text, err.token, codec),
        message=err.message or str(err.kind),
        severity=lsp.DiagnosticSeverity.Error,
        source=label,
    )
