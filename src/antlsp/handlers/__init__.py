"""handlers/__init__.py — re-export handler functions for convenience."""
from .diagnostics import error_diagnostic, lexer_diagnostic
from .completion import get_completions

__all__ = ['error_diagnostic', 'lexer_diagnostic', 'get_completions']
