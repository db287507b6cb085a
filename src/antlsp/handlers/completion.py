"""
Completion handler.

Offers every binding in the type table whose name starts with the identifier
prefix under the cursor.  The table comes from a fresh analysis pass over the
current text; when that pass fails the bindings collected before the failure
are still offered, so completion keeps working while the user is mid-edit.

Matching is a plain case-sensitive prefix test and items come back in table
order; there is no ranking.
"""
from __future__ import annotations

import logging

from lsprotocol import types as lsp
from pygls.workspace import PositionCodec

from antlsp import analysis
from antlsp.positions import UTF16, identifier_prefix_before_cursor

logger = logging.getLogger(__name__)


def completion_item(name: str) -> lsp.CompletionItem:
    return lsp.CompletionItem(
        label=name,
        kind=lsp.CompletionItemKind.Variable,
        insert_text=name,
    )


def get_completions(
    text: str,
    position: lsp.Position,
    uri: str = 'untitled:completion',
    include_builtins: bool = True,
    codec: PositionCodec = UTF16,
) -> list[lsp.CompletionItem]:
    """Return completion items for *position* in *text*.

    *position* is in the client code units of *codec*.
    """
    result = analysis.check(text, uri, recover=True, codec=codec)
    prefix = identifier_prefix_before_cursor(text, position, codec)

    with result.table.lock:
        names = [
            name for name in result.table.var_map
            if name.startswith(prefix)
            and (include_builtins or not result.table.is_builtin(name))
        ]
    logger.debug('get_completions: %s prefix=%r → %d items (analysis ok=%s)',
                 uri, prefix, len(names), result.ok)
    return [completion_item(name) for name in names]
