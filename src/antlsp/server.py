"""
antlsp Language Server.

Registers LSP capabilities and wires the document store, the analysis
pipeline and the completion handler together.
"""
from __future__ import annotations

import asyncio
import functools
import logging
import traceback
from concurrent.futures import ThreadPoolExecutor

from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path
from pygls.workspace import PositionCodec
from lsprotocol import types as lsp

from antlsp import __version__
from antlsp import analysis
from antlsp.config import ServerSettings, apply_log_level, load_settings
from antlsp.document import DocumentStore
from antlsp.handlers import get_completions
from antlsp.positions import UTF16

logger = logging.getLogger(__name__)


class AntLanguageServer(LanguageServer):
    """Language server owning the per-process document store and settings."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.document_store = DocumentStore()
        self.settings = ServerSettings()


server = AntLanguageServer(
    'antlsp', __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)

# Analysis is CPU-bound and synchronous; run it off the event loop.
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix='antlsp-analysis')


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _workspace_root(params: lsp.InitializeParams) -> str | None:
    uri = params.root_uri
    if not uri and params.workspace_folders:
        uri = params.workspace_folders[0].uri
    if not uri:
        return params.root_path
    return to_fs_path(uri) or uri


def _position_codec(ls: AntLanguageServer) -> PositionCodec:
    """Codec for the encoding negotiated at ``initialize``; UTF-16 before that."""
    try:
        return ls.workspace.position_codec
    except RuntimeError:
        return UTF16


def _publish(ls: AntLanguageServer, uri: str, diagnostics: list[lsp.Diagnostic]) -> None:
    logger.debug('_publish: %s → %d diagnostics', uri, len(diagnostics))
    ls.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


async def _analyze_and_publish(ls: AntLanguageServer, uri: str) -> None:
    """Analyze the current text of *uri* and publish the outcome.

    The publish is skipped when the document was changed or closed while the
    analysis ran, so results computed from stale text never overwrite newer
    ones.
    """
    snap = await ls.document_store.snapshot(uri)
    if snap is None:
        return
    loop = asyncio.get_running_loop()
    try:
        job = functools.partial(analysis.check, snap.text, uri, codec=_position_codec(ls))
        result = await loop.run_in_executor(_executor, job)
    except Exception:
        logger.error('_analyze_and_publish: analysis of %s raised:\n%s',
                     uri, traceback.format_exc())
        return
    if not await ls.document_store.is_current(uri, snap.generation):
        logger.debug('_analyze_and_publish: dropping stale result for %s (generation %d)',
                     uri, snap.generation)
        return
    _publish(ls, uri, result.diagnostics)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

@server.feature(lsp.INITIALIZE)
def on_initialize(ls: AntLanguageServer, params: lsp.InitializeParams):
    workspace_root = _workspace_root(params)
    ls.settings = load_settings(workspace_root, params.initialization_options)
    apply_log_level(ls.settings.log_level)
    logger.info('on_initialize: workspace=%s settings=%s', workspace_root, ls.settings)


@server.feature(lsp.SHUTDOWN)
async def on_shutdown(ls: AntLanguageServer, *args):
    await ls.document_store.clear()
    logger.info('on_shutdown: document store cleared')


@server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(ls: AntLanguageServer, params: lsp.DidChangeConfigurationParams):
    """Handle live config changes (the ``antlsp`` settings section)."""
    settings = getattr(params, 'settings', None) or {}
    if isinstance(settings, dict):
        ls.settings = ls.settings.merged(settings.get('antlsp'))
        apply_log_level(ls.settings.log_level)


# ---------------------------------------------------------------------------
# Text document synchronisation
# ---------------------------------------------------------------------------

@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: AntLanguageServer, params: lsp.DidOpenTextDocumentParams):
    td = params.text_document
    await ls.document_store.open(td.uri, td.text)
    await _analyze_and_publish(ls, td.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
async def did_change(ls: AntLanguageServer, params: lsp.DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if not params.content_changes:
        return
    # Full sync: the last change carries the entire new text.
    text = params.content_changes[-1].text
    await ls.document_store.update(uri, text)
    await _analyze_and_publish(ls, uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
async def did_close(ls: AntLanguageServer, params: lsp.DidCloseTextDocumentParams):
    uri = params.text_document.uri
    await ls.document_store.close(uri)
    _publish(ls, uri, [])


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------

@server.feature(
    lsp.TEXT_DOCUMENT_COMPLETION,
    lsp.CompletionOptions(trigger_characters=['_'], resolve_provider=False),
)
async def completion(ls: AntLanguageServer, params: lsp.CompletionParams) -> lsp.CompletionList | None:
    uri = params.text_document.uri
    snap = await ls.document_store.snapshot(uri)
    if snap is None:
        return None
    loop = asyncio.get_running_loop()
    job = functools.partial(
        get_completions, snap.text, params.position,
        uri=uri, include_builtins=ls.settings.include_builtins,
        codec=_position_codec(ls),
    )
    try:
        items = await loop.run_in_executor(_executor, job)
    except Exception:
        logger.error('completion: %s raised:\n%s', uri, traceback.format_exc())
        return None
    return lsp.CompletionList(is_incomplete=False, items=items)
