"""
Request and notification handlers.

Every handler takes the session state and the raw ``params`` payload and
returns a JSON-compatible result (ignored for notifications). Handlers raise
instead of building error responses; the dispatcher maps exceptions to
JSON-RPC errors:

- pydantic ValidationError -> invalid params
- CtagsLspException and anything else -> internal error

Lifecycle:
    - initialize: load the workspace index
    - initialized, shutdown, exit

Documents:
    - textDocument/didOpen, didChange, didClose, didSave (rescans the file)

Queries:
    - textDocument/completion: case-insensitive prefix match
    - textDocument/definition: exact match on the word at the cursor
    - workspace/symbol: exact match on the query
    - textDocument/documentSymbol: every symbol declared in the document
"""

import logging
import os
from typing import Any, Callable, Dict, List, Optional

from ctags_lsp import __version__
from ctags_lsp.core.exceptions import (
    FileReadError,
    NoWordAtPosition,
    PositionOutOfRangeError,
)
from ctags_lsp.core.kinds import (
    CALLABLE_COMPLETION_KINDS,
    CompletionItemKind,
    completion_kind,
    symbol_kind,
)
from ctags_lsp.core.models import TagEntry, TextRange
from ctags_lsp.core.text import (
    find_symbol_range,
    get_current_word,
    get_line,
    path_to_uri,
    uri_to_path,
)
from ctags_lsp.documents.cache import canonical_path
from ctags_lsp.indexing.loader import IndexLoader
from ctags_lsp.lsp.protocol import (
    CompletionItem,
    CompletionList,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    DocumentSymbolParams,
    InitializeParams,
    InitializeResult,
    Location,
    MarkupContent,
    Range,
    ServerInfo,
    SymbolInformation,
    TextDocumentPositionParams,
    WorkspaceSymbolParams,
    parse_params,
)
from ctags_lsp.lsp.state import ServerState

logger = logging.getLogger(__name__)

SERVER_NAME = "ctags-lsp"

Handler = Callable[[ServerState, Any], Any]


# ==============================================================================
# Lifecycle
# ==============================================================================

def handle_initialize(state: ServerState, params: Any) -> Dict[str, Any]:
    """
    Resolve the workspace root and populate the index.

    Index readers waiting on ``state.index_ready`` are released when this
    returns, whether or not loading succeeded.
    """
    try:
        init = parse_params(InitializeParams, params)
        if init.root_uri:
            root = uri_to_path(init.root_uri)
        elif init.root_path:
            root = init.root_path
        else:
            root = os.getcwd()

        state.config = state.config.with_overrides(init.initialization_options)
        state.root_path = os.path.abspath(root)
        state.index.clear()

        loader = IndexLoader(state.root_path, state.config, state.index)
        loader.load()
        state.loader = loader
    finally:
        state.finish_loading()

    result = InitializeResult(server_info=ServerInfo(name=SERVER_NAME, version=__version__))
    return result.to_wire()


def handle_initialized(state: ServerState, params: Any) -> None:
    pass


def handle_shutdown(state: ServerState, params: Any) -> None:
    state.shutdown_requested = True
    logger.info("Shutdown requested")


def handle_exit(state: ServerState, params: Any) -> None:
    # The serving loop stops as soon as this notification has been handled.
    logger.info("Exit requested")


# ==============================================================================
# Document synchronization
# ==============================================================================

def handle_did_open(state: ServerState, params: Any) -> None:
    p = parse_params(DidOpenTextDocumentParams, params)
    state.documents.open(p.text_document.uri, p.text_document.text)


def handle_did_change(state: ServerState, params: Any) -> None:
    p = parse_params(DidChangeTextDocumentParams, params)
    if p.content_changes:
        # Full sync: the last change holds the whole document.
        state.documents.change(p.text_document.uri, p.content_changes[-1].text)


def handle_did_close(state: ServerState, params: Any) -> None:
    p = parse_params(DidCloseTextDocumentParams, params)
    state.documents.close(p.text_document.uri)


def handle_did_save(state: ServerState, params: Any) -> None:
    """Refresh cached text if sent, then rescan the file into the index."""
    p = parse_params(DidSaveTextDocumentParams, params)
    uri = p.text_document.uri
    if p.text is not None:
        state.documents.change(uri, p.text)

    state.wait_until_loaded()
    if not state.is_loaded:
        logger.debug(f"Ignoring save of {uri} before initialize")
        return
    try:
        state.loader.rescan_file(uri_to_path(uri))
    except ValueError:
        logger.debug(f"Not rescanning {uri}: outside workspace")


# ==============================================================================
# Queries
# ==============================================================================

def _completion_prefix(line: str, character: int) -> str:
    """Identifier run at the cursor, or ending right before it, else ''."""
    for offset in (character, character - 1):
        if offset < 0:
            continue
        try:
            return get_current_word(line, offset)
        except NoWordAtPosition:
            continue
    return ""


def handle_completion(state: ServerState, params: Any) -> Dict[str, Any]:
    """
    Complete the identifier at the cursor.

    Right after a literal '.', only functions and methods from files with the
    document's extension are offered. Otherwise text-category records and
    records from files with the document's extension are offered. Results are
    deduplicated by name, first match wins.
    """
    p = parse_params(TextDocumentPositionParams, params)
    state.wait_until_loaded()
    uri = p.text_document.uri
    lines = state.documents.get_or_load(uri)

    try:
        line = get_line(lines, p.position.line)
    except PositionOutOfRangeError:
        return CompletionList().to_wire()

    character = min(p.position.character, len(line))
    prefix = _completion_prefix(line, character)
    after_dot = character > 0 and line[character - 1] == "."
    extension = os.path.splitext(uri_to_path(uri))[1]

    items: List[CompletionItem] = []
    seen = set()
    for entry in state.index.find_by_prefix(prefix):
        kind = completion_kind(entry.kind)
        if after_dot:
            if kind not in CALLABLE_COMPLETION_KINDS or entry.extension != extension:
                continue
        elif kind != CompletionItemKind.TEXT and entry.extension != extension:
            continue
        if entry.name in seen:
            continue
        seen.add(entry.name)
        items.append(CompletionItem(
            label=entry.name,
            kind=kind,
            detail=f"{entry.path} ({entry.kind})",
            documentation=MarkupContent(value=entry.pattern),
        ))

    return CompletionList(is_incomplete=False, items=items).to_wire()


def _location_for(state: ServerState, entry: TagEntry) -> Location:
    """Location of a record, with the symbol located on its declaration line."""
    path = state.absolute(entry.path)
    line_number = entry.declaration_line
    try:
        lines = state.documents.get_or_load(path)
        span = find_symbol_range(lines, line_number, entry.name)
    except FileReadError as e:
        logger.warning(f"Using declared line for {entry.name}: {e}")
        span = TextRange.empty_at(max(line_number - 1, 0))
    return Location(uri=path_to_uri(path), range=Range.from_text_range(span))


def handle_definition(state: ServerState, params: Any) -> Optional[Any]:
    """
    Find declarations of the word at the cursor.

    Returns:
        None when nothing matches, a single Location for one match, or a
        list of Locations
    """
    p = parse_params(TextDocumentPositionParams, params)
    state.wait_until_loaded()
    lines = state.documents.get_or_load(p.text_document.uri)
    try:
        line = get_line(lines, p.position.line)
        word = get_current_word(line, p.position.character)
    except (NoWordAtPosition, PositionOutOfRangeError):
        return None

    locations = [_location_for(state, e).to_wire() for e in state.index.find_by_name(word)]
    if not locations:
        return None
    if len(locations) == 1:
        return locations[0]
    return locations


def _symbol_information(state: ServerState, entries: List[TagEntry]) -> List[Dict[str, Any]]:
    symbols = []
    for entry in entries:
        kind = symbol_kind(entry.kind)
        if kind is None:
            continue
        symbols.append(SymbolInformation(
            name=entry.name,
            kind=kind,
            location=_location_for(state, entry),
            container_name=entry.scope,
        ).to_wire())
    return symbols


def handle_workspace_symbol(state: ServerState, params: Any) -> List[Dict[str, Any]]:
    """Symbols whose name equals the query exactly."""
    p = parse_params(WorkspaceSymbolParams, params)
    state.wait_until_loaded()
    return _symbol_information(state, state.index.find_by_name(p.query))


def handle_document_symbol(state: ServerState, params: Any) -> List[Dict[str, Any]]:
    """Symbols declared in the requested document."""
    p = parse_params(DocumentSymbolParams, params)
    state.wait_until_loaded()
    target = canonical_path(p.text_document.uri)
    entries = state.index.filter(lambda e: state.absolute(e.path) == target)
    return _symbol_information(state, entries)


HANDLERS: Dict[str, Handler] = {
    "initialize": handle_initialize,
    "initialized": handle_initialized,
    "shutdown": handle_shutdown,
    "exit": handle_exit,
    "textDocument/didOpen": handle_did_open,
    "textDocument/didChange": handle_did_change,
    "textDocument/didClose": handle_did_close,
    "textDocument/didSave": handle_did_save,
    "textDocument/completion": handle_completion,
    "textDocument/definition": handle_definition,
    "workspace/symbol": handle_workspace_symbol,
    "textDocument/documentSymbol": handle_document_symbol,
}
