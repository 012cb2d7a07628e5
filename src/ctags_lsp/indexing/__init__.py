"""
ctags-lsp Indexing Module.

This module builds and maintains the in-memory symbol index:
- SymbolIndex: thread-safe record store with per-file replacement
- CtagsRunner: streaming ``ctags --output-format=json`` ingestion
- parse_tagfile: legacy tagfile ingestion
- IndexLoader: source selection, bulk load and per-file rescans

Usage:
    from ctags_lsp.indexing import IndexLoader, SymbolIndex

    index = SymbolIndex()
    loader = IndexLoader("/path/to/code", ServerConfig(), index)
    loader.load()
    index.find_by_name("main")
"""

from ctags_lsp.indexing.symbol_index import SymbolIndex

from ctags_lsp.indexing.ctags_runner import (
    CtagsRunner,
    parse_json_line,
    parse_json_lines,
)

from ctags_lsp.indexing.tagfile_parser import (
    TagfileKindMap,
    TagfileSource,
    parse_tagfile,
    parse_tag_line,
)

from ctags_lsp.indexing.loader import IndexLoader

__all__ = [
    'SymbolIndex',
    # Streaming JSON
    'CtagsRunner',
    'parse_json_line',
    'parse_json_lines',
    # Legacy tagfile
    'TagfileKindMap',
    'TagfileSource',
    'parse_tagfile',
    'parse_tag_line',
    # Orchestration
    'IndexLoader',
]
