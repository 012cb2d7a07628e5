"""
ctags-lsp - Language Server Protocol server backed by universal-ctags.

A lightweight language server that indexes a workspace with ctags (or reads
an existing tagfile) and answers completion, go-to-definition and symbol
queries for any language ctags understands.

Usage:
    # As a language server over stdio
    python -m ctags_lsp

    # Programmatic usage
    from ctags_lsp import SymbolIndex, parse_tagfile
    index = SymbolIndex(parse_tagfile("/path/to/code/tags", "/path/to/code"))
    index.find_by_prefix("get")
"""

__version__ = "0.1.0"
__author__ = "ctags-lsp Contributors"


# Lazy imports keep `--version` and test collection cheap
def __getattr__(name: str):
    """Lazy import modules only when accessed."""
    if name == "TagEntry":
        from ctags_lsp.core.models import TagEntry

        return TagEntry
    elif name == "SymbolIndex":
        from ctags_lsp.indexing.symbol_index import SymbolIndex

        return SymbolIndex
    elif name == "CtagsRunner":
        from ctags_lsp.indexing.ctags_runner import CtagsRunner

        return CtagsRunner
    elif name == "parse_tagfile":
        from ctags_lsp.indexing.tagfile_parser import parse_tagfile

        return parse_tagfile
    elif name == "DocumentCache":
        from ctags_lsp.documents.cache import DocumentCache

        return DocumentCache
    elif name == "ServerState":
        from ctags_lsp.lsp.state import ServerState

        return ServerState
    elif name == "LanguageServer":
        from ctags_lsp.lsp.server import LanguageServer

        return LanguageServer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "__author__",
    "TagEntry",
    "SymbolIndex",
    "CtagsRunner",
    "parse_tagfile",
    "DocumentCache",
    "ServerState",
    "LanguageServer",
]
