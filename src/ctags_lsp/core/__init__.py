"""
Core data models and helpers for ctags-lsp.

This module provides the canonical symbol record, the kind tables, the
exception hierarchy and the text/path helpers used throughout the server.
"""

from .models import TagEntry, TextRange, extract_line_from_pattern
from .kinds import CompletionItemKind, SymbolKind, completion_kind, symbol_kind
from .interfaces import ITagSource

__all__ = [
    "TagEntry",
    "TextRange",
    "extract_line_from_pattern",
    "CompletionItemKind",
    "SymbolKind",
    "completion_kind",
    "symbol_kind",
    "ITagSource",
]
