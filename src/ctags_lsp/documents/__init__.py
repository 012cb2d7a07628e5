"""
Document content tracking for ctags-lsp.

- DocumentCache: open/change/close lifecycle plus lazy disk loads
- ReadWriteLock: shared/exclusive lock guarding the cache
"""

from ctags_lsp.documents.cache import DocumentCache, canonical_path
from ctags_lsp.documents.rwlock import ReadWriteLock

__all__ = [
    "DocumentCache",
    "canonical_path",
    "ReadWriteLock",
]
