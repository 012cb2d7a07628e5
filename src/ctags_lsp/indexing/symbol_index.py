"""
In-memory symbol index.

The index is an insertion-ordered list of TagEntry records. It is populated
once in bulk when the session starts and afterwards only changes through
per-file replacement when a document is saved and rescanned.

Matching is exact or simple-prefix only; there is no ranking and no
deduplication here (callers deduplicate by name when they need to).

Usage:
    >>> index = SymbolIndex()
    >>> index.add_all(entries)
    >>> index.replace_file("lib/a.rb", rescanned)
    >>> index.find_by_name("initialize")
"""

import logging
import threading
from typing import Callable, Dict, Iterable, List

from ctags_lsp.core.models import TagEntry

logger = logging.getLogger(__name__)


class SymbolIndex:
    """
    Thread-safe, append-mostly collection of symbol records.

    Every scan runs under the index lock and returns a fresh list, so callers
    never hold the lock while they do I/O with the results.

    Thread Safety:
        This class IS thread-safe. A single lock serializes bulk loads,
        per-file replacement and scans.
    """

    def __init__(self, entries: Iterable[TagEntry] = ()):
        self._lock = threading.Lock()
        self._entries: List[TagEntry] = list(entries)

    def add_all(self, entries: Iterable[TagEntry]) -> int:
        """
        Append records in order.

        Args:
            entries: Records to append

        Returns:
            Number of records appended
        """
        batch = list(entries)
        with self._lock:
            self._entries.extend(batch)
        return len(batch)

    def replace_file(self, path: str, entries: Iterable[TagEntry]) -> int:
        """
        Atomically swap all records for one file.

        Records whose path equals ``path`` exactly are removed and the new
        records are appended. Readers see either the old or the new set,
        never neither.

        Args:
            path: Workspace-relative path being replaced
            entries: Freshly ingested records for that path

        Returns:
            Number of records removed
        """
        batch = list(entries)
        with self._lock:
            kept = [e for e in self._entries if e.path != path]
            removed = len(self._entries) - len(kept)
            kept.extend(batch)
            self._entries = kept
        logger.debug(f"Replaced {removed} records for {path} with {len(batch)}")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def snapshot(self) -> List[TagEntry]:
        """Copy of all records in insertion order."""
        with self._lock:
            return list(self._entries)

    def filter(self, predicate: Callable[[TagEntry], bool]) -> List[TagEntry]:
        """Records matching ``predicate``, in insertion order."""
        with self._lock:
            return [e for e in self._entries if predicate(e)]

    def find_by_name(self, name: str) -> List[TagEntry]:
        """Records whose name equals ``name`` exactly."""
        return self.filter(lambda e: e.name == name)

    def find_by_prefix(self, prefix: str) -> List[TagEntry]:
        """Records whose name starts with ``prefix``, ignoring case."""
        folded = prefix.lower()
        return self.filter(lambda e: e.name.lower().startswith(folded))

    def find_by_path(self, path: str) -> List[TagEntry]:
        """Records declared in the workspace-relative ``path``."""
        return self.filter(lambda e: e.path == path)

    def get_stats(self) -> Dict[str, int]:
        """Record and file counts."""
        with self._lock:
            return {
                'total_symbols': len(self._entries),
                'total_files': len({e.path for e in self._entries}),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
