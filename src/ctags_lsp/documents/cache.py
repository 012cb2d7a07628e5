"""
Document content cache.

Holds the current text of every document the editor has open, split into
lines, keyed by canonical absolute path. Documents that are not open are
loaded lazily from disk the first time a request needs them and then cached.

Only full-document sync is supported: didChange replaces the entry
wholesale. Entries are swapped as whole lists, so readers never observe a
partially replaced document.
"""

import logging
import os
from typing import Dict, List, Optional

from ctags_lsp.core.exceptions import FileReadError
from ctags_lsp.core.text import split_lines, uri_to_path
from ctags_lsp.documents.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


def canonical_path(uri_or_path: str) -> str:
    """Cache key for a document URI or filesystem path."""
    return os.path.abspath(uri_to_path(uri_or_path))


class DocumentCache:
    """
    Concurrent map from document path to its lines.

    Thread Safety:
        This class IS thread-safe. Lookups share a read lock; open, change,
        close and lazy-load inserts take the write lock. Disk reads happen
        outside the lock.
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._content: Dict[str, List[str]] = {}

    def open(self, uri: str, text: str) -> None:
        """Store a newly opened document, replacing any prior entry."""
        lines = split_lines(text)
        path = canonical_path(uri)
        with self._lock.write_locked():
            self._content[path] = lines
        logger.debug(f"Opened {path} ({len(lines)} lines)")

    def change(self, uri: str, text: str) -> None:
        """Replace a document with its full new text."""
        lines = split_lines(text)
        path = canonical_path(uri)
        with self._lock.write_locked():
            self._content[path] = lines

    def close(self, uri: str) -> None:
        """Forget a document. Closing an unknown document is a no-op."""
        path = canonical_path(uri)
        with self._lock.write_locked():
            self._content.pop(path, None)
        logger.debug(f"Closed {path}")

    def get(self, uri: str) -> Optional[List[str]]:
        """Return the cached lines for a document, or None."""
        path = canonical_path(uri)
        with self._lock.read_locked():
            return self._content.get(path)

    def get_or_load(self, uri: str) -> List[str]:
        """
        Return cached lines, loading the document from disk on a miss.

        Args:
            uri: Document URI or filesystem path

        Returns:
            The document's lines

        Raises:
            FileReadError: If the document is not cached and cannot be read
        """
        path = canonical_path(uri)
        with self._lock.read_locked():
            lines = self._content.get(path)
        if lines is not None:
            return lines

        try:
            with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
                text = f.read()
        except OSError as e:
            raise FileReadError(path, str(e)) from e

        loaded = split_lines(text)
        with self._lock.write_locked():
            # An open/change may have landed while we were reading.
            lines = self._content.setdefault(path, loaded)
        logger.debug(f"Loaded {path} from disk ({len(loaded)} lines)")
        return lines

    def __contains__(self, uri: str) -> bool:
        path = canonical_path(uri)
        with self._lock.read_locked():
            return path in self._content

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._content)
