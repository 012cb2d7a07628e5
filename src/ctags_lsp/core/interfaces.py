"""
Abstract interfaces for ctags-lsp components.

This module defines the contract shared by the two ingestion formats so the
loader can populate the symbol index without knowing where records came from.

When to implement each interface:
    - ITagSource: When adding a new way of obtaining symbol records
"""

from abc import ABC, abstractmethod
from typing import List
from .models import TagEntry


class ITagSource(ABC):
    """Abstract interface for symbol record sources.

    A tag source produces canonical TagEntry records for a whole workspace.
    Every record it returns must carry a workspace-relative path.

    Responsibilities:
        - Produce every record available for the workspace
        - Isolate per-line failures (log and skip, never abort the run)
        - Raise on failures that make the whole source unusable

    Implementations:
        - CtagsRunner: streams ``ctags --output-format=json`` output
        - TagfileSource: reads a legacy tagfile once, read-only

    Example implementation:
        >>> class StaticSource(ITagSource):
        ...     def __init__(self, entries):
        ...         self._entries = list(entries)
        ...
        ...     def load_workspace(self) -> List[TagEntry]:
        ...         return list(self._entries)
        ...
        ...     def describe(self) -> str:
        ...         return "static"
    """

    @abstractmethod
    def load_workspace(self) -> List[TagEntry]:
        """Produce all records for the workspace.

        Returns:
            Records in source order, paths workspace-relative

        Raises:
            ToolExecutionError: If an external tool fails
            OSError: If a source file cannot be read
        """
        pass  # pragma: no cover

    @abstractmethod
    def describe(self) -> str:
        """Return a short human-readable description used in log messages."""
        pass  # pragma: no cover
