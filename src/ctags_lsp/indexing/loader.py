"""
Index population: tagfile discovery, bulk load and per-file rescans.

At session start the loader picks one source for the whole workspace:

- an explicit tagfile override, or a well-known tagfile in the workspace
  root, read once and never written
- otherwise ``ctags -R`` over the workspace

After that the index only changes through rescan_file(), which is called
when a document is saved. Rescans always use ctags: a tagfile on disk does
not change when a buffer is saved.
"""

import logging
import os
import time
from typing import Dict, Optional, Tuple

from ctags_lsp.config import ServerConfig
from ctags_lsp.core.exceptions import ConfigurationError
from ctags_lsp.core.interfaces import ITagSource
from ctags_lsp.core.text import to_relative_path
from ctags_lsp.indexing.ctags_runner import CtagsRunner
from ctags_lsp.indexing.symbol_index import SymbolIndex
from ctags_lsp.indexing.tagfile_parser import TagfileSource

logger = logging.getLogger(__name__)


class IndexLoader:
    """
    Fills a SymbolIndex for one workspace.

    Attributes:
        root: Absolute workspace root
        config: Server configuration
        index: Index being populated
        runner: ctags runner used for recursive scans and rescans
    """

    def __init__(self, root: str, config: ServerConfig, index: SymbolIndex):
        self.root = os.path.abspath(root)
        self.config = config
        self.index = index
        self.runner = CtagsRunner(self.root, ctags_bin=config.ctags_bin)

        # Statistics
        self.stats: Dict[str, object] = {
            'source': None,
            'total_symbols': 0,
            'indexing_time': 0.0,
        }

    def find_tagfile(self) -> Optional[str]:
        """
        Locate the tagfile to read, if any.

        Returns:
            Absolute tagfile path, or None to fall back to running ctags

        Raises:
            ConfigurationError: If an explicit override does not exist
        """
        if self.config.tagfile:
            path = self.config.tagfile
            if not os.path.isabs(path):
                path = os.path.join(self.root, path)
            if not os.path.isfile(path):
                raise ConfigurationError(f"Configured tagfile not found: {path}")
            return path

        for name in self.config.tagfile_names:
            candidate = os.path.join(self.root, name)
            if os.path.isfile(candidate):
                return candidate
        return None

    def select_source(self) -> ITagSource:
        tagfile = self.find_tagfile()
        if tagfile:
            return TagfileSource(tagfile, self.root)
        return self.runner

    def load(self) -> int:
        """
        Bulk-load the workspace into the index.

        Returns:
            Number of records added

        Raises:
            ToolExecutionError: If ctags fails
            ConfigurationError: If the tagfile override is missing
            OSError: If the tagfile cannot be read
        """
        start_time = time.time()
        source = self.select_source()
        logger.info(f"Loading tags from {source.describe()}")

        entries = source.load_workspace()
        added = self.index.add_all(entries)

        self.stats['source'] = source.describe()
        self.stats['total_symbols'] = added
        self.stats['indexing_time'] = time.time() - start_time
        logger.info(f"Indexed {added} tags in {self.stats['indexing_time']:.2f}s")
        return added

    def rescan_file(self, path: str) -> Tuple[int, int]:
        """
        Re-index one file and swap its records into the index.

        ctags runs without holding the index lock; only the final
        replacement is atomic.

        Args:
            path: Absolute path of the saved file

        Returns:
            Tuple of (records_removed, records_added)

        Raises:
            ValueError: If the file is outside the workspace root
            ToolExecutionError: If ctags fails
        """
        relative = to_relative_path(self.root, path)
        entries = [e for e in self.runner.scan_file(relative) if e.path == relative]
        removed = self.index.replace_file(relative, entries)
        logger.info(f"Rescanned {relative}: -{removed} +{len(entries)} tags")
        return removed, len(entries)
