"""Session state shared by every request handler."""
import os
import threading
from dataclasses import dataclass, field
from typing import Optional

from ctags_lsp.config import ServerConfig
from ctags_lsp.documents.cache import DocumentCache
from ctags_lsp.indexing.loader import IndexLoader
from ctags_lsp.indexing.symbol_index import SymbolIndex


def _set_event() -> threading.Event:
    event = threading.Event()
    event.set()
    return event


@dataclass
class ServerState:
    """
    State for one language server session, passed into every handler.

    Thread Safety:
        ``index_ready`` is cleared while ``initialize`` populates the index.
        Handlers that read the index wait on it; document synchronization
        does not.
    """
    config: ServerConfig = field(default_factory=ServerConfig)
    index: SymbolIndex = field(default_factory=SymbolIndex)
    documents: DocumentCache = field(default_factory=DocumentCache)
    root_path: Optional[str] = None
    loader: Optional[IndexLoader] = None
    shutdown_requested: bool = False
    index_ready: threading.Event = field(default_factory=_set_event)

    @property
    def is_loaded(self) -> bool:
        """Check if the workspace index has been populated."""
        return self.loader is not None

    def begin_loading(self) -> None:
        """Hold back index readers until finish_loading() is called."""
        self.index_ready.clear()

    def finish_loading(self) -> None:
        self.index_ready.set()

    def wait_until_loaded(self, timeout: Optional[float] = None) -> bool:
        """
        Block while an index load is in progress.

        Returns:
            False if the timeout expired first
        """
        return self.index_ready.wait(timeout)

    def absolute(self, relative_path: str) -> str:
        """Absolute path of a workspace-relative path."""
        return os.path.normpath(os.path.join(self.root_path or os.getcwd(), relative_path))
