"""
LSP server module for ctags-lsp.

This module provides the stdio transport, the wire models, the request
handlers and the serving loop.

Exports:
    - LanguageServer: One session over a pair of byte streams
    - main: Entry point for the ``ctags-lsp`` command
    - ServerState: Session state dataclass
    - Dispatcher: Handler table and worker pool
"""

from ctags_lsp.lsp.state import ServerState
from ctags_lsp.lsp.dispatcher import Dispatcher
from ctags_lsp.lsp.server import LanguageServer, main

__all__ = [
    "LanguageServer",
    "main",
    "ServerState",
    "Dispatcher",
]
