"""
ctags-lsp Language Server.

Serves the Language Server Protocol over stdin/stdout, answering completion,
definition and symbol queries from a ctags index of the workspace.

Usage:
    ctags-lsp [--tagfile PATH] [--ctags-bin PATH] [--log-level LEVEL]
    python -m ctags_lsp

Standard output carries protocol messages only; all logging goes to stderr.
"""

import argparse
import logging
import os
import sys
from typing import BinaryIO, List, Optional

from pydantic import ValidationError

from ctags_lsp import __version__
from ctags_lsp.config import ServerConfig
from ctags_lsp.core.exceptions import ProtocolFramingError, RequestDecodeError
from ctags_lsp.lsp.dispatcher import Dispatcher
from ctags_lsp.lsp.state import ServerState
from ctags_lsp.lsp.transport import MessageReader, MessageWriter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Requests that repopulate the index; readers wait for them to finish
LOADING_METHODS = ("initialize",)


class LanguageServer:
    """
    One language server session over a pair of byte streams.

    The serving loop reads and frames messages sequentially and hands each
    one to the Dispatcher's worker pool. ``initialize`` runs on the pool
    too; index queries that arrive while it loads wait for it, while document
    synchronization and ``exit`` do not. ``exit`` runs inline and ends the
    loop immediately.

    Attributes:
        state: Session state shared by all handlers
        reader: Framed message reader
        writer: Framed message writer
        dispatcher: Request router and worker pool
    """

    def __init__(
        self,
        stdin: BinaryIO,
        stdout: BinaryIO,
        config: Optional[ServerConfig] = None,
    ):
        self.state = ServerState(config=config or ServerConfig())
        self.reader = MessageReader(stdin)
        self.writer = MessageWriter(stdout)
        self.dispatcher = Dispatcher(
            self.state,
            self.writer,
            max_workers=self.state.config.max_workers,
        )

    def serve(self) -> int:
        """
        Run the serving loop until ``exit``, end of input or a framing error.

        On ``exit`` queued requests are cancelled; on end of input they are
        allowed to finish first.

        Returns:
            Process exit code: 0 if shutdown was requested before the session
            ended, 1 otherwise
        """
        logger.info(f"ctags-lsp {__version__} listening on stdio")
        try:
            while True:
                try:
                    request = self.reader.read_message()
                except RequestDecodeError as e:
                    self.dispatcher.report_decode_error(e)
                    continue

                if request is None:
                    logger.info("Input closed")
                    self.dispatcher.shutdown(wait=True)
                    return self._exit_code()

                if request.method == "exit":
                    self.dispatcher.run(request)
                    return self._exit_code()

                if request.method in LOADING_METHODS:
                    # Cleared here, before any later request can be picked up
                    self.state.begin_loading()

                self.dispatcher.dispatch(request)
        except ProtocolFramingError as e:
            logger.error(f"Stopping: {e}")
            return 1
        finally:
            self.dispatcher.shutdown(wait=False)

    def _exit_code(self) -> int:
        return 0 if self.state.shutdown_requested else 1


def configure_logging(level: str = "INFO") -> None:
    """Send all log output to stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctags-lsp",
        description="Language server backed by universal-ctags",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--tagfile", help="read this tagfile instead of running ctags")
    parser.add_argument("--ctags-bin", help="ctags executable (default: ctags)")
    parser.add_argument("--log-level", help="logging level (default: INFO)")
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Build the configuration, letting explicit flags win over the environment."""
    overrides = {}
    if args.tagfile:
        overrides["tagfile"] = args.tagfile
    if args.ctags_bin:
        overrides["ctags_bin"] = args.ctags_bin
    if args.log_level:
        overrides["log_level"] = args.log_level
    return ServerConfig(**overrides)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``ctags-lsp`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except ValidationError as e:
        parser.error(str(e))
    configure_logging(config.log_level)

    server = LanguageServer(sys.stdin.buffer, sys.stdout.buffer, config)
    code = server.serve()

    logging.shutdown()
    sys.stdout.flush()
    # Abandoned workers may still be running; do not join them.
    os._exit(code)


if __name__ == "__main__":
    main()
