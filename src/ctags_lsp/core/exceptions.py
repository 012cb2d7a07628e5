"""Custom exceptions for ctags-lsp.

This module defines the exception hierarchy used by the transport, the
ingestion pipeline and the request handlers. Where an exception is caught
decides its blast radius:

- ProtocolFramingError stops the serving loop.
- ToolExecutionError fails ``initialize`` (reported as an internal error).
- RequestDecodeError and FileReadError are confined to one request.
- RecordDecodeError is logged and the offending line skipped.
- NoWordAtPosition and PositionOutOfRangeError turn into empty results.

Usage:
    from ctags_lsp.core.exceptions import FileReadError

    try:
        lines = documents.get_or_load(path)
    except FileReadError as e:
        logger.warning("Cannot read %s: %s", e.path, e.details)
"""

from typing import Any, List, Optional


class CtagsLspException(Exception):
    """Base exception for all ctags-lsp operations.

    All custom exceptions inherit from this class, allowing for broad
    exception catching when needed.
    """
    pass


class ProtocolFramingError(CtagsLspException):
    """Raised when a message header or body cannot be framed.

    Framing state cannot be recovered mid-stream, so the serving loop
    stops when this is raised.
    """
    pass


class RequestDecodeError(CtagsLspException):
    """Raised when a framed body is not a valid JSON-RPC request.

    Attributes:
        request_id: Identifier recovered from the body, or None
        details: Specific error details
    """

    def __init__(self, details: str, request_id: Any = None):
        self.request_id = request_id
        self.details = details
        super().__init__(f"Invalid request: {details}")


class ToolExecutionError(CtagsLspException):
    """Raised when the ctags subprocess cannot run or exits nonzero.

    Attributes:
        command: Command line that was executed
        returncode: Exit status, None if the process never started
        stderr: Captured standard error output
    """

    def __init__(
        self,
        command: List[str],
        details: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"{' '.join(command)}: {details}"
        if stderr:
            message += f" ({stderr.strip()})"
        super().__init__(message)


class RecordDecodeError(CtagsLspException):
    """Raised when one line of ctags output cannot be decoded.

    Attributes:
        line: The offending raw line
        details: Specific error details
    """

    def __init__(self, line: str, details: str):
        self.line = line
        self.details = details
        super().__init__(f"Cannot decode tag record {line[:80]!r}: {details}")


class FileReadError(CtagsLspException):
    """Raised when a document cannot be loaded from disk.

    Attributes:
        path: Absolute path of the document
        details: Specific error details
    """

    def __init__(self, path: str, details: str):
        self.path = path
        self.details = details
        super().__init__(f"Failed to read {path}: {details}")


class PositionOutOfRangeError(CtagsLspException):
    """Raised when a cursor position lies outside the document."""
    pass


class NoWordAtPosition(CtagsLspException):
    """Raised when no identifier touches the cursor position."""
    pass


class ConfigurationError(CtagsLspException):
    """Raised when configuration is invalid.

    This covers failures related to:
    - Invalid initializationOptions sent by the client
    - Invalid environment overrides
    - A tagfile override that does not exist
    """
    pass
