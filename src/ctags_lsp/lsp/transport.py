"""
LSP base-protocol framing over byte streams.

Each message is an ASCII header block followed by a UTF-8 JSON body::

    Content-Length: 52\\r\\n
    \\r\\n
    {"jsonrpc":"2.0","id":1,"method":"shutdown"}

Reading is strictly sequential: one message is fully framed before the next
one starts. Writing happens from worker threads, so MessageWriter serializes
whole messages under a lock.
"""

import json
import logging
import threading
from typing import Any, BinaryIO, Dict, Optional, Union

from pydantic import ValidationError

from ctags_lsp.core.exceptions import ProtocolFramingError, RequestDecodeError
from ctags_lsp.lsp.protocol import LspModel, RPCRequest

logger = logging.getLogger(__name__)

CONTENT_LENGTH = "content-length"


def encode_message(payload: Union[Dict[str, Any], LspModel]) -> bytes:
    """Frame a JSON payload with its Content-Length header."""
    if isinstance(payload, LspModel):
        payload = payload.to_wire()
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    header = f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
    return header + body


def decode_message(body: bytes) -> RPCRequest:
    """
    Decode a message body into a request envelope.

    Args:
        body: Raw body bytes

    Returns:
        The decoded request or notification

    Raises:
        RequestDecodeError: If the body is not a valid JSON-RPC request;
            ``request_id`` is set when the body carried a usable id
    """
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise RequestDecodeError(f"malformed JSON body: {e}") from e

    if not isinstance(data, dict):
        raise RequestDecodeError("body is not a JSON object")

    try:
        return RPCRequest.model_validate(data)
    except ValidationError as e:
        raise RequestDecodeError(str(e), request_id=_recover_id(data)) from e


def _recover_id(data: Dict[str, Any]) -> Optional[Union[int, str]]:
    request_id = data.get("id")
    if isinstance(request_id, bool):
        return None
    if isinstance(request_id, (int, str)):
        return request_id
    return None


class MessageReader:
    """
    Reads framed messages from a binary stream.

    Thread Safety:
        This class is NOT thread-safe. Only the serving loop reads.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def read_message(self) -> Optional[RPCRequest]:
        """
        Block until the next message is framed and decode it.

        Returns:
            The decoded request, or None on a clean end of stream

        Raises:
            ProtocolFramingError: If the header or body is malformed or cut
                short; the stream cannot be resynchronized after this
            RequestDecodeError: If the body is not a valid request
        """
        body = self.read_body()
        if body is None:
            return None
        return decode_message(body)

    def read_body(self) -> Optional[bytes]:
        """Frame the next message and return its raw body bytes."""
        headers = self._read_headers()
        if headers is None:
            return None

        raw_length = headers.get(CONTENT_LENGTH)
        if raw_length is None:
            raise ProtocolFramingError("missing Content-Length header")
        try:
            length = int(raw_length)
        except ValueError:
            raise ProtocolFramingError(f"invalid Content-Length: {raw_length!r}")
        if length < 0:
            raise ProtocolFramingError(f"invalid Content-Length: {length}")

        body = self._read_exact(length)
        if len(body) < length:
            raise ProtocolFramingError(
                f"truncated body: expected {length} bytes, got {len(body)}"
            )
        return body

    def _read_headers(self) -> Optional[Dict[str, str]]:
        headers: Dict[str, str] = {}
        while True:
            raw = self._stream.readline()
            if not raw:
                if headers:
                    raise ProtocolFramingError("unexpected end of stream in header block")
                return None
            try:
                line = raw.decode("ascii").strip()
            except UnicodeDecodeError:
                raise ProtocolFramingError(f"non-ASCII header line: {raw[:40]!r}")
            if not line:
                if headers:
                    return headers
                # Stray blank line between messages
                continue
            key, sep, value = line.partition(":")
            if not sep:
                raise ProtocolFramingError(f"malformed header line: {line!r}")
            headers[key.strip().lower()] = value.strip()

    def _read_exact(self, length: int) -> bytes:
        chunks = []
        remaining = length
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)


class MessageWriter:
    """
    Writes framed messages to a binary stream.

    Thread Safety:
        This class IS thread-safe. Each message is written and flushed
        atomically with respect to other writers.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._lock = threading.Lock()

    def write_message(self, payload: Union[Dict[str, Any], LspModel]) -> None:
        data = encode_message(payload)
        with self._lock:
            self._stream.write(data)
            self._stream.flush()
