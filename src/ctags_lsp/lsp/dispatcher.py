"""
Request dispatch onto a worker pool.

Each decoded message is routed by method name through a fixed handler table
and executed on a ThreadPoolExecutor, so a slow request never blocks the
reader. Requests that name the same document run in arrival order; requests
for different documents (and document-less requests) run concurrently and may
respond in any order.

Error mapping:
    unknown method              -> -32601 Method not found (requests only)
    params fail validation      -> -32602 Invalid params
    handler raises              -> -32603 Internal error, ``data`` = message

Notifications never produce a response, not even an error.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ctags_lsp.core.exceptions import CtagsLspException, RequestDecodeError
from ctags_lsp.lsp.handlers import HANDLERS, Handler
from ctags_lsp.lsp.protocol import ErrorCode, RPCRequest, RPCResponse
from ctags_lsp.lsp.state import ServerState
from ctags_lsp.lsp.transport import MessageWriter

logger = logging.getLogger(__name__)


def document_key(params: Any) -> Optional[str]:
    """URI of the document a request targets, or None."""
    if not isinstance(params, dict):
        return None
    text_document = params.get("textDocument")
    if not isinstance(text_document, dict):
        return None
    uri = text_document.get("uri")
    return uri if isinstance(uri, str) else None


class Dispatcher:
    """
    Routes requests to handlers and writes their responses.

    Thread Safety:
        dispatch() is called from the serving loop only. Handlers run on
        worker threads and share ``state``; responses go through the
        thread-safe MessageWriter.

    Attributes:
        state: Session state handed to every handler
        writer: Destination for responses
        handlers: Method name to handler table
    """

    def __init__(
        self,
        state: ServerState,
        writer: MessageWriter,
        handlers: Optional[Dict[str, Handler]] = None,
        max_workers: Optional[int] = None,
    ):
        self.state = state
        self.writer = writer
        self.handlers = dict(handlers if handlers is not None else HANDLERS)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="ctags-lsp",
        )
        # Last submitted task per document URI
        self._tails: Dict[str, Future] = {}
        self._tails_lock = threading.Lock()

    def dispatch(self, request: RPCRequest) -> Future:
        """
        Schedule a request on the worker pool.

        Returns:
            Future resolving to the response sent, or None for notifications
        """
        key = document_key(request.params)
        if key is None:
            return self._executor.submit(self.run, request)

        with self._tails_lock:
            previous = self._tails.get(key)
            future = self._executor.submit(self._run_after, previous, request)
            self._tails[key] = future
        future.add_done_callback(lambda f: self._release_tail(key, f))
        return future

    def _run_after(self, previous: Optional[Future], request: RPCRequest) -> Optional[RPCResponse]:
        # The pool queue is FIFO, so ``previous`` has already been picked up
        # by a worker when this task starts.
        if previous is not None:
            wait_for([previous])
        return self.run(request)

    def _release_tail(self, key: str, future: Future) -> None:
        with self._tails_lock:
            if self._tails.get(key) is future:
                del self._tails[key]

    def run(self, request: RPCRequest) -> Optional[RPCResponse]:
        """Handle a request on the calling thread and write its response."""
        response = self.handle(request)
        if response is not None:
            try:
                self.writer.write_message(response)
            except OSError as e:
                logger.error(f"Failed to write response to {request.method}: {e}")
        return response

    def handle(self, request: RPCRequest) -> Optional[RPCResponse]:
        """
        Execute the handler for a request.

        Returns:
            The response to send, or None for notifications
        """
        handler = self.handlers.get(request.method)
        if handler is None:
            if request.is_notification:
                logger.debug(f"Ignoring unknown notification {request.method}")
                return None
            logger.warning(f"Method not found: {request.method}")
            return RPCResponse.failure(request.id, ErrorCode.METHOD_NOT_FOUND, "Method not found")

        try:
            result = handler(self.state, request.params)
        except ValidationError as e:
            return self._failure(request, ErrorCode.INVALID_PARAMS, "Invalid params", str(e))
        except CtagsLspException as e:
            logger.error(f"{request.method} failed: {e}")
            return self._failure(request, ErrorCode.INTERNAL_ERROR, "Internal error", str(e))
        except Exception as e:
            logger.exception(f"Unexpected error in {request.method}")
            return self._failure(request, ErrorCode.INTERNAL_ERROR, "Internal error", str(e))

        if request.is_notification:
            return None
        return RPCResponse.success(request.id, result)

    def _failure(
        self,
        request: RPCRequest,
        code: ErrorCode,
        message: str,
        data: str,
    ) -> Optional[RPCResponse]:
        if request.is_notification:
            logger.warning(f"Notification {request.method} failed: {data}")
            return None
        return RPCResponse.failure(request.id, code, message, data)

    def report_decode_error(self, error: RequestDecodeError) -> None:
        """Answer an undecodable body when its id could be recovered."""
        if error.request_id is None:
            logger.warning(f"Dropping undecodable message: {error.details}")
            return
        response = RPCResponse.failure(
            error.request_id, ErrorCode.INVALID_PARAMS, "Invalid params", error.details
        )
        self.writer.write_message(response)

    def shutdown(self, wait: bool = False) -> None:
        """
        Stop the worker pool.

        Args:
            wait: Block until in-flight and queued requests finish; when
                False, queued requests are cancelled and running ones are
                abandoned
        """
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
