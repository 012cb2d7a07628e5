"""Test request routing, error mapping and per-document ordering."""
import threading
import time
from unittest.mock import MagicMock

import pytest
from ctags_lsp.core.exceptions import RequestDecodeError, ToolExecutionError
from ctags_lsp.lsp.dispatcher import Dispatcher, document_key
from ctags_lsp.lsp.protocol import ErrorCode, RPCRequest
from ctags_lsp.lsp.state import ServerState


def request(method, params=None, request_id=None):
    return RPCRequest(id=request_id, method=method, params=params)


@pytest.fixture
def writer():
    return MagicMock()


@pytest.fixture
def dispatcher(loaded_state, writer):
    dispatcher = Dispatcher(loaded_state, writer, max_workers=4)
    yield dispatcher
    dispatcher.shutdown(wait=True)


class TestHandle:

    def test_success(self, dispatcher, writer):
        response = dispatcher.run(request("workspace/symbol", {"query": "greet_all"}, 1))

        assert response.error is None
        assert response.result[0]["name"] == "greet_all"
        writer.write_message.assert_called_once_with(response)

    def test_null_result_stays_on_the_wire(self, dispatcher):
        response = dispatcher.run(request("shutdown", None, 2))
        assert response.to_wire() == {"jsonrpc": "2.0", "id": 2, "result": None}

    def test_method_not_found(self, dispatcher):
        response = dispatcher.run(request("textDocument/hover", {}, 3))

        assert response.error.code == ErrorCode.METHOD_NOT_FOUND
        assert response.to_wire()["error"] == {"code": -32601, "message": "Method not found"}

    def test_unknown_notification_is_silent(self, dispatcher, writer):
        assert dispatcher.run(request("$/cancelRequest", {"id": 1})) is None
        writer.write_message.assert_not_called()

    def test_invalid_params(self, dispatcher):
        response = dispatcher.run(request("textDocument/completion", {"position": {}}, 4))

        assert response.error.code == ErrorCode.INVALID_PARAMS
        assert response.error.message == "Invalid params"

    def test_negative_position_is_invalid(self, dispatcher, loaded_state):
        params = {"textDocument": {"uri": "file:///x.py"}, "position": {"line": -1, "character": 0}}
        assert dispatcher.run(request("textDocument/definition", params, 5)).error.code == -32602

    def test_tool_failure_is_internal_error(self, loaded_state, writer):
        def failing(state, params):
            raise ToolExecutionError(["ctags", "-R"], "exited with status 1", 1, "boom")

        dispatcher = Dispatcher(loaded_state, writer, handlers={"initialize": failing})
        try:
            response = dispatcher.run(request("initialize", {}, 6))
        finally:
            dispatcher.shutdown()

        assert response.error.code == ErrorCode.INTERNAL_ERROR
        assert response.error.message == "Internal error"
        assert "boom" in response.error.data

    def test_unexpected_exception_is_internal_error(self, loaded_state, writer):
        def broken(state, params):
            raise KeyError("oops")

        dispatcher = Dispatcher(loaded_state, writer, handlers={"workspace/symbol": broken})
        try:
            response = dispatcher.run(request("workspace/symbol", {}, 7))
        finally:
            dispatcher.shutdown()

        assert response.error.code == ErrorCode.INTERNAL_ERROR

    def test_failing_notification_is_silent(self, dispatcher, writer):
        assert dispatcher.run(request("textDocument/didOpen", {"textDocument": {}})) is None
        writer.write_message.assert_not_called()

    def test_notification_result_discarded(self, dispatcher, writer):
        assert dispatcher.run(request("initialized", {})) is None
        writer.write_message.assert_not_called()

    def test_write_failure_is_logged(self, dispatcher, writer):
        writer.write_message.side_effect = BrokenPipeError()
        response = dispatcher.run(request("shutdown", None, 8))

        assert response.result is None


class TestDecodeErrors:

    def test_recovered_id_gets_invalid_params(self, dispatcher, writer):
        dispatcher.report_decode_error(RequestDecodeError("missing method", request_id=9))

        response = writer.write_message.call_args.args[0]
        assert response.id == 9
        assert response.error.code == ErrorCode.INVALID_PARAMS

    def test_unrecoverable_id_dropped(self, dispatcher, writer):
        dispatcher.report_decode_error(RequestDecodeError("malformed JSON body"))
        writer.write_message.assert_not_called()


class TestDispatch:

    def test_runs_on_worker_pool(self, dispatcher, writer):
        future = dispatcher.dispatch(request("workspace/symbol", {"query": "Greeter"}, 10))

        response = future.result(timeout=5)
        assert len(response.result) == 2
        writer.write_message.assert_called_once_with(response)

    def test_same_document_runs_in_order(self, loaded_state, writer):
        order = []

        def slow(state, params):
            time.sleep(0.1)
            order.append("slow")

        def fast(state, params):
            order.append("fast")

        dispatcher = Dispatcher(loaded_state, writer, handlers={"slow": slow, "fast": fast}, max_workers=4)
        params = {"textDocument": {"uri": "file:///a.py"}}
        try:
            first = dispatcher.dispatch(request("slow", params))
            second = dispatcher.dispatch(request("fast", params))
            second.result(timeout=5)
            first.result(timeout=5)
        finally:
            dispatcher.shutdown(wait=True)

        assert order == ["slow", "fast"]

    def test_different_documents_run_concurrently(self, loaded_state, writer):
        order = []
        released = threading.Event()

        def blocking(state, params):
            released.wait(timeout=5)
            order.append("blocking")

        def quick(state, params):
            order.append("quick")
            released.set()

        dispatcher = Dispatcher(loaded_state, writer, handlers={"blocking": blocking, "quick": quick}, max_workers=4)
        try:
            first = dispatcher.dispatch(request("blocking", {"textDocument": {"uri": "file:///a.py"}}))
            second = dispatcher.dispatch(request("quick", {"textDocument": {"uri": "file:///b.py"}}))
            first.result(timeout=5)
            second.result(timeout=5)
        finally:
            dispatcher.shutdown(wait=True)

        assert order == ["quick", "blocking"]

    def test_open_then_complete(self, dispatcher, tagged_workspace):
        uri = (tagged_workspace / "src" / "app.py").as_uri()
        dispatcher.dispatch(request("textDocument/didOpen", {
            "textDocument": {"uri": uri, "languageId": "python", "version": 1, "text": "greet_a"},
        }))
        future = dispatcher.dispatch(request("textDocument/completion", {
            "textDocument": {"uri": uri}, "position": {"line": 0, "character": 7},
        }, 11))

        assert [i["label"] for i in future.result(timeout=5).result["items"]] == ["greet_all"]


@pytest.mark.parametrize("params,expected", [
    ({"textDocument": {"uri": "file:///a.py"}}, "file:///a.py"),
    ({"query": "x"}, None),
    ({"textDocument": "nope"}, None),
    (None, None),
    ([1, 2], None),
])
def test_document_key(params, expected):
    assert document_key(params) == expected


def test_shutdown_without_waiting_cancels_queued(writer):
    gate = threading.Event()
    started = threading.Event()

    def block(state, params):
        started.set()
        gate.wait(timeout=5)

    dispatcher = Dispatcher(ServerState(), writer, handlers={"block": block}, max_workers=1)

    running = dispatcher.dispatch(request("block", {}))
    assert started.wait(timeout=5)
    queued = dispatcher.dispatch(request("block", {}))
    dispatcher.shutdown(wait=False)
    gate.set()

    assert queued.cancelled()
    running.result(timeout=5)


class TestIndexLoading:

    def test_document_sync_not_held_back(self, dispatcher, loaded_state, tagged_workspace):
        uri = (tagged_workspace / "src" / "app.py").as_uri()
        loaded_state.begin_loading()
        try:
            future = dispatcher.dispatch(request("textDocument/didOpen", {
                "textDocument": {"uri": uri, "languageId": "python", "version": 1, "text": "greet_a"},
            }))
            future.result(timeout=5)
            assert loaded_state.documents.get_or_load(uri) == ["greet_a"]
        finally:
            loaded_state.finish_loading()

    def test_queries_wait_for_loading(self, dispatcher, loaded_state):
        loaded_state.begin_loading()
        try:
            future = dispatcher.dispatch(request("workspace/symbol", {"query": "Greeter"}, 12))
            time.sleep(0.2)
            assert not future.done()
        finally:
            loaded_state.finish_loading()

        assert len(future.result(timeout=5).result) == 2

    def test_shutdown_not_held_back(self, dispatcher, loaded_state):
        loaded_state.begin_loading()
        try:
            response = dispatcher.dispatch(request("shutdown", None, 13)).result(timeout=5)
        finally:
            loaded_state.finish_loading()

        assert response.result is None
        assert loaded_state.shutdown_requested
