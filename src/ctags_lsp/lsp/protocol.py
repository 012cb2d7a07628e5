"""
Wire models for the JSON-RPC envelope and the LSP messages ctags-lsp speaks.

Field names are snake_case in Python and camelCase on the wire; every model
accepts either when validating and emits camelCase via to_wire().
Unknown fields sent by clients are ignored.
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ctags_lsp.core.kinds import CompletionItemKind, SymbolKind
from ctags_lsp.core.models import TextRange

JSONRPC_VERSION = "2.0"

RequestId = Union[int, str]

M = TypeVar("M", bound="LspModel")


class ErrorCode(IntEnum):
    """JSON-RPC error codes used in responses."""
    INVALID_PARAMS = -32602
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


class LspModel(BaseModel):
    """Base for all wire models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_params(model: Type[M], params: Any) -> M:
    """
    Validate request params against ``model``.

    Raises:
        pydantic.ValidationError: If params do not match
    """
    return model.model_validate(params if params is not None else {})


# ==============================================================================
# Envelope
# ==============================================================================

class RPCRequest(LspModel):
    """A JSON-RPC request, or a notification when ``id`` is None."""
    jsonrpc: str = JSONRPC_VERSION
    id: Optional[RequestId] = None
    method: str
    params: Optional[Any] = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class RPCError(LspModel):
    code: int
    message: str
    data: Optional[Any] = None


class RPCResponse(LspModel):
    """A JSON-RPC response carrying either ``result`` or ``error``."""
    jsonrpc: str = JSONRPC_VERSION
    id: Optional[RequestId] = None
    result: Optional[Any] = None
    error: Optional[RPCError] = None

    def to_wire(self) -> Dict[str, Any]:
        # "result": null must stay on the wire for successful responses.
        payload: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.to_wire()
        else:
            payload["result"] = self.result
        return payload

    @classmethod
    def success(cls, request_id: Optional[RequestId], result: Any) -> "RPCResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: Optional[RequestId],
        code: int,
        message: str,
        data: Any = None,
    ) -> "RPCResponse":
        return cls(id=request_id, error=RPCError(code=code, message=message, data=data))


# ==============================================================================
# Common structures
# ==============================================================================

class Position(LspModel):
    line: int = Field(ge=0)
    character: int = Field(ge=0)


class Range(LspModel):
    start: Position
    end: Position

    @classmethod
    def from_text_range(cls, span: TextRange) -> "Range":
        return cls(
            start=Position(line=span.start_line, character=span.start_character),
            end=Position(line=span.end_line, character=span.end_character),
        )


class Location(LspModel):
    uri: str
    range: Range


class TextDocumentIdentifier(LspModel):
    uri: str
    version: Optional[int] = None


class TextDocumentItem(LspModel):
    uri: str
    language_id: str = ""
    version: int = 0
    text: str


class TextDocumentContentChangeEvent(LspModel):
    text: str
    range: Optional[Range] = None


class TextDocumentPositionParams(LspModel):
    text_document: TextDocumentIdentifier
    position: Position


# ==============================================================================
# Lifecycle
# ==============================================================================

class InitializeParams(LspModel):
    process_id: Optional[int] = None
    root_uri: Optional[str] = None
    root_path: Optional[str] = None
    initialization_options: Optional[Any] = None


class TextDocumentSyncOptions(LspModel):
    open_close: bool = True
    change: int = 1  # Full synchronization
    save: Dict[str, bool] = Field(default_factory=lambda: {"includeText": False})


class CompletionOptions(LspModel):
    trigger_characters: List[str] = Field(default_factory=lambda: [".", ":", ">", "\""])


class ServerCapabilities(LspModel):
    text_document_sync: TextDocumentSyncOptions = Field(default_factory=TextDocumentSyncOptions)
    completion_provider: CompletionOptions = Field(default_factory=CompletionOptions)
    definition_provider: bool = True
    workspace_symbol_provider: bool = True
    document_symbol_provider: bool = True


class ServerInfo(LspModel):
    name: str
    version: Optional[str] = None


class InitializeResult(LspModel):
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)
    server_info: Optional[ServerInfo] = None


# ==============================================================================
# Document synchronization
# ==============================================================================

class DidOpenTextDocumentParams(LspModel):
    text_document: TextDocumentItem


class DidChangeTextDocumentParams(LspModel):
    text_document: TextDocumentIdentifier
    content_changes: List[TextDocumentContentChangeEvent] = Field(default_factory=list)


class DidCloseTextDocumentParams(LspModel):
    text_document: TextDocumentIdentifier


class DidSaveTextDocumentParams(LspModel):
    text_document: TextDocumentIdentifier
    text: Optional[str] = None


# ==============================================================================
# Queries
# ==============================================================================

class MarkupContent(LspModel):
    kind: str = "plaintext"
    value: str


class CompletionItem(LspModel):
    label: str
    kind: Optional[CompletionItemKind] = None
    detail: Optional[str] = None
    documentation: Optional[MarkupContent] = None


class CompletionList(LspModel):
    is_incomplete: bool = False
    items: List[CompletionItem] = Field(default_factory=list)


class WorkspaceSymbolParams(LspModel):
    query: str = ""


class DocumentSymbolParams(LspModel):
    text_document: TextDocumentIdentifier


class SymbolInformation(LspModel):
    name: str
    kind: SymbolKind
    location: Location
    container_name: Optional[str] = None
