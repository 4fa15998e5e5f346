"""JSON-RPC 2.0 envelope schemas and error codes."""
from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"

RequestId = int | str | None


class JsonRpcError(Enum):
    """Error conditions reported to JSON-RPC clients, with their wire code and message."""

    PARSE_ERROR = (-32700, "Parse error")
    INVALID_REQUEST = (-32600, "Invalid Request")
    METHOD_NOT_FOUND = (-32601, "Method not found")
    INVALID_PARAMS = (-32602, "Invalid params")
    INTERNAL_ERROR = (-32603, "Internal error")
    SIGNING_FROM_IS_NOT_AN_UNLOCKED_ACCOUNT = (
        -32000,
        "Signing from address is not an unlocked account",
    )

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message


class JsonRpcRequest(BaseModel):
    """Inbound JSON-RPC call.

    `params` is left untyped; each method validates its own parameter shape.
    """

    model_config = ConfigDict(extra="ignore")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    method: str
    params: Any = None


class JsonRpcErrorBody(BaseModel):
    """The ``error`` member of a failed response."""

    code: int
    message: str

    @classmethod
    def from_error(cls, error: JsonRpcError) -> JsonRpcErrorBody:
        return cls(code=error.code, message=error.message)


class JsonRpcSuccessResponse(BaseModel):
    """Response carrying a method result."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    result: Any = Field(...)


class JsonRpcErrorResponse(BaseModel):
    """Response carrying an error object instead of a result."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    error: JsonRpcErrorBody
