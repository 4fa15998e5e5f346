"""Pydantic schemas for the JSON-RPC surface."""

from .jsonrpc import (
    JsonRpcError,
    JsonRpcErrorBody,
    JsonRpcErrorResponse,
    JsonRpcRequest,
    JsonRpcSuccessResponse,
)

__all__ = [
    "JsonRpcError",
    "JsonRpcErrorBody",
    "JsonRpcErrorResponse",
    "JsonRpcRequest",
    "JsonRpcSuccessResponse",
]
