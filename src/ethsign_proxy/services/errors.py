"""Exceptions raised while serving JSON-RPC calls.

Each exception carries the `JsonRpcError` it is reported as, so the HTTP
layer can render any failure without inspecting its type.
"""

from __future__ import annotations

from ethsign_proxy.schemas.jsonrpc import JsonRpcError


class JsonRpcException(RuntimeError):
    """Base exception for failures reported to the client as a JSON-RPC error."""

    def __init__(self, error: JsonRpcError, detail: str | None = None) -> None:
        super().__init__(detail or error.message)
        self.error = error


class InvalidParamsError(JsonRpcException):
    """Raised when request parameters have the wrong shape or content."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(JsonRpcError.INVALID_PARAMS, detail)


class UnknownOrLockedAccountError(JsonRpcException):
    """Raised when no usable signer is bound to the requested address."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(JsonRpcError.SIGNING_FROM_IS_NOT_AN_UNLOCKED_ACCOUNT, detail)


class SigningFailureError(JsonRpcException):
    """Raised when a resolved signer fails while producing a signature.

    Unlike the validation errors this points at an operational fault; callers
    decide whether a retry is worthwhile.
    """

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(JsonRpcError.INTERNAL_ERROR, detail)
