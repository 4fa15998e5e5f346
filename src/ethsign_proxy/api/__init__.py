"""HTTP endpoints for the signing proxy."""

from .jsonrpc import router as jsonrpc_router

__all__ = ["jsonrpc_router"]
