"""JSON-RPC endpoint and method dispatch.

Only ``eth_sign`` is served here; every other method is reported as not
found. Method handlers run on the worker thread pool because a signer may
block for a noticeable time.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Annotated, Any, Protocol

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ethsign_proxy.schemas.jsonrpc import (
    JsonRpcError,
    JsonRpcErrorBody,
    JsonRpcErrorResponse,
    JsonRpcRequest,
    JsonRpcSuccessResponse,
    RequestId,
)
from ethsign_proxy.services.errors import JsonRpcException
from ethsign_proxy.services.eth_sign import EthSignResultProvider
from ethsign_proxy.services.registry import SignerRegistry, get_signer_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["jsonrpc"])


class ResultProvider(Protocol):
    """Computes the ``result`` member for one JSON-RPC method."""

    def create_response_result(self, request: JsonRpcRequest) -> Any: ...


class JsonRpcDispatcher:
    """Routes requests to the provider registered for their method."""

    def __init__(self, providers: Mapping[str, ResultProvider]) -> None:
        self._providers = dict(providers)

    def dispatch(self, request: JsonRpcRequest) -> Any:
        provider = self._providers.get(request.method)
        if provider is None:
            logger.info("Unsupported JSON-RPC method: %s", request.method)
            raise JsonRpcException(JsonRpcError.METHOD_NOT_FOUND)
        return provider.create_response_result(request)


RegistryDep = Annotated[SignerRegistry, Depends(get_signer_registry)]


def get_dispatcher(registry: RegistryDep) -> JsonRpcDispatcher:
    """Build the dispatcher for the current signer registry."""
    return JsonRpcDispatcher({"eth_sign": EthSignResultProvider(registry)})


DispatcherDep = Annotated[JsonRpcDispatcher, Depends(get_dispatcher)]


def _error_response(
    request_id: RequestId,
    error: JsonRpcError,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    body = JsonRpcErrorResponse(id=request_id, error=JsonRpcErrorBody.from_error(error))
    return JSONResponse(body.model_dump(), status_code=status_code)


def _request_id_of(payload: Any) -> RequestId:
    if isinstance(payload, dict):
        request_id = payload.get("id")
        if isinstance(request_id, (int, str)) and not isinstance(request_id, bool):
            return request_id
    return None


@router.post("/")
async def handle_jsonrpc(request: Request, dispatcher: DispatcherDep) -> JSONResponse:
    """Serve a single JSON-RPC call.

    Args:
        request: Raw HTTP request; the body is parsed here so malformed JSON
            can be answered with a JSON-RPC parse error.
        dispatcher: Method dispatcher for this request.

    Returns:
        A JSON-RPC success or error response.
    """
    raw_body = await request.body()
    try:
        payload = json.loads(raw_body)
    except ValueError:
        logger.info("Rejecting request body that is not valid JSON")
        return _error_response(None, JsonRpcError.PARSE_ERROR, status.HTTP_400_BAD_REQUEST)

    try:
        rpc_request = JsonRpcRequest.model_validate(payload)
    except ValidationError as err:
        logger.info("Rejecting malformed JSON-RPC request: %s", err.errors())
        return _error_response(
            _request_id_of(payload),
            JsonRpcError.INVALID_REQUEST,
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        result = await run_in_threadpool(dispatcher.dispatch, rpc_request)
    except JsonRpcException as exc:
        return _error_response(rpc_request.id, exc.error)
    except Exception:
        logger.exception("Unhandled error while serving %s", rpc_request.method)
        return _error_response(rpc_request.id, JsonRpcError.INTERNAL_ERROR)

    body = JsonRpcSuccessResponse(id=rpc_request.id, result=result)
    return JSONResponse(body.model_dump())
