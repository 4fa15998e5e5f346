# src/ethsign_proxy/main.py
"""Main entry point for the signing proxy."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse

from ethsign_proxy.api import jsonrpc_router
from ethsign_proxy.core.log_config import configure_logging
from ethsign_proxy.core.settings import settings
from ethsign_proxy.services.registry import AddressIndexedSignerRegistry, get_signer_registry

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Remote signing proxy for Ethereum personal messages",
    version=settings.app_version,
)

app.include_router(jsonrpc_router)


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    # Fail at boot on a bad key or key file.
    get_signer_registry()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/upcheck", response_class=PlainTextResponse)
async def upcheck() -> str:
    return "I'm up!"


@app.get("/")
async def root(
    registry: Annotated[AddressIndexedSignerRegistry, Depends(get_signer_registry)],
) -> dict[str, object]:
    """Root endpoint with basic information about the proxy."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "methods": ["eth_sign"],
        "unlocked_accounts": len(registry),
    }


def run() -> None:
    """Start the proxy under uvicorn using the configured listener."""
    import uvicorn

    uvicorn.run(
        "ethsign_proxy.main:app",
        host=settings.http_host,
        port=settings.http_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
