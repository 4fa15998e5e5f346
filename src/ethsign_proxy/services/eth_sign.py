"""Request handling for the ``eth_sign`` JSON-RPC method.

A call carries ``[address, message]``. The message is wrapped in the
Ethereum personal-message envelope::

    0x19 || "Ethereum Signed Message:\\n" || len(payload) || payload

and signed by the key unlocked for `address`. A message starting with ``0x``
is a hex-encoded 32-byte digest and is signed as raw bytes; anything else is
signed as its UTF-8 text. The signature is returned as ``0x`` || r || s || v
in lowercase hex, with r and s padded to 32 bytes each.

Every stage is a plain function so the pipeline stays a pure function of the
request parameters and the signer registry.
"""

from __future__ import annotations

import binascii
import logging
from typing import Any

from ethsign_proxy.schemas.jsonrpc import JsonRpcRequest
from ethsign_proxy.services.errors import (
    InvalidParamsError,
    JsonRpcException,
    SigningFailureError,
    UnknownOrLockedAccountError,
)
from ethsign_proxy.services.registry import SignerRegistry
from ethsign_proxy.services.signers import Signature, Signer

logger = logging.getLogger(__name__)

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"
HEX_PREFIX = "0x"
HASH_PAYLOAD_BYTES = 32
SIGNATURE_COMPONENT_BYTES = 32

_EXPECTED_PARAM_COUNT = 2


def extract_params(params: Any) -> tuple[str, str]:
    """Return the ``(address, message)`` pair carried by an ``eth_sign`` call.

    Args:
        params: The raw ``params`` member of the request.

    Returns:
        The address and message strings, in request order.

    Raises:
        InvalidParamsError: If `params` is not a list of exactly two strings.
    """
    if not isinstance(params, (list, tuple)):
        logger.info(
            "eth_sign should have a list of 2 parameters, but received an object: %r", params
        )
        raise InvalidParamsError("eth_sign params must be a list")

    if len(params) != _EXPECTED_PARAM_COUNT:
        logger.info("eth_sign should have a list of 2 parameters, but has %d", len(params))
        raise InvalidParamsError("eth_sign takes exactly 2 parameters")

    address, message = params
    if not isinstance(address, str) or not isinstance(message, str):
        logger.info(
            "eth_sign parameters must be strings, got %s and %s",
            type(address).__name__,
            type(message).__name__,
        )
        raise InvalidParamsError("eth_sign parameters must be strings")

    return address, message


def resolve_signer(registry: SignerRegistry, address: str) -> Signer:
    """Return the signer unlocked for `address`.

    Raises:
        UnknownOrLockedAccountError: If the registry holds no signer for it.
    """
    signer = registry.lookup(address)
    if signer is None:
        logger.info("Address (%s) does not match any available account", address)
        raise UnknownOrLockedAccountError()
    return signer


def _decode_hex_payload(hex_digits: str) -> bytes:
    try:
        return binascii.unhexlify(hex_digits)
    except ValueError as err:
        logger.info("eth_sign message is not valid hex: %s", err)
        raise InvalidParamsError(f"Invalid hex message: {err}") from err


def normalize_message(message: str) -> bytes:
    """Build the personal-message bytes that are actually signed.

    Args:
        message: ``0x``-prefixed hex of a 32-byte digest, or arbitrary text.

    Returns:
        The prefixed payload.

    Raises:
        InvalidParamsError: If hex digits are malformed or do not decode to
            exactly 32 bytes, or the text cannot be encoded as UTF-8.
    """
    if message[: len(HEX_PREFIX)] == HEX_PREFIX:
        payload = _decode_hex_payload(message[len(HEX_PREFIX):])
        if len(payload) != HASH_PAYLOAD_BYTES:
            logger.info(
                "eth_sign hex message must be %d bytes, got %d", HASH_PAYLOAD_BYTES, len(payload)
            )
            raise InvalidParamsError(
                f"Hex message must decode to {HASH_PAYLOAD_BYTES} bytes, got {len(payload)}"
            )
        return PERSONAL_MESSAGE_PREFIX + str(HASH_PAYLOAD_BYTES).encode("ascii") + payload

    try:
        text = message.encode("utf-8")
    except UnicodeEncodeError as err:
        logger.info("eth_sign message is not encodable as UTF-8: %s", err)
        raise InvalidParamsError("Message is not valid UTF-8 text") from err
    return PERSONAL_MESSAGE_PREFIX + str(len(text)).encode("ascii") + text


def invoke_signer(signer: Signer, payload: bytes) -> Signature:
    """Ask `signer` for a signature over `payload`, exactly once.

    Any error raised by the signer backend, including timeouts and I/O
    errors from hardware or remote key stores, is reported as a signing
    failure.

    Raises:
        SigningFailureError: If the signer fails for any reason.
    """
    try:
        return signer.sign(payload)
    except JsonRpcException:
        raise
    except Exception as err:
        logger.warning("Signing with %s failed: %r", signer.address, err)
        raise SigningFailureError(str(err) or type(err).__name__) from err


def _minimal_bytes(value: int) -> bytes:
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def encode_signature(signature: Signature) -> str:
    """Render a signature as ``0x`` || r || s || v in lowercase hex.

    r and s are left-padded to 32 bytes; v uses its minimal big-endian form.
    """
    encoded = (
        signature.r.to_bytes(SIGNATURE_COMPONENT_BYTES, "big")
        + signature.s.to_bytes(SIGNATURE_COMPONENT_BYTES, "big")
        + _minimal_bytes(signature.v)
    )
    return HEX_PREFIX + encoded.hex()


def eth_sign(params: Any, registry: SignerRegistry) -> str:
    """Run a full ``eth_sign`` call and return the encoded signature."""
    address, message = extract_params(params)
    signer = resolve_signer(registry, address)
    payload = normalize_message(message)
    signature = invoke_signer(signer, payload)
    return encode_signature(signature)


class EthSignResultProvider:
    """Produces the result of ``eth_sign`` requests against a signer registry."""

    def __init__(self, registry: SignerRegistry) -> None:
        self._registry = registry

    def create_response_result(self, request: JsonRpcRequest) -> str:
        return eth_sign(request.params, self._registry)
