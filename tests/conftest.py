# tests/conftest.py
from __future__ import annotations

import binascii
from collections.abc import Iterator

import pytest
from eth_keys import keys
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ethsign_proxy.main import app as fastapi_app
from ethsign_proxy.services.registry import AddressIndexedSignerRegistry, get_signer_registry
from ethsign_proxy.services.signers import LocalKeySigner, Signature, Signer, SignerError

# Well-known development key; never holds funds.
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

RECORDING_ADDRESS = "0x627306090abaB3A6e1400e9345bC60c78a8BEf57"
FAILING_ADDRESS = "0xf17f52151EbEF6C7334FAD080c5704D77216b732"
UNKNOWN_ADDRESS = "0xC5fdf4076b8F3A5357c5E395ab970B5B54098Fef"
TIMEOUT_ADDRESS = "0x821aEa9a577a9b44299B9c15c88cf3087F3b5544"

FIXED_SIGNATURE = Signature(r=1, s=2, v=27)


def recover_address(payload: bytes, signature_hex: str) -> str:
    """Recover the checksummed address behind a ``0x`` r || s || v signature."""
    raw = binascii.unhexlify(signature_hex[2:])
    assert len(raw) == 65
    v = raw[64] - 27 if raw[64] >= 27 else raw[64]
    signature = keys.Signature(
        vrs=(v, int.from_bytes(raw[:32], "big"), int.from_bytes(raw[32:64], "big"))
    )
    return signature.recover_public_key_from_msg(payload).to_checksum_address()


class RecordingSigner(Signer):
    """Deterministic signer that remembers every payload it was given."""

    def __init__(self, address: str = RECORDING_ADDRESS, signature: Signature = FIXED_SIGNATURE) -> None:
        self._address = address
        self._signature = signature
        self.payloads: list[bytes] = []

    @property
    def address(self) -> str:
        return self._address

    def sign(self, data: bytes) -> Signature:
        self.payloads.append(data)
        return self._signature


class FailingSigner(Signer):
    """Signer whose backend always raises `error`."""

    def __init__(
        self,
        address: str = FAILING_ADDRESS,
        error: Exception | None = None,
    ) -> None:
        self._address = address
        self._error = error or SignerError("hardware token timed out")
        self.calls = 0

    @property
    def address(self) -> str:
        return self._address

    def sign(self, data: bytes) -> Signature:
        self.calls += 1
        raise self._error


@pytest.fixture()
def recording_signer() -> RecordingSigner:
    return RecordingSigner()


@pytest.fixture()
def failing_signer() -> FailingSigner:
    return FailingSigner()


@pytest.fixture()
def timeout_signer() -> FailingSigner:
    return FailingSigner(address=TIMEOUT_ADDRESS, error=TimeoutError("hsm busy"))


@pytest.fixture(scope="session")
def local_signer() -> LocalKeySigner:
    return LocalKeySigner(TEST_PRIVATE_KEY)


@pytest.fixture()
def registry(
    recording_signer: RecordingSigner,
    failing_signer: FailingSigner,
    timeout_signer: FailingSigner,
    local_signer: LocalKeySigner,
) -> AddressIndexedSignerRegistry:
    return AddressIndexedSignerRegistry(
        [recording_signer, failing_signer, timeout_signer, local_signer]
    )


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI, registry: AddressIndexedSignerRegistry) -> Iterator[TestClient]:
    app.dependency_overrides[get_signer_registry] = lambda: registry
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_signer_registry, None)
