"""Address-indexed lookup of unlocked signers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from threading import Lock
from typing import Protocol

from ethsign_proxy.core.security import normalize_address
from ethsign_proxy.core.settings import Settings, settings
from ethsign_proxy.services.signers import LocalKeySigner, Signer, load_keystore_signer

logger = logging.getLogger(__name__)


class SignerRegistry(Protocol):
    """Anything that can map an address to a signer."""

    def lookup(self, address: str) -> Signer | None: ...


class AddressIndexedSignerRegistry:
    """Read-only registry of signers keyed by address.

    Lookups are case-insensitive and accept addresses without ``0x``. The
    index is never mutated after construction, so concurrent lookups need no
    locking.
    """

    def __init__(self, signers: Iterable[Signer] = ()) -> None:
        index: dict[str, Signer] = {}
        for signer in signers:
            key = normalize_address(signer.address)
            if key is None:
                raise ValueError(f"Signer has a malformed address: {signer.address!r}")
            if key in index:
                logger.warning("Ignoring duplicate signer for %s", signer.address)
                continue
            index[key] = signer
        self._signers = index

    def lookup(self, address: str) -> Signer | None:
        """Return the signer bound to `address`, or None if none is unlocked."""
        key = normalize_address(address)
        if key is None:
            return None
        return self._signers.get(key)

    @property
    def addresses(self) -> list[str]:
        """Checksummed addresses of every unlocked account, sorted."""
        return sorted(signer.address for signer in self._signers.values())

    def __len__(self) -> int:
        return len(self._signers)


def build_registry(config: Settings) -> AddressIndexedSignerRegistry:
    """Unlock every key named in `config` and index the resulting signers.

    Raises:
        SignerError: If a configured key or key file cannot be loaded.
    """
    signers: list[Signer] = [LocalKeySigner(key) for key in config.signer_private_keys]
    if config.keystore_configured:
        signers.append(
            load_keystore_signer(
                config.signer_keystore_file,  # type: ignore[arg-type]
                config.signer_keystore_password_file,  # type: ignore[arg-type]
            )
        )

    registry = AddressIndexedSignerRegistry(signers)
    for address in registry.addresses:
        logger.info("Unlocked account %s", address)
    if not len(registry):
        logger.warning("No signing keys configured; every eth_sign call will be rejected")
    return registry


_registry: AddressIndexedSignerRegistry | None = None
_registry_lock = Lock()


def get_signer_registry() -> AddressIndexedSignerRegistry:
    """Return the process-wide registry, building it from settings on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = build_registry(settings)
        return _registry
