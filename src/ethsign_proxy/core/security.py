"""Address helpers for Ethereum accounts."""
from __future__ import annotations

from eth_utils import is_hex_address, to_normalized_address


def normalize_address(address: str) -> str | None:
    """Return the lowercase ``0x`` form of an address, or None if malformed.

    Args:
        address: Address as supplied by a client, with or without ``0x`` and in
            any letter case.

    Returns:
        The normalized address, or None when `address` is not 20 bytes of hex.
    """
    if not isinstance(address, str):
        return None
    candidate = address.strip()
    if not candidate.startswith(("0x", "0X")):
        candidate = f"0x{candidate}"
    if not is_hex_address(candidate):
        return None
    return to_normalized_address(candidate)

