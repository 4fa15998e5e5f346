"""Signing services behind the JSON-RPC surface."""

from .eth_sign import EthSignResultProvider, eth_sign
from .registry import AddressIndexedSignerRegistry, SignerRegistry, get_signer_registry
from .signers import LocalKeySigner, Signature, Signer, SignerError

__all__ = [
    "AddressIndexedSignerRegistry",
    "EthSignResultProvider",
    "LocalKeySigner",
    "Signature",
    "Signer",
    "SignerError",
    "SignerRegistry",
    "eth_sign",
    "get_signer_registry",
]
