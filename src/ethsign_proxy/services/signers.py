"""Signing backends for secp256k1 Ethereum accounts."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from eth_account import Account
from eth_keys import keys
from eth_keys.exceptions import ValidationError as KeyValidationError

logger = logging.getLogger(__name__)

# Recovery ids are reported in the 27/28 form expected by personal_sign clients.
RECOVERY_ID_OFFSET = 27


class SignerError(RuntimeError):
    """Raised when a signing backend cannot produce a signature."""


@dataclass(frozen=True)
class Signature:
    """Recoverable ECDSA signature components."""

    r: int
    s: int
    v: int


class Signer(ABC):
    """Capability bound to one address that signs arbitrary bytes."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed address of the signing key."""

    @abstractmethod
    def sign(self, data: bytes) -> Signature:
        """Sign the Keccak-256 hash of `data`.

        Raises:
            SignerError: If the backend fails to sign.
        """


class LocalKeySigner(Signer):
    """Signer holding a raw private key in process memory."""

    def __init__(self, private_key: str | bytes) -> None:
        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError, KeyValidationError) as err:
            raise SignerError(f"Invalid private key: {err}") from err
        self._private_key = keys.PrivateKey(account.key)
        self._address: str = account.address

    @property
    def address(self) -> str:
        return self._address

    def sign(self, data: bytes) -> Signature:
        try:
            signature = self._private_key.sign_msg(data)
        except (ValueError, TypeError, KeyValidationError) as err:
            raise SignerError(f"Signing failed: {err}") from err
        return Signature(r=signature.r, s=signature.s, v=signature.v + RECOVERY_ID_OFFSET)

    def __repr__(self) -> str:
        return f"LocalKeySigner(address={self._address!r})"


def load_keystore_signer(keystore_path: str | Path, password_path: str | Path) -> LocalKeySigner:
    """Decrypt a V3 key file and return a signer for the key it holds.

    Args:
        keystore_path: Path of the JSON key file.
        password_path: Path of a file whose first line is the key file password.

    Returns:
        A `LocalKeySigner` for the decrypted key.

    Raises:
        SignerError: If either file cannot be read or the key cannot be decrypted.
    """
    try:
        keystore = json.loads(Path(keystore_path).read_text(encoding="utf-8"))
        password_lines = Path(password_path).read_text(encoding="utf-8").splitlines()
        password = password_lines[0] if password_lines else ""
        private_key = Account.decrypt(keystore, password)
    except (OSError, ValueError) as err:
        raise SignerError(f"Unable to load key file {keystore_path}: {err}") from err

    signer = LocalKeySigner(private_key)
    logger.info("Decrypted key file %s for %s", keystore_path, signer.address)
    return signer
