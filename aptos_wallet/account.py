"""Local signing identity: an ed25519 key pair and the ledger address derived from it."""

from __future__ import annotations

import hashlib

from symbolchain.CryptoTypes import PrivateKey
from symbolchain.symbol.KeyPair import KeyPair

# Authentication key scheme byte for single-signer ed25519 accounts.
ED25519_SCHEME = b"\x00"


class SigningIdentity:
    def __init__(self, private_key: PrivateKey | None = None):
        self._key_pair = KeyPair(private_key or PrivateKey.random())

    @classmethod
    def from_private_key_hex(cls, private_key_hex: str) -> "SigningIdentity":
        value = private_key_hex.strip()
        if value.lower().startswith("0x"):
            value = value[2:]
        return cls(PrivateKey(value))

    @property
    def public_key_hex(self) -> str:
        return "0x" + self._key_pair.public_key.bytes.hex()

    @property
    def address(self) -> str:
        auth_key = hashlib.sha3_256(self._key_pair.public_key.bytes + ED25519_SCHEME)
        return "0x" + auth_key.hexdigest()

    def sign(self, message: bytes) -> str:
        """Sign raw bytes and return the signature as 0x-prefixed hex."""
        signature = self._key_pair.sign(message)
        return "0x" + signature.bytes.hex()

    def __repr__(self) -> str:
        return f"SigningIdentity(address={self.address})"
