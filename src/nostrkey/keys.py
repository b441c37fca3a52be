"""
This module defines the KeyPair value object: a secp256k1 private scalar and
its x-only public key, with their hex and NIP-19 (npub/nsec) renderings.

A KeyPair is immutable and owned by the caller, who passes it to signing and
derivation explicitly. Its repr never includes the private scalar.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import secrets
from typing import Callable, Union
from . import bech32, ecdsa
from .derivation import DerivedKeyMaterial, derive_secondary_key
from .errors import InvalidPrivateKey
from .modular import bytes_to_int, int_to_bytes


@dataclass(frozen=True)
class KeyPair:
    """Class representing a Nostr identity key pair."""

    private_key: int = field(repr=False)
    public_key: bytes

    @classmethod
    def generate(
        cls, random_bytes: Callable[[int], bytes] = secrets.token_bytes
    ) -> KeyPair:
        """Generate a fresh key pair from the randomness source."""
        return cls.from_private_key(ecdsa.generate_private_key(random_bytes))

    @classmethod
    def from_private_key(cls, private_key: Union[int, bytes, str]) -> KeyPair:
        """
        Import a private key given as an integer, 32 raw bytes, 64 hex
        characters or an nsec string.

        Raises:
        InvalidPrivateKey: If the key is malformed or outside [1, N - 1].
        """
        if isinstance(private_key, (bytes, bytearray)):
            if len(private_key) != 32:
                raise InvalidPrivateKey("Private key must be 32 bytes.")
            private_key = bytes_to_int(bytes(private_key))
        elif isinstance(private_key, str):
            private_key_hex, _ = bech32.normalize_private_key(private_key)
            if private_key_hex is None:
                raise InvalidPrivateKey("Private key is neither hex nor nsec.")
            private_key = int(private_key_hex, 16)

        return cls(private_key, ecdsa.public_key_of(private_key))

    @property
    def private_key_bytes(self) -> bytes:
        """The private scalar as 32 big-endian bytes."""
        return int_to_bytes(self.private_key)

    @property
    def private_key_hex(self) -> str:
        """The private scalar as 64 lowercase hex characters."""
        return self.private_key_bytes.hex()

    @property
    def public_key_hex(self) -> str:
        """The x-only public key as 64 lowercase hex characters."""
        return self.public_key.hex()

    @property
    def npub(self) -> str:
        """The public key encoded as a NIP-19 npub."""
        return bech32.encode_npub(self.public_key)

    @property
    def nsec(self) -> str:
        """The private key encoded as a NIP-19 nsec."""
        return bech32.encode_nsec(self.private_key_bytes)

    def sign(self, digest: Union[bytes, str]) -> ecdsa.Signature:
        """Sign a 32-byte digest with this key pair."""
        return ecdsa.sign(self.private_key, digest)

    def verify(
        self, digest: Union[bytes, str], signature: Union[ecdsa.Signature, bytes, str]
    ) -> bool:
        """Verify a signature over digest against this key pair's public key."""
        return ecdsa.verify(self.public_key, digest, signature)

    def derive_secondary_key(self) -> DerivedKeyMaterial:
        """Derive the ed25519 account key for this identity."""
        return derive_secondary_key(self.private_key_bytes)
