"""
Hash primitives consumed by the signing, derivation and address code.

- sha256: message digests, Nostr event ids and deterministic nonces.
- hmac_sha512: the keyed hash deriving the ed25519 scalar.
- blake2b_512: the wide hash behind SS58 checksums.
"""

import hashlib
import hmac


def sha256(data: bytes) -> bytes:
    """Return the 32-byte SHA-256 digest of data."""
    return hashlib.sha256(data).digest()


def hmac_sha512(key: bytes, data: bytes) -> bytes:
    """Return the 64-byte HMAC-SHA512 of data under key."""
    return hmac.new(key, data, hashlib.sha512).digest()


def blake2b_512(data: bytes) -> bytes:
    """Return the 64-byte BLAKE2b digest of data."""
    return hashlib.blake2b(data, digest_size=64).digest()
