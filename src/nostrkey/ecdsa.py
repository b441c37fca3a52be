"""
This module implements the signature engine: key generation, deterministic
ECDSA signing with low-s normalization, and verification against x-only
public keys.

Nonces are derived as SHA-256(d || z || counter) where the four-byte counter
starts at zero and advances whenever a candidate nonce yields r = 0 or s = 0.
Signing gives up after MAX_ATTEMPTS candidates.

Because x-only keys drop the parity of y, verification lifts the key to both
candidate points and accepts the signature if either one satisfies the ECDSA
equation.
"""

from __future__ import annotations
import logging
import secrets
from typing import Callable, Union
from .constants import KEY_SIZE, MAX_ATTEMPTS, N
from .errors import (
    InvalidHexEncoding,
    InvalidKeyLength,
    InvalidPrivateKey,
    KeyGenerationExhausted,
    NostrKeyError,
    SignatureGenerationExhausted,
)
from .hashes import sha256
from .modular import bytes_to_int, int_to_bytes, mod_inverse, to_bytes32
from .point import G, Point, parse_xonly

logger = logging.getLogger(__name__)

SIGNATURE_SIZE = 2 * KEY_SIZE


class Signature:
    """Class representing an ECDSA signature (r, s)."""

    def __init__(self, r: int, s: int):
        """
        Initialize a signature.

        Parameters:
        r (int): The x-coordinate of the nonce point, reduced modulo N.
        s (int): The proof scalar.

        Raises:
        ValueError: If r or s lies outside [1, N - 1].
        """
        if not (0 < r < N and 0 < s < N):
            raise ValueError("Signature components must lie in [1, N - 1].")

        self.r = r
        self.s = s

    @classmethod
    def from_bytes(cls, data: bytes) -> Signature:
        """Parse the 64-byte r || s wire form."""
        if len(data) != SIGNATURE_SIZE:
            raise InvalidKeyLength(
                f"Signatures are {SIGNATURE_SIZE} bytes, got {len(data)}."
            )

        return cls(bytes_to_int(data[:KEY_SIZE]), bytes_to_int(data[KEY_SIZE:]))

    @classmethod
    def from_hex(cls, signature_hex: str) -> Signature:
        """Parse the 128-character hexadecimal r || s wire form."""
        try:
            data = bytes.fromhex(signature_hex)
        except (TypeError, ValueError) as e:
            raise InvalidHexEncoding("Invalid signature hex.") from e

        return cls.from_bytes(data)

    def to_bytes(self) -> bytes:
        """
        Serialize the signature to its wire form.

        Returns:
        bytes: r || s, each as 32 big-endian bytes.
        """
        return int_to_bytes(self.r) + int_to_bytes(self.s)

    def to_hex(self) -> str:
        """Return the 128-character lowercase hex of r || s."""
        return self.to_bytes().hex()

    def is_low_s(self) -> bool:
        """Check that s lies in the lower half of [1, N - 1]."""
        return self.s <= N // 2

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self.r == other.r and self.s == other.s

    def __hash__(self) -> int:
        return hash((self.r, self.s))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(r=0x{self.r:064x}, s=0x{self.s:064x})"


def validate_private_key(private_key: int) -> int:
    """
    Check that a private scalar lies in [1, N - 1].

    Raises:
    InvalidPrivateKey: If it does not.
    """
    if not isinstance(private_key, int) or isinstance(private_key, bool):
        raise InvalidPrivateKey("Private key must be an integer.")
    if not 1 <= private_key < N:
        raise InvalidPrivateKey("Private key must lie in [1, N - 1].")

    return private_key


def generate_private_key(
    random_bytes: Callable[[int], bytes] = secrets.token_bytes,
) -> int:
    """
    Sample a private scalar uniformly from [1, N - 1] by rejection sampling
    32-byte strings from the randomness source.

    Parameters:
    random_bytes (Callable[[int], bytes]): Source of uniformly random bytes.

    Returns:
    int: The private scalar.

    Raises:
    KeyGenerationExhausted: If no draw falls in range within MAX_ATTEMPTS.
    """
    for _ in range(MAX_ATTEMPTS):
        candidate = bytes_to_int(random_bytes(KEY_SIZE))
        if 1 <= candidate < N:
            return candidate

    raise KeyGenerationExhausted(
        f"No private key in range after {MAX_ATTEMPTS} draws."
    )


def public_key_point(private_key: int) -> Point:
    """Return d * G for a valid private scalar d."""
    return validate_private_key(private_key) * G


def public_key_of(private_key: int) -> bytes:
    """Return the 32-byte x-only public key of a private scalar."""
    return public_key_point(private_key).xonly_serialize()


def deterministic_nonce(private_key: int, digest: bytes, attempt: int = 0) -> int:
    """
    Derive the signing nonce for one attempt.

    k = SHA-256(d || z || attempt), with d and z as 32 big-endian bytes and
    attempt as 4 big-endian bytes. Values outside [1, N - 1] are folded into
    that range.

    Parameters:
    private_key (int): The signer's private scalar d.
    digest (bytes): The 32-byte message digest z.
    attempt (int): The retry counter.

    Returns:
    int: A nonce in [1, N - 1].
    """
    nonce_input = int_to_bytes(private_key) + digest + int_to_bytes(attempt, 4)
    k = bytes_to_int(sha256(nonce_input))
    if k == 0 or k >= N:
        k = k % (N - 1) + 1

    return k


def sign(
    private_key: int, digest: Union[bytes, str], max_attempts: int = MAX_ATTEMPTS
) -> Signature:
    """
    Produce a deterministic, low-s ECDSA signature over a message digest.

    Parameters:
    private_key (int): The private scalar d.
    digest (Union[bytes, str]): The 32-byte digest z, raw or as 64 hex characters.
    max_attempts (int): Number of nonce candidates to try.

    Returns:
    Signature: The signature, with s <= N / 2.

    Raises:
    InvalidPrivateKey: If d is out of range.
    InvalidKeyLength: If the digest is not 32 bytes.
    SignatureGenerationExhausted: If every candidate nonce was degenerate.
    """
    validate_private_key(private_key)
    digest = to_bytes32(digest)
    z = bytes_to_int(digest)

    for attempt in range(max_attempts):
        k = deterministic_nonce(private_key, digest, attempt)
        nonce_point = k * G
        if nonce_point.is_zero():
            logger.debug("Nonce attempt %d produced the identity, retrying", attempt)
            continue

        r = nonce_point.x % N
        if r == 0:
            logger.debug("Nonce attempt %d produced r = 0, retrying", attempt)
            continue

        s = (mod_inverse(k, N) * (z + r * private_key)) % N
        if s == 0:
            logger.debug("Nonce attempt %d produced s = 0, retrying", attempt)
            continue

        if s > N // 2:
            s = N - s

        return Signature(r, s)

    raise SignatureGenerationExhausted(
        f"Signature generation failed after {max_attempts} attempts."
    )


def _verify_with_point(public_point: Point, z: int, signature: Signature) -> bool:
    w = mod_inverse(signature.s, N)
    u1 = (z * w) % N
    u2 = (signature.r * w) % N
    combined = (u1 * G) + (u2 * public_point)
    if combined.is_zero():
        return False

    return combined.x % N == signature.r


def verify(
    public_key: Union[bytes, str],
    digest: Union[bytes, str],
    signature: Union[Signature, bytes, str],
) -> bool:
    """
    Verify an ECDSA signature against an x-only public key.

    Both lifts of the public key are tried, even y first. Malformed input of
    any kind is reported as an invalid signature rather than an exception.

    Parameters:
    public_key (Union[bytes, str]): The 32-byte x-only key, raw or hex.
    digest (Union[bytes, str]): The 32-byte message digest, raw or hex.
    signature (Union[Signature, bytes, str]): The signature, as an object,
        64 raw bytes or 128 hex characters.

    Returns:
    bool: True if either candidate key satisfies the verification equation.
    """
    try:
        parsed = _parse_signature(signature)
        z = bytes_to_int(to_bytes32(digest))
        candidates = Point.lift_x(parse_xonly(public_key))
    except (NostrKeyError, TypeError, ValueError):
        return False

    for candidate in candidates:
        if _verify_with_point(candidate, z, parsed):
            return True

    return False


def _parse_signature(signature: Union[Signature, bytes, str]) -> Signature:
    if isinstance(signature, Signature):
        return signature
    if isinstance(signature, str):
        return Signature.from_hex(signature)
    if isinstance(signature, (bytes, bytearray)):
        return Signature.from_bytes(bytes(signature))
    raise TypeError("Unsupported signature type.")

