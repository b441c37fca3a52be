"""
This module derives an ed25519 account key from a Nostr (secp256k1) private
key and turns it into an SS58 address.

The ed25519 scalar is the first half of HMAC-SHA512 keyed with
"ed25519 seed" over the 32-byte secp256k1 scalar, clamped as ed25519
requires. The public key is that scalar times the ed25519 base point,
computed by libsodium through PyNaCl. If the installed libsodium lacks the
primitive, derivation raises MissingCurvePrimitive; there is no fallback.
"""

from dataclasses import dataclass, field
import logging
from typing import Callable, Optional, Union
from nacl import bindings
from .bech32 import decode_nsec
from .constants import ED25519_DERIVATION_KEY, GENERIC_SUBSTRATE, KEY_SIZE
from .errors import MissingCurvePrimitive, NostrKeyError
from .hashes import hmac_sha512
from .modular import int_to_bytes, to_bytes32
from . import ss58

logger = logging.getLogger(__name__)

BaseMultiplication = Callable[[bytes], bytes]


@dataclass(frozen=True)
class DerivedKeyMaterial:
    """The ed25519 key pair derived from a secp256k1 private key."""

    private_scalar: bytes = field(repr=False)
    public_key: bytes


@dataclass(frozen=True)
class SubstrateAccount:
    """Everything produced by converting an nsec into an SS58 account."""

    nsec: str = field(repr=False)
    secp256k1_private: str = field(repr=False)
    ed25519_private: str = field(repr=False)
    ed25519_public: str
    ss58_address: str
    address_type: int

    def to_dict(self) -> dict:
        return {
            "nsec": self.nsec,
            "secp256k1_private": self.secp256k1_private,
            "ed25519_private": self.ed25519_private,
            "ed25519_public": self.ed25519_public,
            "ss58_address": self.ss58_address,
            "address_type": self.address_type,
        }


@dataclass(frozen=True)
class ConversionFailure:
    """A conversion that failed on malformed input."""

    error: str
    reason: str

    def to_dict(self) -> dict:
        return {"error": self.reason, "type": self.error}


def clamp(scalar: bytes) -> bytes:
    """
    Apply ed25519 clamping: clear the low three bits of the first byte, clear
    the top bit of the last byte and set its second-highest bit.
    """
    if len(scalar) != KEY_SIZE:
        raise ValueError(f"Scalar must be {KEY_SIZE} bytes.")

    clamped = bytearray(scalar)
    clamped[0] &= 248
    clamped[31] &= 127
    clamped[31] |= 64
    return bytes(clamped)


def ed25519_base_mult(scalar: bytes) -> bytes:
    """
    Multiply the ed25519 base point by a 32-byte little-endian scalar without
    re-clamping it, returning the compressed point.

    Raises:
    MissingCurvePrimitive: If libsodium was built without ed25519 scalar
    multiplication.
    """
    if not bindings.has_crypto_scalarmult_ed25519:
        raise MissingCurvePrimitive(
            "libsodium does not provide ed25519 scalar multiplication."
        )

    return bindings.crypto_scalarmult_ed25519_base_noclamp(scalar)


def derive_secondary_key(
    primary_private_key: Union[int, bytes, str],
    base_mult: Optional[BaseMultiplication] = None,
) -> DerivedKeyMaterial:
    """
    Deterministically derive the ed25519 key pair for a secp256k1 private key.

    Parameters:
    primary_private_key (Union[int, bytes, str]): The secp256k1 scalar, as an
        integer, 32 raw bytes or 64 hex characters.
    base_mult (Optional[BaseMultiplication]): The scalar base multiplication to
        use. Defaults to libsodium's.

    Returns:
    DerivedKeyMaterial: The clamped scalar and the 32-byte public key.

    Raises:
    InvalidKeyLength: If the private key is not 32 bytes.
    MissingCurvePrimitive: If no base multiplication is available.
    """
    if isinstance(primary_private_key, int):
        primary = int_to_bytes(primary_private_key)
    else:
        primary = to_bytes32(primary_private_key)

    if base_mult is None:
        base_mult = ed25519_base_mult

    private_scalar = clamp(hmac_sha512(ED25519_DERIVATION_KEY, primary)[:KEY_SIZE])
    public_key = base_mult(private_scalar)
    if public_key is None or len(public_key) != KEY_SIZE:
        raise MissingCurvePrimitive("ed25519 base multiplication returned no point.")

    return DerivedKeyMaterial(private_scalar=private_scalar, public_key=public_key)


def convert_nsec_to_ss58(
    nsec: str,
    network_id: int = GENERIC_SUBSTRATE,
    base_mult: Optional[BaseMultiplication] = None,
) -> Union[SubstrateAccount, ConversionFailure]:
    """
    Convert a Nostr nsec into the SS58 address of its derived ed25519 key.

    Malformed input (bad bech32, wrong prefix, wrong length, network id out of
    range) is reported as a ConversionFailure value.

    Parameters:
    nsec (str): The bech32 private key with prefix "nsec".
    network_id (int): The SS58 address type.
    base_mult (Optional[BaseMultiplication]): Passed to derive_secondary_key.

    Returns:
    Union[SubstrateAccount, ConversionFailure]: The account bundle or the
    reason the conversion failed.

    Raises:
    MissingCurvePrimitive: If ed25519 scalar multiplication is unavailable.
    """
    try:
        secp_private = decode_nsec(nsec)
        derived = derive_secondary_key(secp_private, base_mult=base_mult)
        address = ss58.encode(derived.public_key, network_id)
    except MissingCurvePrimitive:
        raise
    except NostrKeyError as e:
        logger.info("nsec conversion failed: %s", type(e).__name__)
        return ConversionFailure(error=type(e).__name__, reason=str(e))

    logger.debug("Derived SS58 address %s for network %d", address, network_id)
    return SubstrateAccount(
        nsec=nsec,
        secp256k1_private=secp_private.hex(),
        ed25519_private=derived.private_scalar.hex(),
        ed25519_public=derived.public_key.hex(),
        ss58_address=address,
        address_type=network_id,
    )
