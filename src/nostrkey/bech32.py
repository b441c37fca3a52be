"""
This module implements the bech32 checksummed text encoding (BIP-173) and the
NIP-19 npub/nsec helpers built on top of it.

An encoded string is prefix + "1" + data characters + six checksum
characters. The checksum is a BCH code over 5-bit words computed by polymod
against a fixed five-element generator. Decoding always re-verifies the
checksum before the payload is returned.

The strict functions (decode, decode_npub, decode_nsec) raise Bech32Error
subclasses. The *_to_hex helpers and decode_or_none return None instead, for
callers probing user input.
"""

from typing import Iterable, List, Optional, Sequence, Tuple
from .constants import (
    BECH32_CHARSET,
    BECH32_CHECKSUM_LENGTH,
    BECH32_CONST,
    BECH32_GENERATOR,
    BECH32_SEPARATOR,
    KEY_SIZE,
    N,
    NPUB_PREFIX,
    NSEC_PREFIX,
)
from .errors import (
    Bech32Error,
    InvalidBech32Checksum,
    InvalidBech32Prefix,
    InvalidBech32String,
    InvalidKeyLength,
    NostrKeyError,
    PaddingError,
)
from .modular import bytes_to_int, hex_to_bytes, to_bytes32


def convert_bits(
    data: Iterable[int], from_bits: int, to_bits: int, pad: bool = True
) -> List[int]:
    """
    Regroup a sequence of from_bits-wide values into to_bits-wide values.

    Bits accumulate in a scratch register and are emitted most significant
    first. With pad set, trailing bits are zero-filled into a final group.
    Without it, leftover bits must be fewer than from_bits and all zero.

    Parameters:
    data (Iterable[int]): The input groups.
    from_bits (int): The width of each input group.
    to_bits (int): The width of each output group.
    pad (bool): Whether to zero-fill a partial final group.

    Returns:
    List[int]: The regrouped values.

    Raises:
    PaddingError: If an input value is out of range or, without padding,
    non-zero or excess bits are left over.
    """
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1

    for value in data:
        if value < 0 or value >> from_bits:
            raise PaddingError(f"Value {value} does not fit in {from_bits} bits.")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            ret.append((acc >> bits) & maxv)

    if pad:
        if bits:
            ret.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or ((acc << (to_bits - bits)) & maxv):
        raise PaddingError("Invalid padding in bech32 data.")

    return ret


def polymod(values: Iterable[int]) -> int:
    """Compute the bech32 BCH checksum state over 5-bit values."""
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i, generator in enumerate(BECH32_GENERATOR):
            if (top >> i) & 1:
                chk ^= generator

    return chk


def hrp_expand(hrp: str) -> List[int]:
    """Expand the prefix: high 3 bits of each char, a zero, then low 5 bits."""
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def create_checksum(hrp: str, data: Sequence[int]) -> List[int]:
    """Return the six 5-bit checksum words for hrp and data."""
    values = hrp_expand(hrp) + list(data)
    mod = polymod(values + [0] * BECH32_CHECKSUM_LENGTH) ^ BECH32_CONST

    return [
        (mod >> 5 * (BECH32_CHECKSUM_LENGTH - 1 - i)) & 31
        for i in range(BECH32_CHECKSUM_LENGTH)
    ]


def verify_checksum(hrp: str, data: Sequence[int]) -> bool:
    """Check that data, including its six trailing checksum words, is valid."""
    return polymod(hrp_expand(hrp) + list(data)) == BECH32_CONST


def _check_hrp(hrp: str) -> None:
    if not hrp:
        raise InvalidBech32Prefix("Human-readable prefix must not be empty.")
    if any(ord(c) < 33 or ord(c) > 126 for c in hrp):
        raise InvalidBech32Prefix("Human-readable prefix has invalid characters.")
    if hrp != hrp.lower():
        raise InvalidBech32Prefix("Human-readable prefix must be lowercase.")


def encode_words(hrp: str, words: Sequence[int]) -> str:
    """
    Encode 5-bit words under a human-readable prefix.

    Raises:
    InvalidBech32Prefix: If the prefix is empty, uppercase or not printable.
    PaddingError: If a word does not fit in 5 bits.
    """
    _check_hrp(hrp)
    if any(word < 0 or word > 31 for word in words):
        raise PaddingError("bech32 words must fit in 5 bits.")

    combined = list(words) + create_checksum(hrp, words)
    return hrp + BECH32_SEPARATOR + "".join(BECH32_CHARSET[d] for d in combined)


def decode_words(bech: str) -> Tuple[str, List[int]]:
    """
    Decode a bech32 string into its prefix and 5-bit data words, with the
    checksum verified and stripped.

    Parameters:
    bech (str): The encoded string.

    Returns:
    Tuple[str, List[int]]: The lowercase prefix and the data words.

    Raises:
    InvalidBech32String: If the string has out-of-range or unknown
    characters, mixed case, or a missing or misplaced separator.
    InvalidBech32Checksum: If the checksum does not validate.
    """
    if not isinstance(bech, str):
        raise InvalidBech32String("bech32 input must be a string.")
    if any(ord(c) < 33 or ord(c) > 126 for c in bech):
        raise InvalidBech32String("bech32 string has out-of-range characters.")
    if bech.lower() != bech and bech.upper() != bech:
        raise InvalidBech32String("bech32 string mixes upper and lower case.")

    bech = bech.lower()
    pos = bech.rfind(BECH32_SEPARATOR)
    if pos < 1 or pos + 1 + BECH32_CHECKSUM_LENGTH > len(bech):
        raise InvalidBech32String("bech32 separator is missing or misplaced.")

    hrp = bech[:pos]
    data_part = bech[pos + 1 :]
    if any(c not in BECH32_CHARSET for c in data_part):
        raise InvalidBech32String("bech32 data has characters outside the charset.")

    data = [BECH32_CHARSET.index(c) for c in data_part]
    if not verify_checksum(hrp, data):
        raise InvalidBech32Checksum("bech32 checksum does not validate.")

    return hrp, data[:-BECH32_CHECKSUM_LENGTH]


def encode(hrp: str, payload: bytes) -> str:
    """Encode a byte payload as a bech32 string under hrp."""
    return encode_words(hrp, convert_bits(payload, 8, 5, pad=True))


def decode(bech: str, expected_hrp: Optional[str] = None) -> Tuple[str, bytes]:
    """
    Decode a bech32 string into its prefix and byte payload.

    Parameters:
    bech (str): The encoded string.
    expected_hrp (Optional[str]): If given, the prefix the string must carry.

    Returns:
    Tuple[str, bytes]: The prefix and the payload.

    Raises:
    Bech32Error: On any malformed, mis-prefixed or unverifiable input.
    """
    hrp, words = decode_words(bech)
    if expected_hrp is not None and hrp != expected_hrp:
        raise InvalidBech32Prefix(f"Expected prefix {expected_hrp!r}, got {hrp!r}.")

    return hrp, bytes(convert_bits(words, 5, 8, pad=False))


def decode_or_none(bech: str) -> Optional[Tuple[str, bytes]]:
    """Like decode, but return None for malformed input."""
    try:
        return decode(bech)
    except Bech32Error:
        return None


def _decode_key(bech: str, hrp: str) -> bytes:
    _, payload = decode(bech, expected_hrp=hrp)
    if len(payload) != KEY_SIZE:
        raise InvalidKeyLength(f"{hrp} payload must be {KEY_SIZE} bytes.")

    return payload


def encode_npub(public_key: bytes) -> str:
    """Encode a 32-byte x-only public key (raw or hex) as npub."""
    return encode(NPUB_PREFIX, to_bytes32(public_key))


def encode_nsec(private_key: bytes) -> str:
    """Encode a 32-byte private key (raw or hex) as nsec."""
    return encode(NSEC_PREFIX, to_bytes32(private_key))


def decode_npub(npub: str) -> bytes:
    """Decode an npub string to the 32-byte public key."""
    return _decode_key(npub, NPUB_PREFIX)


def decode_nsec(nsec: str) -> bytes:
    """Decode an nsec string to the 32-byte private key."""
    return _decode_key(nsec, NSEC_PREFIX)


def hex_to_npub(public_key_hex: str) -> Optional[str]:
    try:
        return encode_npub(public_key_hex)
    except NostrKeyError:
        return None


def hex_to_nsec(private_key_hex: str) -> Optional[str]:
    try:
        return encode_nsec(private_key_hex)
    except NostrKeyError:
        return None


def npub_to_hex(npub: str) -> Optional[str]:
    try:
        return decode_npub(npub).hex()
    except NostrKeyError:
        return None


def nsec_to_hex(nsec: str) -> Optional[str]:
    try:
        return decode_nsec(nsec).hex()
    except NostrKeyError:
        return None


def is_valid_private_key_hex(private_key_hex: str) -> bool:
    """Check for 64 hex characters encoding a scalar in [1, N - 1]."""
    try:
        value = bytes_to_int(hex_to_bytes(private_key_hex))
    except NostrKeyError:
        return False

    return 1 <= value < N


def is_valid_nsec(nsec: str) -> bool:
    return nsec_to_hex(nsec) is not None


def normalize_private_key(private_key: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Accept a private key as nsec or hex and return (hex, nsec), or
    (None, None) if it is neither.
    """
    if not isinstance(private_key, str):
        return None, None

    private_key = private_key.strip()
    private_key_hex = nsec_to_hex(private_key)
    if private_key_hex is not None:
        if not is_valid_private_key_hex(private_key_hex):
            return None, None
        return private_key_hex, private_key.lower()
    if is_valid_private_key_hex(private_key):
        return private_key.lower(), hex_to_nsec(private_key)

    return None, None
