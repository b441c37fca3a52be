"""
This module provides the modular arithmetic helpers used throughout the
library: exponentiation, inversion via the extended Euclidean algorithm, and
square roots in prime fields whose modulus is congruent to 3 mod 4, such as
the secp256k1 field.

It also holds the fixed-width, big-endian conversions between integers, bytes
and hexadecimal strings that every serialized key and signature goes through.
"""

from typing import Union
from .constants import KEY_SIZE
from .errors import InvalidHexEncoding, InvalidKeyLength, NoSquareRoot


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base^exponent mod modulus by square-and-multiply.

    Parameters:
    base (int): The base.
    exponent (int): A non-negative exponent.
    modulus (int): A positive modulus.

    Returns:
    int: The result, reduced into [0, modulus).

    Raises:
    ValueError: If the exponent is negative or the modulus is not positive.
    """
    if exponent < 0:
        raise ValueError("Exponent must be non-negative.")
    if modulus < 1:
        raise ValueError("Modulus must be positive.")

    result = 1 % modulus
    base %= modulus
    while exponent:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1

    return result


def mod_inverse(value: int, modulus: int) -> int:
    """
    Compute the multiplicative inverse of value modulo modulus using the
    extended Euclidean algorithm.

    Parameters:
    value (int): The value to invert.
    modulus (int): The modulus.

    Returns:
    int: x in [0, modulus) such that value * x = 1 (mod modulus).

    Raises:
    ValueError: If value and modulus are not coprime.
    """
    old_r, r = value % modulus, modulus
    old_s, s = 1, 0

    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s

    if old_r != 1:
        raise ValueError("Value has no inverse modulo the given modulus.")

    return old_s % modulus


def mod_sqrt(value: int, prime: int) -> int:
    """
    Compute a square root of value modulo a prime p with p = 3 (mod 4).

    Euler's criterion decides residuosity first: value^((p - 1) / 2) must be
    1, otherwise there is no root. The root itself is value^((p + 1) / 4).
    Either of the two roots may be returned; callers pick the parity they need.

    Parameters:
    value (int): The value whose square root is wanted.
    prime (int): An odd prime congruent to 3 modulo 4.

    Returns:
    int: A square root of value modulo prime.

    Raises:
    ValueError: If prime is not congruent to 3 modulo 4.
    NoSquareRoot: If value is not a quadratic residue.
    """
    if prime % 4 != 3:
        raise ValueError("Modulus must be congruent to 3 mod 4.")

    value %= prime
    if mod_pow(value, (prime - 1) // 2, prime) != 1:
        raise NoSquareRoot("Value is not a quadratic residue.")

    return mod_pow(value, (prime + 1) // 4, prime)


def int_to_bytes(value: int, length: int = KEY_SIZE) -> bytes:
    """Encode a non-negative integer as big-endian bytes, left-padded with zeros."""
    if value < 0:
        raise ValueError("Value must be non-negative.")
    try:
        return value.to_bytes(length, "big")
    except OverflowError as e:
        raise InvalidKeyLength(f"Value does not fit in {length} bytes.") from e


def bytes_to_int(data: bytes) -> int:
    """Decode big-endian bytes to an integer."""
    return int.from_bytes(data, "big")


def hex_to_bytes(hex_string: str, length: int = KEY_SIZE) -> bytes:
    """
    Decode a fixed-length hexadecimal string.

    Parameters:
    hex_string (str): The hexadecimal text, without a 0x prefix.
    length (int): The exact number of bytes expected.

    Returns:
    bytes: The decoded bytes.

    Raises:
    InvalidHexEncoding: If the string is not valid hexadecimal.
    InvalidKeyLength: If the decoded value is not exactly length bytes.
    """
    if not isinstance(hex_string, str):
        raise InvalidHexEncoding("Hex input must be a string.")
    try:
        data = bytes.fromhex(hex_string)
    except ValueError as e:
        raise InvalidHexEncoding("Invalid hexadecimal string.") from e
    if len(data) != length:
        raise InvalidKeyLength(f"Expected {length} bytes, got {len(data)}.")

    return data


def to_bytes32(value: Union[bytes, bytearray, str]) -> bytes:
    """Accept 32 raw bytes or 64 hex characters and return the raw bytes."""
    if isinstance(value, str):
        return hex_to_bytes(value, KEY_SIZE)
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidKeyLength("Expected bytes or a hexadecimal string.")
    data = bytes(value)
    if len(data) != KEY_SIZE:
        raise InvalidKeyLength(f"Expected {KEY_SIZE} bytes, got {len(data)}.")

    return data
