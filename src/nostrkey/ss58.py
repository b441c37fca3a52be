"""
This module encodes and decodes SS58 addresses, the base-58 account format of
Substrate-based ledgers.

An address is base58(prefix || public_key || checksum), where prefix is one
byte for network ids below 64 and two bytes, [(id & 0x3F) | 0x40, id >> 6],
for ids below 16384. The checksum is the first two bytes of
BLAKE2b-512("SS58PRE" || prefix || public_key).
"""

from typing import Dict, Tuple
import base58
from .constants import (
    KEY_SIZE,
    NETWORKS,
    SS58_CHECKSUM_LENGTH,
    SS58_CONTEXT,
    SS58_MAX_NETWORK_ID,
)
from .errors import AddressTypeTooLarge, InvalidSs58Address
from .hashes import blake2b_512
from .modular import to_bytes32

ALPHABET = base58.BITCOIN_ALPHABET


def b58encode(data: bytes) -> str:
    """
    Base-58 encode data, mapping each leading zero byte to a leading "1".
    Empty input encodes to a single "1".
    """
    encoded = base58.b58encode(data).decode("ascii")
    return encoded or ALPHABET[:1].decode("ascii")


def network_prefix(network_id: int) -> bytes:
    """
    Return the address-type prefix bytes for a network id.

    Raises:
    AddressTypeTooLarge: If network_id is not an integer, is negative or is
    at least 16384.
    """
    if not isinstance(network_id, int) or isinstance(network_id, bool):
        raise AddressTypeTooLarge(f"Address type {network_id!r} is not an integer.")
    if network_id < 0 or network_id >= SS58_MAX_NETWORK_ID:
        raise AddressTypeTooLarge(f"Address type {network_id} is out of range.")
    if network_id < 64:
        return bytes([network_id])

    return bytes([(network_id & 0x3F) | 0x40, (network_id >> 6) & 0xFF])


def checksum(payload: bytes) -> bytes:
    """Return the two checksum bytes for prefix || public_key."""
    return blake2b_512(SS58_CONTEXT + payload)[:SS58_CHECKSUM_LENGTH]


def encode(public_key: bytes, network_id: int = 42) -> str:
    """
    Encode a 32-byte public key as an SS58 address.

    Parameters:
    public_key (bytes): The account public key, raw or as 64 hex characters.
    network_id (int): The address type of the target network.

    Returns:
    str: The base-58 address.

    Raises:
    InvalidKeyLength: If the public key is not 32 bytes.
    AddressTypeTooLarge: If the network id does not fit the prefix.
    """
    payload = network_prefix(network_id) + to_bytes32(public_key)
    return b58encode(payload + checksum(payload))


def decode(address: str) -> Tuple[int, bytes]:
    """
    Decode an SS58 address to its network id and 32-byte public key.

    Raises:
    InvalidSs58Address: If the string is not base-58, has the wrong length or
    prefix layout, or its checksum does not match.
    """
    if not isinstance(address, str):
        raise InvalidSs58Address("Address must be a string.")

    try:
        data = base58.b58decode(address)
    except ValueError as e:
        raise InvalidSs58Address("Address is not valid base-58.") from e

    if not data:
        raise InvalidSs58Address("Address is empty.")

    first = data[0]
    if first < 64:
        network_id = first
        prefix_length = 1
    elif first < 128:
        if len(data) < 2:
            raise InvalidSs58Address("Address is truncated.")
        network_id = (first & 0x3F) | (data[1] << 6)
        prefix_length = 2
    else:
        raise InvalidSs58Address(f"Unsupported address prefix byte {first}.")

    expected_length = prefix_length + KEY_SIZE + SS58_CHECKSUM_LENGTH
    if len(data) != expected_length:
        raise InvalidSs58Address(
            f"Address decodes to {len(data)} bytes, expected {expected_length}."
        )

    payload = data[: prefix_length + KEY_SIZE]
    if checksum(payload) != data[prefix_length + KEY_SIZE :]:
        raise InvalidSs58Address("Address checksum does not match.")
    if network_prefix(network_id) != payload[:prefix_length]:
        raise InvalidSs58Address("Address prefix is not canonical.")

    return network_id, payload[prefix_length:]


def encode_for_networks(public_key: bytes) -> Dict[int, str]:
    """Encode a public key for every network in the registry."""
    public_key = to_bytes32(public_key)
    return {network_id: encode(public_key, network_id) for network_id in NETWORKS}
