"""
These constants define the elliptic curve secp256k1 used for Nostr identities,
the bech32 alphabet used for npub/nsec strings, and the parameters of the SS58
address format used by Substrate-based ledgers. The curve operates over a
finite field of prime order P, with a base point G of order N, specified by
its coordinates G_x and G_y.
"""

from typing import Dict, Tuple

# secp256k1 constants for elliptic curve cryptography

# The prime modulus of the field
P: int = 2**256 - 2**32 - 977

# The order of the curve
N: int = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# X-coordinate of the generator point G
G_x: int = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798

# Y-coordinate of the generator point G
G_y: int = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

# Constant term of y^2 = x^3 + 7
B: int = 7

# Width of scalars, coordinates and keys in bytes
KEY_SIZE: int = 32

# Upper bound on nonce retries while signing and on draws while sampling keys
MAX_ATTEMPTS: int = 100

# bech32 constants

BECH32_CHARSET: str = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"

BECH32_GENERATOR: Tuple[int, ...] = (
    0x3B6A57B2,
    0x26508E6D,
    0x1EA119FA,
    0x3D4233DD,
    0x2A1462B3,
)

BECH32_CONST: int = 1

BECH32_SEPARATOR: str = "1"

BECH32_CHECKSUM_LENGTH: int = 6

NPUB_PREFIX: str = "npub"

NSEC_PREFIX: str = "nsec"

# SS58 constants

SS58_CONTEXT: bytes = b"SS58PRE"

SS58_CHECKSUM_LENGTH: int = 2

SS58_MAX_NETWORK_ID: int = 16384

# Key material for the HMAC-SHA512 step deriving the ed25519 scalar
ED25519_DERIVATION_KEY: bytes = b"ed25519 seed"

GENERIC_SUBSTRATE: int = 42

NETWORKS: Dict[int, str] = {
    42: "Generic Substrate",
    0: "Polkadot",
    2: "Kusama",
    5: "Astar",
}
