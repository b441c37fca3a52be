"""
Distributed under the MIT software license, see the accompanying file LICENSE
or http://www.opensource.org/licenses/mit-license.php.

This code makes no constant-time guarantees. Do not use it where timing
side channels matter.

This package derives, signs and encodes Nostr identities, and maps them onto
SS58 accounts of Substrate-based ledgers.

Modules:
- modular: Modular exponentiation, inversion and square roots, and fixed-width
  byte conversions.
- point: Defines the Point class for secp256k1 affine point arithmetic.
- ecdsa: Key generation, deterministic low-s signing and x-only verification.
- keys: The caller-owned KeyPair value.
- bech32: The bech32 codec and the npub/nsec helpers.
- derivation: ed25519 key derivation from a Nostr key and nsec conversion.
- ss58: SS58 address encoding and decoding.
- event: Nostr event ids, signing and verification.
- constants: Curve, codec and address parameters.
"""

from .point import Point, G
from .constants import P, N
from .ecdsa import Signature, sign, verify, generate_private_key, public_key_of
from .keys import KeyPair
from .derivation import (
    ConversionFailure,
    DerivedKeyMaterial,
    SubstrateAccount,
    convert_nsec_to_ss58,
    derive_secondary_key,
)
from .event import compute_event_id, sign_event, verify_event
from . import bech32, ss58
