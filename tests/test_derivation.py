import hashlib
import hmac
import unittest
from unittest import mock

from nacl import bindings
from nacl.signing import SigningKey

from nostrkey import KeyPair, ss58
from nostrkey.bech32 import encode, encode_npub, encode_nsec
from nostrkey.derivation import (
    ConversionFailure,
    SubstrateAccount,
    clamp,
    convert_nsec_to_ss58,
    derive_secondary_key,
    ed25519_base_mult,
)
from nostrkey.errors import MissingCurvePrimitive

NSEC = "nsec1vl029mgpspedva04g90vltkh6fvh240zqtv9k0t9af8935ke9laqsnlfe5"
NSEC_HEX = "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"
NSEC_ED25519_PUBLIC = "6fc7f20ae1754a8ebcb458014a299dddb9e3517644d8ac8c38c0fcf74aeedf6e"
NSEC_SS58_GENERIC = "5EbGZvwi2pTFSDVEqtDCY78SzwfqqFuTXoryrYa9BZ5PsiXa"

# RFC 8032, section 7.1, TEST 1
RFC8032_SECRET = bytes.fromhex(
    "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
)
RFC8032_PUBLIC = bytes.fromhex(
    "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
)


def expected_scalar(private_key: bytes) -> bytes:
    h = bytearray(hmac.new(b"ed25519 seed", private_key, hashlib.sha512).digest()[:32])
    h[0] &= 248
    h[31] &= 127
    h[31] |= 64
    return bytes(h)


class ClampTests(unittest.TestCase):
    def test_clamp_bits(self):
        clamped = clamp(b"\xff" * 32)
        self.assertEqual(clamped[0], 0xF8)
        self.assertEqual(clamped[31], 0x7F)
        clamped = clamp(b"\x00" * 32)
        self.assertEqual(clamped[0], 0x00)
        self.assertEqual(clamped[31], 0x40)
        self.assertEqual(clamped[1:31], b"\x00" * 30)

    def test_clamp_length(self):
        with self.assertRaises(ValueError):
            clamp(b"\x00" * 31)


class BaseMultiplicationTests(unittest.TestCase):
    def test_rfc8032_public_key(self):
        scalar = clamp(hashlib.sha512(RFC8032_SECRET).digest()[:32])
        self.assertEqual(ed25519_base_mult(scalar), RFC8032_PUBLIC)

    def test_matches_signing_key(self):
        seed = bytes(range(32))
        scalar = clamp(hashlib.sha512(seed).digest()[:32])
        self.assertEqual(ed25519_base_mult(scalar), bytes(SigningKey(seed).verify_key))

    def test_missing_primitive_fails_loudly(self):
        with mock.patch.object(bindings, "has_crypto_scalarmult_ed25519", False):
            with self.assertRaises(MissingCurvePrimitive):
                ed25519_base_mult(clamp(b"\x01" * 32))
            with self.assertRaises(MissingCurvePrimitive):
                derive_secondary_key(NSEC_HEX)
            with self.assertRaises(MissingCurvePrimitive):
                convert_nsec_to_ss58(NSEC)

    def test_broken_primitive_fails_loudly(self):
        with self.assertRaises(MissingCurvePrimitive):
            derive_secondary_key(NSEC_HEX, base_mult=lambda scalar: None)
        with self.assertRaises(MissingCurvePrimitive):
            derive_secondary_key(NSEC_HEX, base_mult=lambda scalar: b"")


class DerivationTests(unittest.TestCase):
    def test_scalar_is_clamped_hmac(self):
        derived = derive_secondary_key(bytes.fromhex(NSEC_HEX))
        self.assertEqual(derived.private_scalar, expected_scalar(bytes.fromhex(NSEC_HEX)))
        self.assertEqual(derived.public_key, ed25519_base_mult(derived.private_scalar))
        self.assertEqual(
            derived.public_key, bindings.crypto_scalarmult_ed25519_base(derived.private_scalar)
        )

    def test_deterministic(self):
        first = derive_secondary_key(NSEC_HEX)
        second = derive_secondary_key(bytes.fromhex(NSEC_HEX))
        third = derive_secondary_key(int(NSEC_HEX, 16))
        self.assertEqual(first, second)
        self.assertEqual(first, third)

    def test_distinct_inputs_give_distinct_keys(self):
        public_keys = {derive_secondary_key(i).public_key for i in range(1, 21)}
        self.assertEqual(len(public_keys), 20)

    def test_injected_primitive(self):
        derived = derive_secondary_key(NSEC_HEX, base_mult=lambda scalar: scalar[::-1])
        self.assertEqual(derived.public_key, derived.private_scalar[::-1])

    def test_repr_hides_secret(self):
        derived = derive_secondary_key(NSEC_HEX)
        self.assertNotIn(derived.private_scalar.hex(), repr(derived))

    def test_key_pair_shortcut(self):
        key_pair = KeyPair.from_private_key(NSEC)
        self.assertEqual(key_pair.derive_secondary_key(), derive_secondary_key(NSEC_HEX))


class ConversionTests(unittest.TestCase):
    def test_convert_nsec(self):
        account = convert_nsec_to_ss58(NSEC, 42)
        self.assertIsInstance(account, SubstrateAccount)
        self.assertEqual(account.nsec, NSEC)
        self.assertEqual(account.secp256k1_private, NSEC_HEX)
        self.assertEqual(account.ed25519_private, expected_scalar(bytes.fromhex(NSEC_HEX)).hex())
        self.assertEqual(account.address_type, 42)
        self.assertEqual(
            ss58.decode(account.ss58_address), (42, bytes.fromhex(account.ed25519_public))
        )
        self.assertEqual(account.to_dict()["ss58_address"], account.ss58_address)

    def test_known_answer(self):
        account = convert_nsec_to_ss58(NSEC, 42)
        self.assertEqual(account.ed25519_public, NSEC_ED25519_PUBLIC)
        self.assertEqual(account.ss58_address, NSEC_SS58_GENERIC)

    def test_conversion_is_stable(self):
        self.assertEqual(convert_nsec_to_ss58(NSEC), convert_nsec_to_ss58(NSEC))

    def test_networks_share_the_public_key(self):
        generic = convert_nsec_to_ss58(NSEC, 42)
        for network_id in (0, 2, 5, 63, 64, 16383):
            account = convert_nsec_to_ss58(NSEC, network_id)
            self.assertEqual(account.ed25519_public, generic.ed25519_public)
            self.assertEqual(ss58.decode(account.ss58_address)[0], network_id)

    def test_malformed_input_is_a_failure_value(self):
        cases = {
            encode_npub(bytes.fromhex(NSEC_HEX)): "InvalidBech32Prefix",
            NSEC[:-1] + ("q" if NSEC[-1] != "q" else "p"): "InvalidBech32Checksum",
            "nsec": "InvalidBech32String",
        }
        for nsec, error in cases.items():
            result = convert_nsec_to_ss58(nsec)
            self.assertIsInstance(result, ConversionFailure)
            self.assertEqual(result.error, error)

    def test_wrong_length_and_network(self):
        result = convert_nsec_to_ss58(encode("nsec", b"\x01" * 31))
        self.assertEqual(result.error, "InvalidKeyLength")
        result = convert_nsec_to_ss58(NSEC, 16384)
        self.assertEqual(result.error, "AddressTypeTooLarge")
        self.assertIn("error", result.to_dict())

    def test_non_integer_network_is_a_failure_value(self):
        for network_id in ("42", None, 4.2, False):
            result = convert_nsec_to_ss58(NSEC, network_id)
            self.assertIsInstance(result, ConversionFailure)
            self.assertEqual(result.error, "AddressTypeTooLarge")

    def test_round_trip_through_nsec(self):
        key_pair = KeyPair.from_private_key(NSEC_HEX)
        self.assertEqual(encode_nsec(NSEC_HEX), key_pair.nsec)
        account = convert_nsec_to_ss58(key_pair.nsec)
        self.assertEqual(account.ed25519_public, key_pair.derive_secondary_key().public_key.hex())


if __name__ == "__main__":
    unittest.main()
