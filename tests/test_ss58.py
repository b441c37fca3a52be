import unittest

import base58

from nostrkey import ss58
from nostrkey.constants import NETWORKS
from nostrkey.errors import AddressTypeTooLarge, InvalidKeyLength, InvalidSs58Address

# Public key of the well-known //Alice development account.
ALICE = bytes.fromhex("d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d")
ALICE_GENERIC = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
ALICE_POLKADOT = "15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5"


class Ss58Tests(unittest.TestCase):
    def test_known_addresses(self):
        self.assertEqual(ss58.encode(ALICE, 42), ALICE_GENERIC)
        self.assertEqual(ss58.encode(ALICE), ALICE_GENERIC)
        self.assertEqual(ss58.encode(ALICE.hex(), 0), ALICE_POLKADOT)

    def test_encoding_is_stable(self):
        self.assertEqual(ss58.encode(ALICE, 42), ss58.encode(ALICE, 42))

    def test_prefix_boundaries(self):
        self.assertEqual(ss58.network_prefix(0), b"\x00")
        self.assertEqual(ss58.network_prefix(63), b"\x3f")
        self.assertEqual(ss58.network_prefix(64), b"\x40\x01")
        self.assertEqual(ss58.network_prefix(16383), b"\x7f\xff")
        with self.assertRaises(AddressTypeTooLarge):
            ss58.network_prefix(16384)
        with self.assertRaises(AddressTypeTooLarge):
            ss58.encode(ALICE, 16384)
        with self.assertRaises(AddressTypeTooLarge):
            ss58.network_prefix(-1)

    def test_address_lengths_follow_prefix_width(self):
        self.assertEqual(len(base58.b58decode(ss58.encode(ALICE, 63))), 35)
        self.assertEqual(len(base58.b58decode(ss58.encode(ALICE, 64))), 36)

    def test_base58_leading_zeros(self):
        self.assertEqual(ss58.b58encode(b""), "1")
        self.assertEqual(ss58.b58encode(b"\x00"), "1")
        self.assertEqual(ss58.b58encode(b"\x00\x00"), "11")
        self.assertEqual(ss58.b58encode(b"\x00\x01"), "12")
        self.assertEqual(ss58.b58encode(b"\x39"), "z")

    def test_decode_round_trip(self):
        for network_id in (0, 2, 5, 42, 63, 64, 255, 16383):
            address = ss58.encode(ALICE, network_id)
            self.assertEqual(ss58.decode(address), (network_id, ALICE))

    def test_decode_rejects_tampering(self):
        replacement = "a" if ALICE_GENERIC[10] != "a" else "b"
        tampered = ALICE_GENERIC[:10] + replacement + ALICE_GENERIC[11:]
        with self.assertRaises(InvalidSs58Address):
            ss58.decode(tampered)
        with self.assertRaises(InvalidSs58Address):
            ss58.decode(ALICE_GENERIC[:-1])
        with self.assertRaises(InvalidSs58Address):
            ss58.decode("0OIl")
        with self.assertRaises(InvalidSs58Address):
            ss58.decode("")

    def test_decode_rejects_non_strings(self):
        for address in (None, 42, ALICE):
            with self.assertRaises(InvalidSs58Address):
                ss58.decode(address)

    def test_network_id_must_be_integer(self):
        for network_id in ("42", 42.0, None, True):
            with self.assertRaises(AddressTypeTooLarge):
                ss58.network_prefix(network_id)
            with self.assertRaises(AddressTypeTooLarge):
                ss58.encode(ALICE, network_id)

    def test_checksum(self):
        payload = b"\x2a" + ALICE
        self.assertEqual(len(ss58.checksum(payload)), 2)
        self.assertNotEqual(ss58.checksum(payload), ss58.checksum(b"\x00" + ALICE))

    def test_key_length(self):
        with self.assertRaises(InvalidKeyLength):
            ss58.encode(ALICE[:31], 42)

    def test_encode_for_networks(self):
        addresses = ss58.encode_for_networks(ALICE)
        self.assertEqual(set(addresses), set(NETWORKS))
        self.assertEqual(addresses[42], ALICE_GENERIC)
        self.assertEqual(addresses[0], ALICE_POLKADOT)


if __name__ == "__main__":
    unittest.main()
