import argparse
import logging
import sys
from typing import List, Optional

from . import bech32
from .constants import GENERIC_SUBSTRATE, NETWORKS
from .derivation import ConversionFailure, convert_nsec_to_ss58
from .ecdsa import verify as verify_signature
from .hashes import sha256
from .keys import KeyPair

logger = logging.getLogger(__name__)


def keygen(args):
    key_pair = KeyPair.generate()
    print(f"Private key: {key_pair.private_key_hex}")
    print(f"Public key:  {key_pair.public_key_hex}")
    print(f"nsec:        {key_pair.nsec}")
    print(f"npub:        {key_pair.npub}")
    return 0


def sign(args):
    key_pair = KeyPair.from_private_key(args.private_key)
    digest = sha256(args.message.encode("utf-8"))
    print(f"Digest:    {digest.hex()}")
    print(f"Signature: {key_pair.sign(digest).to_hex()}")
    return 0


def verify(args):
    public_key = args.public_key
    if public_key.startswith("npub"):
        public_key = bech32.decode_npub(public_key)
    digest = sha256(args.message.encode("utf-8"))
    if verify_signature(public_key, digest, args.signature):
        print("Signature is valid.")
        return 0
    print("Signature is NOT valid.")
    return 1


def encode(args):
    print(bech32.encode(args.prefix, bytes.fromhex(args.hex)))
    return 0


def decode(args):
    hrp, payload = bech32.decode(args.bech32)
    print(f"Prefix:  {hrp}")
    print(f"Payload: {payload.hex()}")
    return 0


def convert(args):
    result = convert_nsec_to_ss58(args.nsec, args.network)
    if isinstance(result, ConversionFailure):
        print(f"Error: {result.reason}", file=sys.stderr)
        return 1

    for network_id, name in NETWORKS.items():
        account = convert_nsec_to_ss58(args.nsec, network_id)
        print(f"{name:<20} (type {network_id:>2}): {account.ss58_address}")

    print()
    print(f"Detailed conversion (type {result.address_type}):")
    print("-" * 45)
    print(f"SECP256K1 Private: {result.secp256k1_private}")
    print(f"ED25519 Private:   {result.ed25519_private}")
    print(f"ED25519 Public:    {result.ed25519_public}")
    print(f"SS58 Address:      {result.ss58_address}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nostrkey",
        description="Nostr keys, signatures and derived SS58 addresses.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers()

    parser_keygen = subparsers.add_parser("keygen", help="Generate a key pair.")
    parser_keygen.set_defaults(func=keygen)

    parser_sign = subparsers.add_parser("sign", help="Sign a message.")
    parser_sign.add_argument(
        "--private-key", type=str, required=True, help="Private key, hex or nsec."
    )
    parser_sign.add_argument("--message", type=str, required=True, help="Message to sign.")
    parser_sign.set_defaults(func=sign)

    parser_verify = subparsers.add_parser("verify", help="Verify a message.")
    parser_verify.add_argument(
        "--public-key", type=str, required=True, help="Public key, hex or npub."
    )
    parser_verify.add_argument(
        "--message", type=str, required=True, help="Message to verify."
    )
    parser_verify.add_argument(
        "--signature", type=str, required=True, help="128 hex character signature."
    )
    parser_verify.set_defaults(func=verify)

    parser_encode = subparsers.add_parser("encode", help="bech32-encode hex bytes.")
    parser_encode.add_argument("--prefix", type=str, default="npub", help="Prefix.")
    parser_encode.add_argument("hex", type=str, help="Payload in hex.")
    parser_encode.set_defaults(func=encode)

    parser_decode = subparsers.add_parser("decode", help="Decode a bech32 string.")
    parser_decode.add_argument("bech32", type=str, help="npub, nsec or other string.")
    parser_decode.set_defaults(func=decode)

    parser_convert = subparsers.add_parser(
        "convert", help="Derive SS58 addresses from an nsec."
    )
    parser_convert.add_argument("nsec", type=str, help="Nostr private key (nsec1...).")
    parser_convert.add_argument(
        "--network",
        type=int,
        default=GENERIC_SUBSTRATE,
        help="SS58 address type for the detailed output.",
    )
    parser_convert.set_defaults(func=convert)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    try:
        return args.func(args)
    except ValueError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
