"""
Nostr event ids and signatures.

The event id is the SHA-256 of the compact JSON array
[0, pubkey, created_at, kind, tags, content]. Signing fills in pubkey, id and
sig; verification rechecks the structure, the id and the signature.
"""

import json
import logging
import re
from typing import Any, Dict
from .ecdsa import verify
from .errors import NostrKeyError
from .hashes import sha256
from .keys import KeyPair

logger = logging.getLogger(__name__)

Event = Dict[str, Any]

_HEX64 = re.compile(r"[0-9a-f]{64}")
_HEX128 = re.compile(r"[0-9a-f]{128}")


def serialize_event(event: Event) -> bytes:
    """Return the canonical UTF-8 serialization hashed into the event id."""
    data = [
        0,
        event["pubkey"],
        event["created_at"],
        event["kind"],
        event["tags"],
        event["content"],
    ]
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compute_event_id(event: Event) -> str:
    return sha256(serialize_event(event)).hex()


def validate_event(event: Event) -> bool:
    """
    Check the shape of a signed event: lowercase hex id, pubkey and sig of the
    right lengths, integer kind and created_at, list tags and string content.
    """
    if not isinstance(event, dict):
        return False

    for name, pattern in (("id", _HEX64), ("pubkey", _HEX64), ("sig", _HEX128)):
        value = event.get(name)
        if not isinstance(value, str) or not pattern.fullmatch(value):
            logger.debug("Event has invalid %s", name)
            return False

    for name in ("kind", "created_at"):
        value = event.get(name)
        if not isinstance(value, int) or isinstance(value, bool):
            logger.debug("Event has invalid %s", name)
            return False

    if not isinstance(event.get("tags"), list):
        return False

    return isinstance(event.get("content"), str)


def sign_event(event: Event, key_pair: KeyPair) -> Event:
    """
    Return a copy of event with pubkey, id and sig set for key_pair.

    Parameters:
    event (Event): An event with at least created_at, kind, tags and content.
    key_pair (KeyPair): The signing identity.

    Returns:
    Event: The signed event.
    """
    signed = dict(event)
    signed["pubkey"] = key_pair.public_key_hex
    signed["id"] = compute_event_id(signed)
    signed["sig"] = key_pair.sign(signed["id"]).to_hex()
    return signed


def verify_event(event: Event) -> bool:
    """Check structure, id and signature of an event. Never raises."""
    if not validate_event(event):
        return False

    try:
        event_id = compute_event_id(event)
    except (NostrKeyError, TypeError, ValueError):
        return False

    if event_id != event["id"]:
        logger.debug("Event id does not match its contents")
        return False

    return verify(event["pubkey"], event_id, event["sig"])
