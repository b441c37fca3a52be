"""
Exception types raised by nostrkey.

Every error derives from NostrKeyError, which is itself a ValueError, so code
that guards calls with ``except ValueError`` keeps working. Decoding and
verification entry points that promise a boolean or a failure value catch
these internally; see the individual functions.
"""


class NostrKeyError(ValueError):
    """Base class for all nostrkey errors."""


class InvalidKeyLength(NostrKeyError):
    """A key, digest or payload does not have the required byte length."""


class InvalidHexEncoding(NostrKeyError):
    """A string that should be hexadecimal is not."""


class InvalidPrivateKey(NostrKeyError):
    """A private scalar lies outside [1, N - 1]."""


class NoSquareRoot(NostrKeyError):
    """The value is not a quadratic residue modulo the field prime."""


class Bech32Error(NostrKeyError):
    """Base class for bech32 decoding and encoding failures."""


class InvalidBech32String(Bech32Error):
    """Malformed bech32 string: bad character, mixed case or no separator."""


class InvalidBech32Checksum(Bech32Error):
    """The bech32 checksum does not validate."""


class InvalidBech32Prefix(Bech32Error):
    """The human-readable prefix is not the one that was expected."""


class PaddingError(Bech32Error):
    """Leftover bits remain after regrouping 5-bit words into bytes."""


class SignatureGenerationExhausted(NostrKeyError):
    """No usable nonce was found within the attempt bound."""


class KeyGenerationExhausted(NostrKeyError):
    """The randomness source never produced a scalar in range."""


class AddressTypeTooLarge(NostrKeyError):
    """The SS58 network identifier does not fit the two-byte prefix."""


class InvalidSs58Address(NostrKeyError):
    """An SS58 string could not be decoded or its checksum is wrong."""


class MissingCurvePrimitive(NostrKeyError, RuntimeError):
    """The ed25519 scalar multiplication primitive is not available."""
