"""
totpgen Error Taxonomy
Decode failures and keyed-hash failures are kept apart so callers can tell
"fix your secret string" from "the crypto backend refused".
"""


class TotpError(Exception):
    """Base class for every error raised by totpgen."""
    pass


class DecodeError(TotpError, ValueError):
    """Raised when a base32 secret cannot be decoded."""
    pass


class InvalidCharacter(DecodeError):
    """
    Raised when the input holds a character outside A-Z, a-z, 2-7.

    Attributes:
        char: The offending character.
        position: Zero-based index of the character in the input.
    """

    def __init__(self, char: str, position: int = -1):
        self.char = char
        self.position = position
        where = f" at position {position}" if position >= 0 else ""
        super().__init__(
            f"Invalid base32 char {char!r}{where}, should be A-Z, 2-7"
        )


class CryptoError(TotpError):
    """Raised when the keyed-hash primitive rejects the key or algorithm."""
    pass


class InvalidKeyLength(CryptoError):
    """Raised when a key is refused because of its length."""
    pass
