"""
totpgen Base32 Decoder
Lenient RFC 4648 base32 decoding for TOTP shared secrets.

Padding is not accepted and a trailing partial byte is dropped, which is how
authenticator apps usually treat secrets copied by hand.
"""

from typing import Dict

from totpgen.errors import InvalidCharacter

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
BITS_PER_CHAR = 5

# ASCII-only folding: str.upper() would map e.g. "ß" to "SS"
_VALUES: Dict[str, int] = {char: index for index, char in enumerate(BASE32_ALPHABET)}
_VALUES.update({char.lower(): index for char, index in list(_VALUES.items())})


def decode(text: str) -> bytes:
    """
    Decode a base32 string into raw bytes.

    Args:
        text: Base32 characters (A-Z, 2-7, any case). No padding, no spaces.

    Returns:
        Decoded bytes. Trailing bits that do not fill a whole byte are dropped.

    Raises:
        InvalidCharacter: On the first character outside the alphabet.

    Example:
        >>> decode("MZXW6")
        b'foo'
        >>> decode("mzxw6ytboi")
        b'foobar'
    """
    output = bytearray()
    buffer = 0
    bits = 0

    for position, char in enumerate(text):
        value = _VALUES.get(char)
        if value is None:
            raise InvalidCharacter(char, position)

        buffer = (buffer << BITS_PER_CHAR) | value
        bits += BITS_PER_CHAR

        if bits >= 8:
            bits -= 8
            output.append((buffer >> bits) & 0xFF)
            # keep only the bits not yet emitted
            buffer &= (1 << bits) - 1

    return bytes(output)


def secret_from_base32(text: str) -> bytes:
    """Decode a base32 TOTP secret. Same contract as decode()."""
    return decode(text)
