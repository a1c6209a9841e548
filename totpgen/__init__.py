"""
totpgen - Time-based One-Time Passwords (RFC 6238) from base32 secrets.
"""

from totpgen.base32_decoder import decode, secret_from_base32
from totpgen.config import load_config, load_digits
from totpgen.errors import (
    CryptoError,
    DecodeError,
    InvalidCharacter,
    InvalidKeyLength,
    TotpError,
)
from totpgen.totp_generator import (
    Algorithm,
    TOTPGenerator,
    TotpConfig,
    dynamic_truncate,
    format_code,
    system_clock,
)

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "CryptoError",
    "DecodeError",
    "InvalidCharacter",
    "InvalidKeyLength",
    "TOTPGenerator",
    "TotpConfig",
    "TotpError",
    "decode",
    "dynamic_truncate",
    "format_code",
    "load_config",
    "load_digits",
    "secret_from_base32",
    "system_clock",
]
