"""
totpgen TOTP Generator

Implements Time-based One-Time Password algorithm (RFC 6238) on top of
HOTP dynamic truncation (RFC 4226) with HMAC-SHA1 or HMAC-MD5.
"""

import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from totpgen.errors import CryptoError, InvalidKeyLength

DEFAULT_TIME_STEP = 30.0
DEFAULT_EPOCH_START = 0
DEFAULT_DIGITS = 6
MAX_DIGITS = 10  # a 31-bit value never has more than 10 decimal digits

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF

Clock = Callable[[], int]


def system_clock() -> int:
    """Current wall-clock time in milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


class Algorithm(Enum):
    """HMAC hash used for code generation."""

    SHA1 = "sha1"
    MD5 = "md5"

    @classmethod
    def from_name(cls, name: str) -> "Algorithm":
        """
        Parse an algorithm name such as "sha1" or "MD5".

        Raises:
            ValueError: For anything other than SHA1 or MD5.
        """
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unsupported TOTP algorithm {name!r}, expected one of: "
                + ", ".join(member.value for member in cls)
            ) from None

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        return _HASH_FACTORIES[self]()

    @property
    def digest_size(self) -> int:
        return _HASH_FACTORIES[self].digest_size


_HASH_FACTORIES = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.MD5: hashes.MD5,
}


@dataclass(frozen=True)
class TotpConfig:
    """
    Settings shared by every code computed for one secret.

    Args:
        time_step: Validity duration of one code in seconds (default 30).
        epoch_start: Time origin in milliseconds since the Unix epoch (default 0).
        algorithm: HMAC hash, SHA1 or MD5 (default SHA1).
    """

    time_step: float = DEFAULT_TIME_STEP
    epoch_start: int = DEFAULT_EPOCH_START
    algorithm: Algorithm = Algorithm.SHA1

    def __post_init__(self):
        try:
            time_step = float(self.time_step)
        except (TypeError, ValueError) as e:
            raise ValueError("time_step must be a number of seconds") from e
        if not math.isfinite(time_step) or time_step <= 0:
            raise ValueError("time_step must be a positive, finite number of seconds")

        if isinstance(self.epoch_start, bool) or not isinstance(self.epoch_start, int):
            raise ValueError("epoch_start must be an integer number of milliseconds")

        algorithm = self.algorithm
        if not isinstance(algorithm, Algorithm):
            algorithm = Algorithm.from_name(algorithm)

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "time_step", time_step)
        object.__setattr__(self, "algorithm", algorithm)


def dynamic_truncate(digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation of an HMAC digest.

    The low nibble of the last byte selects a 4-byte window. The window wraps
    around the end of the digest, which only matters for 16-byte MD5 digests
    with an offset above 12; SHA-1 windows always fit.

    Returns:
        Big-endian value of the window with the top bit cleared (0 .. 2**31 - 1).

    Example:
        >>> dynamic_truncate(bytes(range(15)) + b"\\x0f")
        251658498
    """
    size = len(digest)
    if size < 4:
        raise ValueError("digest must be at least 4 bytes long")

    offset = digest[-1] & 0x0F
    window = bytearray(digest[(offset + i) % size] for i in range(4))
    window[0] &= 0x7F
    return int.from_bytes(window, "big")


def format_code(code: int, digits: int = DEFAULT_DIGITS) -> str:
    """Reduce a truncated value to `digits` decimal digits, zero-padded."""
    if not 1 <= digits <= MAX_DIGITS:
        raise ValueError(f"digits must be between 1 and {MAX_DIGITS}")
    return str(code % 10 ** digits).zfill(digits)


class TOTPGenerator:
    """
    TOTP generator compliant with RFC 6238

    The generator holds no mutable state: each call reads the clock once and
    builds its own HMAC context, so one instance can be shared across threads.
    """

    def __init__(
        self,
        secret: bytes,
        config: Optional[TotpConfig] = None,
        clock: Clock = system_clock,
    ):
        if isinstance(secret, bytearray):
            secret = bytes(secret)
        self.secret = secret
        self.config = config if config is not None else TotpConfig()
        self.clock = clock

    def counter_at(self, now_ms: int) -> int:
        """
        Time-step counter for an instant given in Unix milliseconds.

        Elapsed time is rounded to the nearest second before dividing by the
        time step. The quotient is truncated toward zero, so before epoch_start
        step 0 spans (-time_step, time_step) and earlier counters are negative.
        """
        elapsed = (now_ms - self.config.epoch_start) / 1000.0 + 0.5
        return int(elapsed / self.config.time_step)

    def code_for_counter(self, counter: int) -> int:
        """
        HOTP value (RFC 4226) for a raw counter, before digit reduction.

        Raises:
            CryptoError: If the HMAC primitive refuses the key or algorithm.
        """
        # 8 bytes big-endian, two's complement for negative counters
        message = (counter & _U64_MASK).to_bytes(8, "big")
        algorithm = self.config.algorithm

        try:
            mac = hmac.HMAC(self.secret, algorithm.hash_algorithm())
            mac.update(message)
            digest = mac.finalize()
        except UnsupportedAlgorithm as e:
            raise CryptoError(
                f"HMAC-{algorithm.name} is not supported by the crypto backend"
            ) from e
        except ValueError as e:
            raise InvalidKeyLength(
                f"HMAC-{algorithm.name} rejected a {len(self.secret)}-byte key: {e}"
            ) from e
        except TypeError as e:
            raise CryptoError(f"HMAC-{algorithm.name} rejected the key: {e}") from e

        return dynamic_truncate(digest)

    def code_at(self, now_ms: int) -> int:
        """31-bit code for an instant given in Unix milliseconds."""
        return self.code_for_counter(self.counter_at(now_ms))

    def current_code(self) -> int:
        """
        Code for the current time step.

        Returns:
            The full 31-bit truncated value. Use format_code() for the usual
            6-digit rendering.

        Raises:
            CryptoError: If the HMAC primitive refuses the key or algorithm.
        """
        return self.code_at(self.clock())

    def seconds_remaining(self) -> float:
        """
        Seconds until the current code expires.

        Returns:
            A value in (0, time_step] once epoch_start has passed. Before
            it the remainder is negative, so the value lies in
            [time_step, 2 * time_step).
        """
        # whole seconds, truncated toward zero
        elapsed = int((self.clock() - self.config.epoch_start) / 1000.0 + 0.5)
        # remainder takes the sign of elapsed
        time_used = math.fmod(elapsed, self.config.time_step)
        return self.config.time_step - time_used
