"""
totpgen Configuration Manager
Centralizes default TOTP settings and environment variable loading.
"""
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from totpgen.totp_generator import (
    DEFAULT_DIGITS,
    DEFAULT_EPOCH_START,
    DEFAULT_TIME_STEP,
    MAX_DIGITS,
    Algorithm,
    TotpConfig,
)

# 1. Locate the Project Root
# Assumes structure: project/totpgen/config.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# 2. Load .env file into os.environ (real environment variables win)
load_dotenv(PROJECT_ROOT / ".env")

# 3. Environment variable names
ENV_TIME_STEP = "TOTPGEN_TIME_STEP"
ENV_EPOCH_START = "TOTPGEN_EPOCH_START"
ENV_ALGORITHM = "TOTPGEN_ALGORITHM"
ENV_DIGITS = "TOTPGEN_DIGITS"


def _read(env: Mapping[str, str], name: str, default: str) -> str:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_config(env: Optional[Mapping[str, str]] = None) -> TotpConfig:
    """
    Build a TotpConfig from environment variables.

    Args:
        env: Mapping to read from (default: os.environ).

    Returns:
        Validated TotpConfig. Unset variables fall back to the defaults
        (30s step, epoch 0, SHA1).

    Raises:
        ValueError: If a variable is set to a malformed value.
    """
    env = os.environ if env is None else env

    raw_step = _read(env, ENV_TIME_STEP, str(DEFAULT_TIME_STEP))
    raw_epoch = _read(env, ENV_EPOCH_START, str(DEFAULT_EPOCH_START))
    raw_algorithm = _read(env, ENV_ALGORITHM, Algorithm.SHA1.value)

    try:
        time_step = float(raw_step)
    except ValueError as e:
        raise ValueError(f"{ENV_TIME_STEP} must be a number, got {raw_step!r}") from e

    try:
        epoch_start = int(raw_epoch)
    except ValueError as e:
        raise ValueError(
            f"{ENV_EPOCH_START} must be an integer (milliseconds), got {raw_epoch!r}"
        ) from e

    try:
        return TotpConfig(
            time_step=time_step,
            epoch_start=epoch_start,
            algorithm=Algorithm.from_name(raw_algorithm),
        )
    except ValueError as e:
        raise ValueError(f"Invalid TOTP configuration: {e}") from e


def load_digits(env: Optional[Mapping[str, str]] = None) -> int:
    """Number of digits to display, from TOTPGEN_DIGITS (default 6)."""
    env = os.environ if env is None else env
    raw = _read(env, ENV_DIGITS, str(DEFAULT_DIGITS))

    try:
        digits = int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_DIGITS} must be an integer, got {raw!r}") from e

    if not 1 <= digits <= MAX_DIGITS:
        raise ValueError(f"{ENV_DIGITS} must be between 1 and {MAX_DIGITS}")
    return digits
