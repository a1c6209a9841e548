#!/usr/bin/env python3
"""
totpgen_cli.py - Print the current TOTP code for a base32 secret
"""

from __future__ import annotations
import argparse
import getpass
import os
import sys
import time
from enum import Enum
from typing import List, Optional

from totpgen.base32_decoder import secret_from_base32
from totpgen.config import load_config, load_digits
from totpgen.errors import TotpError
from totpgen.log import logger, set_verbose
from totpgen.totp_generator import Algorithm, TOTPGenerator, TotpConfig, format_code

# ============ Configuration Constants ============
PROG = "totpgen"
MAX_INPUT_LENGTH = 1000
WATCH_INTERVAL = 1.0

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

# ============ ANSI Color Control ============
class ColorMode(Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

class Colors:
    """Centralized color management with accessibility support"""

    def __init__(self, mode: ColorMode = ColorMode.AUTO):
        self._enabled = self._should_enable_colors(mode)

    def _should_enable_colors(self, mode: ColorMode) -> bool:
        if mode == ColorMode.NEVER:
            return False
        if mode == ColorMode.ALWAYS:
            return True
        # AUTO: detect terminal capability
        return sys.stdout.isatty() and os.getenv("TERM") != "dumb"

    def _wrap(self, text: str, code: str) -> str:
        if not self._enabled:
            return text
        return f"\033[{code}m{text}\033[0m"

    def error(self, text: str) -> str:
        return self._wrap(text, "91")  # Bright red

    def success(self, text: str) -> str:
        return self._wrap(text, "92")  # Bright green

    def info(self, text: str) -> str:
        return self._wrap(text, "94")  # Bright blue

# Global color instance (configured by TotpCLI)
colors = Colors()

# ============ UI Helpers ============

def print_error(msg: str, prefix: str = "ERROR"):
    """Print error message with consistent formatting"""
    print(f"[{colors.error(prefix)}] {msg}", file=sys.stderr)

def print_info(msg: str):
    """Print informational message"""
    print(colors.info(msg))

def sanitize_input(text: str, max_length: int = MAX_INPUT_LENGTH) -> str:
    """Sanitize user input: strip, limit length, remove control chars"""
    text = text.strip()[:max_length]
    return ''.join(c for c in text if c.isprintable())

def format_seconds(seconds: float) -> str:
    """30.0 -> '30', 12.5 -> '12.5', never exponent notation"""
    return f"{seconds:.3f}".rstrip("0").rstrip(".")

# ============ Main CLI Class ============

class TotpCLI:
    def __init__(self, color_mode: ColorMode = ColorMode.AUTO):
        global colors
        colors = Colors(color_mode)

    def build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser; defaults come from the environment"""
        parser = argparse.ArgumentParser(
            prog=PROG,
            description="Generate a Time-based One-Time Password (RFC 6238) from a base32 secret.",
        )
        parser.add_argument('secret', nargs='?',
                            help='Base32 secret (A-Z, 2-7). Prompted for if omitted.')
        parser.add_argument('--time-step', '-t', type=float, default=None,
                            help='Code validity in seconds (default: $TOTPGEN_TIME_STEP or 30)')
        parser.add_argument('--epoch-start', '-e', type=int, default=None,
                            help='Time origin in Unix milliseconds (default: $TOTPGEN_EPOCH_START or 0)')
        parser.add_argument('--algorithm', '-a', default=None,
                            choices=[a.value for a in Algorithm], type=str.lower,
                            help='HMAC algorithm (default: $TOTPGEN_ALGORITHM or sha1)')
        parser.add_argument('--digits', '-d', type=int, default=None,
                            help='Digits to display (default: $TOTPGEN_DIGITS or 6)')
        parser.add_argument('--watch', '-w', action='store_true',
                            help='Watch and auto-refresh')
        parser.add_argument('--no-color', action='store_true',
                            help='Disable colored output')
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Log debug details to stderr')
        return parser

    def resolve_config(self, args) -> TotpConfig:
        """Command-line options override environment defaults"""
        base = load_config()
        return TotpConfig(
            time_step=args.time_step if args.time_step is not None else base.time_step,
            epoch_start=args.epoch_start if args.epoch_start is not None else base.epoch_start,
            algorithm=args.algorithm if args.algorithm is not None else base.algorithm,
        )

    def resolve_digits(self, args) -> int:
        return args.digits if args.digits is not None else load_digits()

    def render(self, generator: TOTPGenerator, digits: int) -> tuple[str, str]:
        code = format_code(generator.current_code(), digits)
        remaining = format_seconds(generator.seconds_remaining())
        return code, remaining

    def cmd_generate(self, args) -> int:
        """Print the current code and its remaining validity"""
        secret = args.secret
        if not secret:
            secret = sanitize_input(getpass.getpass("TOTP Secret (Base32): "))
        if not secret:
            print_error("No secret given.")
            return EXIT_ERROR

        try:
            config = self.resolve_config(args)
            digits = self.resolve_digits(args)
            key = secret_from_base32(secret)
            generator = TOTPGenerator(key, config)
            logger.debug(
                "time_step=%s epoch_start=%s algorithm=%s digits=%d key_bytes=%d",
                config.time_step, config.epoch_start, config.algorithm.name, digits, len(key),
            )
            logger.debug("counter=%d", generator.counter_at(generator.clock()))
            code, remaining = self.render(generator, digits)
        except TotpError as e:
            print_error(str(e))
            return EXIT_ERROR
        except ValueError as e:
            print_error(f"Invalid option: {e}")
            return EXIT_ERROR

        print(f"code: {colors.success(code)}")
        print(f"left time: {remaining}s")

        if args.watch:
            print_info("Press Ctrl+C to stop watching...")
            try:
                while True:
                    time.sleep(WATCH_INTERVAL)
                    code, remaining = self.render(generator, digits)
                    print(f"\rcode: {colors.success(code)}  left time: {remaining}s ",
                          end='', flush=True)
            except KeyboardInterrupt:
                print()
            except TotpError as e:
                print()
                print_error(str(e))
                return EXIT_ERROR

        return EXIT_OK

    def run(self, argv: Optional[List[str]] = None) -> int:
        parser = self.build_parser()
        args = parser.parse_args(argv)

        if args.no_color:
            global colors
            colors = Colors(ColorMode.NEVER)
        set_verbose(args.verbose)

        return self.cmd_generate(args)

# ============ Main Entry Point ============

def main(argv: Optional[List[str]] = None):
    """Main entry point with exit-code mapping"""
    try:
        code = TotpCLI().run(argv)
    except KeyboardInterrupt:
        print(f"\n{colors.error('Interrupted by user.')}", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    sys.exit(code)

if __name__ == "__main__":
    main()
