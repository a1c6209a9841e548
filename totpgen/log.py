"""Diagnostics logger for totpgen_cli.

The code and remaining time are the only things written to stdout so that
scripts can read them; everything --verbose reports goes to stderr.
"""

import logging
import sys

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("totpgen")


def _stderr_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


logger.addHandler(_stderr_handler())
logger.setLevel(logging.WARNING)


def set_verbose(verbose: bool) -> None:
    """DEBUG for --verbose, otherwise only warnings and errors."""
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
