"""
Pytest configuration and path setup
Automatically adds project root to Python path for all tests
"""
import sys
import os

import pytest

# Add project root to Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

TOTPGEN_ENV_VARS = (
    "TOTPGEN_TIME_STEP",
    "TOTPGEN_EPOCH_START",
    "TOTPGEN_ALGORITHM",
    "TOTPGEN_DIGITS",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any TOTPGEN_* settings inherited from the shell or a .env file."""
    for name in TOTPGEN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
