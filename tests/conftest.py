"""
Pytest configuration for modular-accounts tests.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Add package source to path
package_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(package_src))

# Pin the defaults regardless of the developer's shell
os.environ.pop("MODULAR_ACCOUNTS_ENTRYPOINT_VERSION", None)
os.environ.pop("MODULAR_ACCOUNTS_MASK_ADDRESSES", None)

from modular_accounts.config import set_config  # noqa: E402


@pytest.fixture
def reset_config():
    """Reset the global configuration around a test that changes it."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def sample_eth_address():
    """Valid Ethereum address for testing."""
    return "0x1234567890123456789012345678901234567890"


@pytest.fixture
def account_address():
    return "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"  # Foundry default


@pytest.fixture
def ecdsa_private_key():
    # Foundry default account #0
    return "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


@pytest.fixture
def p256_private_key():
    return "0x" + "11" * 32
