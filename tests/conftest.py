"""
Shared test configuration.
"""

from pathlib import Path

import pytest

from flashcollateral.testing import build_environment


@pytest.fixture
def project_root() -> Path:
    """Repository root."""
    return Path(__file__).parent.parent


@pytest.fixture
def env():
    """Fresh ledger, pool, strategy and executor (executor unfunded)."""
    return build_environment()


@pytest.fixture
def funded_env(env):
    """Environment whose executor holds 20,000 USDC to return."""
    env.ledger.mint(env.usdc.address, env.executor.address, env.usdc.units(20000))
    return env


@pytest.fixture
def collateral_amount(env) -> int:
    """10 WETH."""
    return env.weth.units(10)


@pytest.fixture
def borrow_amount(env) -> int:
    """15,000 USDC."""
    return env.usdc.units(15000)
