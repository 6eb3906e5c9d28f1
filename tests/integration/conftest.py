"""
Integration test configuration.

These tests wire a deployed strategy to a mock pool and executor and drive
complete runs through them.
Run with: pytest -m integration
Skip with: pytest -m "not integration"
"""

import pytest

from flashcollateral.chain import Ledger
from flashcollateral.deploy import deploy_strategy, load_deployment_settings
from flashcollateral.testing import MockExecutor, MockLendingPool, StrategyEnvironment


def pytest_configure(config):
    """Register integration marker."""
    config.addinivalue_line(
        "markers", "integration: marks tests as end-to-end strategy runs"
    )


@pytest.fixture
def deployed_env(tmp_path):
    """
    Environment built the way a deployment would build it.

    Pool and assets come from environment variables, the strategy from
    deploy_strategy, and the deployment record is written under tmp_path.
    """
    ledger = Ledger()
    weth = ledger.create_token("WETH", 18)
    usdc = ledger.create_token("USDC", 6)
    owner = ledger.create_account("owner")

    pool = MockLendingPool(ledger)
    pool.add_reserve(weth, price=2000 * 10**8)
    pool.add_reserve(usdc, price=10**8)
    ledger.mint(weth.address, pool.address, weth.units(1000))
    ledger.mint(usdc.address, pool.address, usdc.units(2_000_000))

    settings = load_deployment_settings(
        "localhost",
        owner,
        env={
            "AAVE_POOL_ADDRESS": pool.address,
            "FLASH_LOAN_ASSET": weth.address,
            "BORROW_ASSET": usdc.address,
        },
    )
    strategy, record = deploy_strategy(ledger, settings)
    ledger.mint(weth.address, strategy.address, weth.units(1))

    executor = MockExecutor(ledger)
    ledger.mint(usdc.address, executor.address, usdc.units(20000))

    return StrategyEnvironment(
        ledger=ledger,
        weth=weth,
        usdc=usdc,
        pool=pool,
        strategy=strategy,
        executor=executor,
        owner=owner,
        user1=ledger.create_account("user1"),
        user2=ledger.create_account("user2"),
        extras={"record": record, "deployments": tmp_path / "deployments"},
    )
