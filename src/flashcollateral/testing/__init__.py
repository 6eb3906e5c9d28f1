"""
Testing — Test doubles and environment builders.

Usage:
    from flashcollateral.testing import build_environment

    env = build_environment()
    env.executor.profit_amount = env.usdc.units(100)
    result = env.strategy.initiate(
        env.weth.units(10), env.usdc.units(15000), env.executor.address, sender=env.owner
    )
"""

from flashcollateral.testing.mocks import (
    ProtocolError,
    ReserveConfig,
    MockLendingPool,
    MockExecutor,
    StrategyEnvironment,
    build_environment,
)

__all__ = [
    "ProtocolError",
    "ReserveConfig",
    "MockLendingPool",
    "MockExecutor",
    "StrategyEnvironment",
    "build_environment",
]
