"""
Strategy — The flash-loan collateral orchestrator and its gates.

Usage:
    from flashcollateral.strategy import FlashCollateralStrategy, StrategyConfig

    config = StrategyConfig(pool.address, weth.address, usdc.address, owner)
    strategy = FlashCollateralStrategy(ledger, config)
    result = strategy.initiate(weth.units(10), usdc.units(15000), executor.address, sender=owner)
    print(f"Success: {result.success}, Events: {result.event_names}")
"""

from flashcollateral.strategy.config import StrategyConfig
from flashcollateral.strategy.models import RunParameters, CallbackContext
from flashcollateral.strategy.validation import validate_run_parameters
from flashcollateral.strategy.accounting import (
    BPS_DENOMINATOR,
    FLASH_FEE_BPS,
    RETURN_BUFFER_PERCENT,
    flash_fee,
    required_collateral,
    required_return,
    BalanceSnapshot,
    verify_return,
    AccountingGuard,
)
from flashcollateral.strategy.fsm import (
    LEGAL_TRANSITIONS,
    is_legal_transition,
    TransitionRecord,
    RunStateMachine,
)
from flashcollateral.strategy.trace import RunTrace, RunResult
from flashcollateral.strategy.admin import AdminSurface
from flashcollateral.strategy.orchestrator import RunLock, FlashCollateralStrategy

__all__ = [
    # Configuration
    "StrategyConfig",
    # Models
    "RunParameters",
    "CallbackContext",
    # Validation
    "validate_run_parameters",
    # Accounting
    "BPS_DENOMINATOR",
    "FLASH_FEE_BPS",
    "RETURN_BUFFER_PERCENT",
    "flash_fee",
    "required_collateral",
    "required_return",
    "BalanceSnapshot",
    "verify_return",
    "AccountingGuard",
    # FSM
    "LEGAL_TRANSITIONS",
    "is_legal_transition",
    "TransitionRecord",
    "RunStateMachine",
    # Trace
    "RunTrace",
    "RunResult",
    # Orchestrator
    "AdminSurface",
    "RunLock",
    "FlashCollateralStrategy",
]
