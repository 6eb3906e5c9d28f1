"""
Vocabulary enums — the shared language of the strategy.

Run states, event names, and lending protocol constants referenced by the
orchestrator, the validators, and the test doubles.
"""

from enum import Enum, IntEnum


# =============================================================================
# RUN STATE MACHINE
# =============================================================================

class RunState(str, Enum):
    """
    Orchestrator run states.

    A run moves linearly from IDLE to COMPLETED. Any non-terminal state may
    drop into REVERTED, which means every effect since IDLE was discarded.
    """
    IDLE = "IDLE"
    LOAN_REQUESTED = "LOAN_REQUESTED"
    COLLATERAL_DEPOSITED = "COLLATERAL_DEPOSITED"
    BORROWED = "BORROWED"
    DISPATCHED = "DISPATCHED"
    VERIFIED = "VERIFIED"
    REPAID = "REPAID"
    UNWOUND = "UNWOUND"
    COMPLETED = "COMPLETED"
    REVERTED = "REVERTED"

    @property
    def is_terminal(self) -> bool:
        return self in {RunState.COMPLETED, RunState.REVERTED}


# Forward order of the happy path
RUN_SEQUENCE: tuple[RunState, ...] = (
    RunState.IDLE,
    RunState.LOAN_REQUESTED,
    RunState.COLLATERAL_DEPOSITED,
    RunState.BORROWED,
    RunState.DISPATCHED,
    RunState.VERIFIED,
    RunState.REPAID,
    RunState.UNWOUND,
    RunState.COMPLETED,
)


# =============================================================================
# EVENTS
# =============================================================================

class EventName(str, Enum):
    """Names of events recorded on the ledger by the strategy."""
    RUN_INITIATED = "RunInitiated"
    COLLATERAL_DEPOSITED = "CollateralDeposited"
    BORROW_EXECUTED = "BorrowExecuted"
    ARBITRAGE_EXECUTED = "ArbitrageExecuted"
    STRATEGY_COMPLETED = "StrategyCompleted"
    THRESHOLD_UPDATED = "ThresholdUpdated"
    SWEPT = "Swept"


# Events a successful run emits, in order
RUN_EVENT_SEQUENCE: tuple[EventName, ...] = (
    EventName.RUN_INITIATED,
    EventName.COLLATERAL_DEPOSITED,
    EventName.BORROW_EXECUTED,
    EventName.ARBITRAGE_EXECUTED,
    EventName.STRATEGY_COMPLETED,
)


# =============================================================================
# LENDING PROTOCOL
# =============================================================================

class InterestRateMode(IntEnum):
    """Debt rate modes understood by the lending protocol."""
    NONE = 0
    STABLE = 1
    VARIABLE = 2


class Network(str, Enum):
    """Networks with known deployment presets."""
    MAINNET = "mainnet"
    ARBITRUM = "arbitrum"
    POLYGON = "polygon"
    LOCALHOST = "localhost"
    HARDHAT = "hardhat"
