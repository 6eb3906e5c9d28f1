"""
Run FSM — Legal state transitions for a strategy run.

The happy path is strictly linear. REVERTED is reachable from any
non-terminal state; terminal states only lead back to IDLE when the next
run starts.
"""

from dataclasses import dataclass, field
from datetime import datetime

from flashcollateral.errors import IllegalTransition
from flashcollateral.vocabulary import RunState


# =============================================================================
# TRANSITION TABLE
# =============================================================================

LEGAL_TRANSITIONS: dict[RunState, set[RunState]] = {
    RunState.IDLE: {
        RunState.LOAN_REQUESTED,        # Owner called initiate
        RunState.REVERTED,              # Rejected before the loan request
    },
    RunState.LOAN_REQUESTED: {
        RunState.COLLATERAL_DEPOSITED,  # Callback authenticated, collateral supplied
        RunState.REVERTED,
    },
    RunState.COLLATERAL_DEPOSITED: {
        RunState.BORROWED,
        RunState.REVERTED,
    },
    RunState.BORROWED: {
        RunState.DISPATCHED,            # Funds sent to executor
        RunState.REVERTED,
    },
    RunState.DISPATCHED: {
        RunState.VERIFIED,              # Executor returned enough
        RunState.REVERTED,
    },
    RunState.VERIFIED: {
        RunState.REPAID,
        RunState.REVERTED,
    },
    RunState.REPAID: {
        RunState.UNWOUND,               # Collateral withdrawn
        RunState.REVERTED,
    },
    RunState.UNWOUND: {
        RunState.COMPLETED,             # Flash repayment approved
        RunState.REVERTED,
    },
    RunState.COMPLETED: {
        RunState.IDLE,                  # Next run
        RunState.REVERTED,              # Platform settlement failed after the callback
    },
    RunState.REVERTED: {
        RunState.IDLE,
    },
}


def is_legal_transition(from_state: RunState, to_state: RunState) -> bool:
    """Check a single transition against the table."""
    return to_state in LEGAL_TRANSITIONS.get(from_state, set())


@dataclass
class TransitionRecord:
    """One state change."""
    from_state: RunState
    to_state: RunState
    at: datetime = field(default_factory=datetime.now)


class RunStateMachine:
    """
    Tracks the current run state and enforces the transition table.

    Usage:
        fsm = RunStateMachine()
        fsm.transition(RunState.LOAN_REQUESTED)
        fsm.transition(RunState.COMPLETED)  # raises IllegalTransition
    """

    def __init__(self):
        self.state = RunState.IDLE
        self.history: list[TransitionRecord] = []

    def transition(self, to_state: RunState) -> TransitionRecord:
        """Move to ``to_state`` or raise ``IllegalTransition``."""
        if not is_legal_transition(self.state, to_state):
            raise IllegalTransition(self.state, to_state)
        record = TransitionRecord(from_state=self.state, to_state=to_state)
        self.history.append(record)
        self.state = to_state
        return record

    def reset(self) -> None:
        """Return to IDLE from a terminal state, clearing history."""
        if self.state != RunState.IDLE:
            self.transition(RunState.IDLE)
        self.history.clear()

    @property
    def visited(self) -> list[RunState]:
        """States entered since the last reset, in order."""
        return [record.to_state for record in self.history]
