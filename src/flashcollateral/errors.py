"""
Errors — Failure taxonomy for strategy runs and admin calls.

Every error aborts the whole call; the ledger discards all effects since
entry before the exception reaches the caller.
"""

from flashcollateral.vocabulary import RunState


class StrategyError(Exception):
    """Base class for all strategy failures."""
    pass


class InvalidAmount(StrategyError):
    """An amount parameter was zero or negative."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Invalid amount: {field}")


class InvalidAddress(StrategyError):
    """An address parameter was null or malformed."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Invalid address: {field}")


class TargetMustBeContract(StrategyError):
    """The executor address holds no deployed contract."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Target must be a contract: {address}")


class UnauthorizedCallback(StrategyError):
    """The resumption handler was invoked by, or on behalf of, a stranger."""

    def __init__(self, who: str):
        self.who = who
        super().__init__(f"Unauthorized callback: {who}")


class ExecutorFailed(StrategyError):
    """The executor reported failure."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Executor {address} failed: {reason}")


class InsufficientReturn(StrategyError):
    """The executor did not hand back at least the dispatched amount."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Insufficient return: expected {expected}, got {actual}")


class AuthorizationDenied(StrategyError):
    """A non-owner called an owner-only operation."""

    def __init__(self, who: str):
        self.who = who
        super().__init__(f"Authorization denied: {who}")


class ReentrantCall(StrategyError):
    """A run was started while another run is still in flight."""

    def __init__(self):
        super().__init__("Run already in progress")


class IllegalTransition(StrategyError):
    """The orchestrator attempted a transition outside the state table."""

    def __init__(self, from_state: RunState, to_state: RunState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal transition: {from_state.value} -> {to_state.value}"
        )
