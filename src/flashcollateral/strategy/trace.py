"""
Run Trace — Tracks per-run state and reports the outcome.

A trace lives on the call stack of a single run. It records the states the
run visited and the events it emitted, and is handed back inside the
RunResult; the next run starts with a fresh one.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from flashcollateral.chain import Event
from flashcollateral.strategy.models import RunParameters
from flashcollateral.vocabulary import RunState


@dataclass
class RunTrace:
    """
    State tracking for one run.
    """
    params: RunParameters
    run_id: UUID = field(default_factory=uuid4)

    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None

    states: list[RunState] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    # Filled in by the resumption handler
    premium: int | None = None
    returned_amount: int | None = None
    final_borrow_balance: int | None = None

    error: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None

    @property
    def final_state(self) -> RunState:
        return self.states[-1] if self.states else RunState.IDLE

    @property
    def duration_seconds(self) -> float:
        end = self.completed_at or datetime.now()
        return (end - self.started_at).total_seconds()

    def enter(self, state: RunState) -> None:
        self.states.append(state)

    def record_event(self, event: Event) -> None:
        self.events.append(event)

    def fail(self, error: BaseException) -> None:
        self.error = f"{type(error).__name__}: {error}"
        self.completed_at = datetime.now()

    def complete(self) -> None:
        self.completed_at = datetime.now()

    def to_summary(self) -> dict[str, Any]:
        """Generate a summary for logging/debugging."""
        return {
            "run_id": str(self.run_id),
            "collateral_amount": self.params.collateral_amount,
            "borrow_amount": self.params.borrow_amount,
            "executor": self.params.executor_address,
            "states": [s.value for s in self.states],
            "events": [e.name for e in self.events],
            "premium": self.premium,
            "returned_amount": self.returned_amount,
            "final_borrow_balance": self.final_borrow_balance,
            "is_complete": self.is_complete,
            "error": self.error,
        }


@dataclass
class RunResult:
    """Result of a run that committed."""
    run_id: UUID
    final_state: RunState
    params: RunParameters
    events: list[Event] = field(default_factory=list)
    premium: int = 0
    returned_amount: int = 0
    final_borrow_balance: int = 0
    duration_seconds: float = 0.0
    trace: RunTrace | None = None

    @property
    def success(self) -> bool:
        return self.final_state == RunState.COMPLETED

    @property
    def event_names(self) -> list[str]:
        return [e.name for e in self.events]

    @classmethod
    def from_trace(cls, trace: RunTrace) -> "RunResult":
        return cls(
            run_id=trace.run_id,
            final_state=trace.final_state,
            params=trace.params,
            events=list(trace.events),
            premium=trace.premium or 0,
            returned_amount=trace.returned_amount or 0,
            final_borrow_balance=trace.final_borrow_balance or 0,
            duration_seconds=trace.duration_seconds,
            trace=trace,
        )
