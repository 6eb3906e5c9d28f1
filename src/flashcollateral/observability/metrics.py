"""
Metrics — Simple metrics collection for strategy runs.

Tracks run outcomes, durations, and returned amounts. Each strategy owns
its own registry; there is no process-wide registry.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Any


class Counter:
    """Monotonically increasing counter."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()

    def inc(self, amount: float = 1.0) -> None:
        """Increment counter."""
        with self._lock:
            self._value += amount

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        """Reset counter (for testing)."""
        with self._lock:
            self._value = 0.0


class Gauge:
    """Value that can go up and down."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()

    def inc(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value += amount

    def dec(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value -= amount

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0.0


class Histogram:
    """
    Simple histogram for tracking distributions.

    Tracks count, sum, min, max for calculating stats.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._count = 0
        self._sum = 0.0
        self._min = float("inf")
        self._max = float("-inf")
        self._lock = Lock()

    def observe(self, value: float) -> None:
        """Record an observation."""
        with self._lock:
            self._count += 1
            self._sum += value
            self._min = min(self._min, value)
            self._max = max(self._max, value)

    @property
    def count(self) -> int:
        return self._count

    @property
    def avg(self) -> float:
        if self._count == 0:
            return 0.0
        return self._sum / self._count

    @property
    def min(self) -> float:
        return self._min if self._count > 0 else 0.0

    @property
    def max(self) -> float:
        return self._max if self._count > 0 else 0.0

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._sum = 0.0
            self._min = float("inf")
            self._max = float("-inf")

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self._count,
            "sum": self._sum,
            "avg": self.avg,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class MetricsRegistry:
    """
    Registry for one strategy's metrics.
    """
    # Run outcomes
    runs_total: Counter = field(
        default_factory=lambda: Counter("runs_total", "Runs initiated")
    )
    runs_completed: Counter = field(
        default_factory=lambda: Counter("runs_completed", "Runs that committed")
    )
    runs_reverted: Counter = field(
        default_factory=lambda: Counter("runs_reverted", "Runs rolled back")
    )

    # Duration and accounting
    run_duration_seconds: Histogram = field(
        default_factory=lambda: Histogram("run_duration_seconds", "Run wall time")
    )
    borrow_asset_returned: Histogram = field(
        default_factory=lambda: Histogram(
            "borrow_asset_returned", "Borrow asset handed back by executors"
        )
    )

    # Security
    unauthorized_callbacks: Counter = field(
        default_factory=lambda: Counter(
            "unauthorized_callbacks", "Rejected resumption calls"
        )
    )

    # Admin
    sweeps_total: Counter = field(
        default_factory=lambda: Counter("sweeps_total", "Emergency sweeps")
    )

    # Active state
    runs_active: Gauge = field(
        default_factory=lambda: Gauge("runs_active", "Runs currently in flight")
    )

    def to_dict(self) -> dict[str, Any]:
        """Export all metrics as dict."""
        return {
            "runs": {
                "total": self.runs_total.value,
                "completed": self.runs_completed.value,
                "reverted": self.runs_reverted.value,
                "active": self.runs_active.value,
            },
            "duration": self.run_duration_seconds.to_dict(),
            "returned": self.borrow_asset_returned.to_dict(),
            "security": {
                "unauthorized_callbacks": self.unauthorized_callbacks.value,
            },
            "admin": {
                "sweeps": self.sweeps_total.value,
            },
        }

    def reset(self) -> None:
        """Reset all metrics (for testing)."""
        self.runs_total.reset()
        self.runs_completed.reset()
        self.runs_reverted.reset()
        self.run_duration_seconds.reset()
        self.borrow_asset_returned.reset()
        self.unauthorized_callbacks.reset()
        self.sweeps_total.reset()
        self.runs_active.reset()
