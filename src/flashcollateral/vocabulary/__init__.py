"""
Vocabulary — Enumerated types forming the shared language of the system.
"""

from flashcollateral.vocabulary.enums import (
    RunState,
    RUN_SEQUENCE,
    EventName,
    RUN_EVENT_SEQUENCE,
    InterestRateMode,
    Network,
)

__all__ = [
    "RunState",
    "RUN_SEQUENCE",
    "EventName",
    "RUN_EVENT_SEQUENCE",
    "InterestRateMode",
    "Network",
]
