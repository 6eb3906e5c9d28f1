"""
Executor — Capability interface for pluggable profit strategies.

The orchestrator hands the borrowed funds to an executor and relies only
on this contract: use the funds, transfer at least ``required_return``
of ``asset`` back to ``sender``, and report success.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class Executor(Protocol):
    """
    Protocol for executors.

    ``execute`` returns ``True`` once at least ``required_return`` of
    ``asset`` has been sent back to ``sender``; ``False`` reports failure.
    """

    address: str

    def execute(
        self,
        asset: str,
        amount: int,
        required_return: int,
        *,
        sender: str,
    ) -> bool:
        ...


class BaseExecutor(ABC):
    """
    Abstract base class for executor implementations.

    Subclasses deploy themselves on a ledger and implement ``execute()``.
    """

    address: str

    @abstractmethod
    def execute(
        self,
        asset: str,
        amount: int,
        required_return: int,
        *,
        sender: str,
    ) -> bool:
        pass

    def __repr__(self) -> str:
        return f"<Executor:{type(self).__name__} at {self.address}>"
