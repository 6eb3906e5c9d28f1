"""
Executors — Pluggable components that put dispatched funds to work.
"""

from flashcollateral.executors.base import Executor, BaseExecutor

__all__ = [
    "Executor",
    "BaseExecutor",
]
