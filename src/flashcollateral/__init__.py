"""
flashcollateral — Atomic flash-loan collateral orchestration.

Borrows a collateral asset without pre-existing collateral, pledges it,
borrows a second asset against it, lends that to a pluggable executor,
then unwinds everything inside one all-or-nothing call chain.
"""

__version__ = "0.1.0"
