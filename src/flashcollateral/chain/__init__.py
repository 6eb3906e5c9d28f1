"""
Chain — Addresses and the in-memory execution ledger.

The ledger stands in for the hosting platform: it provides balances,
allowances, a contract registry, the event log, and all-or-nothing
scopes backed by an undo journal.
"""

from flashcollateral.chain.address import (
    ZERO_ADDRESS,
    MAX_UINT256,
    is_null_address,
    normalize_address,
    same_address,
    derive_address,
)
from flashcollateral.chain.ledger import (
    LedgerError,
    InsufficientBalance,
    InsufficientAllowance,
    UnknownToken,
    UnknownContract,
    Token,
    Event,
    Ledger,
)

__all__ = [
    # Addresses
    "ZERO_ADDRESS",
    "MAX_UINT256",
    "is_null_address",
    "normalize_address",
    "same_address",
    "derive_address",
    # Ledger
    "LedgerError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "UnknownToken",
    "UnknownContract",
    "Token",
    "Event",
    "Ledger",
]
