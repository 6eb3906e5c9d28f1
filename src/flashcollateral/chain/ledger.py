"""
Ledger — In-memory execution platform with all-or-nothing scopes.

Tracks token balances, allowances, deployed contracts, and the event log.
Every mutation made inside an ``atomic()`` scope records a compensating
action in an undo journal; when the scope exits with an exception the
journal is replayed in strict reverse order back to the scope's mark, so
nested scopes behave as savepoints and the outermost scope as a
transaction.

Contracts keep their own storage in plain dicts/attributes and route
writes through ``store()`` / ``store_attr()`` so those writes roll back
with everything else.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterator

from web3 import Web3

from flashcollateral.chain.address import MAX_UINT256, derive_address
from flashcollateral.observability.logging import get_logger


logger = get_logger("chain.ledger")


# =============================================================================
# ERRORS
# =============================================================================

class LedgerError(Exception):
    """Base class for platform-level failures."""
    pass


class InsufficientBalance(LedgerError):
    """Holder does not have enough of the token."""

    def __init__(self, token: str, holder: str, needed: int, available: int):
        self.token = token
        self.holder = holder
        self.needed = needed
        self.available = available
        super().__init__(
            f"{holder} holds {available} of {token}, needs {needed}"
        )


class InsufficientAllowance(LedgerError):
    """Spender is not approved for enough of the owner's tokens."""

    def __init__(self, token: str, owner: str, spender: str, needed: int, allowed: int):
        self.token = token
        self.owner = owner
        self.spender = spender
        self.needed = needed
        self.allowed = allowed
        super().__init__(
            f"{spender} may spend {allowed} of {owner}'s {token}, needs {needed}"
        )


class UnknownToken(LedgerError):
    """Address is not a registered token."""
    pass


class UnknownContract(LedgerError):
    """No contract is deployed at the address."""
    pass


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class Token:
    """A fungible asset registered on the ledger."""
    address: str
    symbol: str
    decimals: int

    def units(self, value: int | str | Decimal) -> int:
        """Convert a whole-token figure to base units (e.g. "10.5" WETH)."""
        return int(Decimal(str(value)) * (10 ** self.decimals))


@dataclass(frozen=True)
class Event:
    """An event recorded by a contract."""
    index: int
    emitter: str
    name: str
    args: dict[str, Any] = field(default_factory=dict)
    timestamp: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "emitter": self.emitter,
            "name": self.name,
            "args": dict(self.args),
            "timestamp": self.timestamp,
        }


# =============================================================================
# LEDGER
# =============================================================================

def _key(address: str) -> str:
    return Web3.to_checksum_address(address)


def _event_name(name: str | Enum) -> str:
    return name.value if isinstance(name, Enum) else name


class Ledger:
    """
    Balances, allowances, contracts, and events with journaled rollback.

    Usage:
        ledger = Ledger()
        usdc = ledger.create_token("USDC", 6)
        alice = ledger.create_account("alice")
        ledger.mint(usdc.address, alice, usdc.units(100))

        with ledger.atomic():
            ledger.transfer(usdc.address, alice, bob, usdc.units(10))
            raise RuntimeError  # transfer is undone
    """

    def __init__(self, timestamp: int = 1_700_000_000, block_time: int = 12):
        self.block_timestamp = timestamp
        self.block_time = block_time

        self._tokens: dict[str, Token] = {}
        self._balances: dict[tuple[str, str], int] = {}
        self._allowances: dict[tuple[str, str, str], int] = {}
        self._contracts: dict[str, Any] = {}
        self._accounts: set[str] = set()
        self._events: list[Event] = []

        self._journal: list[Callable[[], None]] = []
        self._depth = 0
        self._nonce = 0

    # -------------------------------------------------------------------------
    # Atomic scopes
    # -------------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator["Ledger"]:
        """
        All-or-nothing scope.

        On exception, every journaled mutation since entry is undone in
        reverse order and the exception is re-raised unchanged.
        """
        mark = len(self._journal)
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._revert_to(mark)
            raise
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._journal.clear()

    @property
    def in_atomic(self) -> bool:
        return self._depth > 0

    def mine(self) -> int:
        """Advance the block clock. Returns the new timestamp."""
        self.block_timestamp += self.block_time
        return self.block_timestamp

    def _record(self, undo: Callable[[], None]) -> None:
        if self._depth > 0:
            self._journal.append(undo)

    def _revert_to(self, mark: int) -> None:
        undone = len(self._journal) - mark
        while len(self._journal) > mark:
            self._journal.pop()()
        logger.debug(f"Reverted {undone} journaled mutations")

    def store(self, mapping: dict, key: Any, value: Any) -> None:
        """Journaled write into a contract's storage dict."""
        if key in mapping:
            old = mapping[key]
            self._record(lambda: mapping.__setitem__(key, old))
        else:
            self._record(lambda: mapping.pop(key, None))
        mapping[key] = value

    def store_attr(self, obj: Any, name: str, value: Any) -> None:
        """Journaled write of a contract attribute."""
        old = getattr(obj, name)
        self._record(lambda: setattr(obj, name, old))
        setattr(obj, name, value)

    # -------------------------------------------------------------------------
    # Accounts and contracts
    # -------------------------------------------------------------------------

    def _next_address(self, label: str) -> str:
        self._nonce += 1
        return derive_address(f"{label}:{self._nonce}")

    def create_account(self, label: str = "account") -> str:
        """Create a bare (code-less) account."""
        address = self._next_address(f"account:{label}")
        self._accounts.add(address)
        return address

    def deploy(self, contract: Any, label: str | None = None) -> str:
        """Register a contract object and return its new address."""
        address = self._next_address(f"contract:{label or type(contract).__name__}")
        self._contracts[address] = contract
        logger.debug(f"Deployed {label or type(contract).__name__} at {address}")
        return address

    def is_contract(self, address: str | None) -> bool:
        """True when executable code is deployed at ``address``."""
        if not address or not Web3.is_address(address):
            return False
        return _key(address) in self._contracts

    def contract_at(self, address: str) -> Any:
        """Resolve a deployed contract object."""
        contract = self._contracts.get(_key(address))
        if contract is None:
            raise UnknownContract(f"No contract at {address}")
        return contract

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def create_token(self, symbol: str, decimals: int) -> Token:
        """Register a new token."""
        token = Token(
            address=self._next_address(f"token:{symbol}"),
            symbol=symbol,
            decimals=decimals,
        )
        self._tokens[token.address] = token
        return token

    def token(self, address: str) -> Token:
        token = self._tokens.get(_key(address))
        if token is None:
            raise UnknownToken(f"No token at {address}")
        return token

    def balance_of(self, token: str, holder: str) -> int:
        return self._balances.get((_key(token), _key(holder)), 0)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        return self._allowances.get((_key(token), _key(owner), _key(spender)), 0)

    def _set_balance(self, token: str, holder: str, value: int) -> None:
        self.store(self._balances, (token, holder), value)

    def mint(self, token: str, to: str, amount: int) -> None:
        """Create ``amount`` new tokens for ``to``."""
        token_key = self.token(token).address
        to_key = _key(to)
        self._set_balance(token_key, to_key, self.balance_of(token_key, to_key) + amount)

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` of ``token`` from ``sender`` to ``recipient``."""
        token_key = self.token(token).address
        sender_key, recipient_key = _key(sender), _key(recipient)

        available = self.balance_of(token_key, sender_key)
        if available < amount:
            raise InsufficientBalance(token_key, sender_key, amount, available)

        self._set_balance(token_key, sender_key, available - amount)
        self._set_balance(
            token_key,
            recipient_key,
            self.balance_of(token_key, recipient_key) + amount,
        )

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        """Set ``spender``'s allowance over ``owner``'s tokens."""
        token_key = self.token(token).address
        self.store(self._allowances, (token_key, _key(owner), _key(spender)), amount)

    def transfer_from(
        self,
        token: str,
        spender: str,
        owner: str,
        recipient: str,
        amount: int,
    ) -> None:
        """Move ``owner``'s tokens on the strength of ``spender``'s allowance."""
        allowed = self.allowance(token, owner, spender)
        if allowed < amount:
            raise InsufficientAllowance(token, owner, spender, amount, allowed)
        if allowed != MAX_UINT256:
            self.approve(token, owner, spender, allowed - amount)
        self.transfer(token, owner, recipient, amount)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def emit(self, emitter: str, name: str | Enum, **args: Any) -> Event:
        """Append an event to the log."""
        event = Event(
            index=len(self._events),
            emitter=_key(emitter),
            name=_event_name(name),
            args=args,
            timestamp=self.block_timestamp,
        )
        self._events.append(event)
        self._record(self._events.pop)
        return event

    def events(self, emitter: str | None = None, name: str | Enum | None = None) -> list[Event]:
        """Query the event log."""
        results = self._events
        if emitter is not None:
            results = [e for e in results if e.emitter == _key(emitter)]
        if name is not None:
            results = [e for e in results if e.name == _event_name(name)]
        return list(results)
