"""
Lending Protocol — Capability interfaces consumed by the strategy.

The strategy never looks inside the lending protocol. It depends only on
the ``LendingProtocol`` protocol below, and in turn implements
``FlashLoanReceiver`` so the protocol can call it back mid-loan.

Every state-changing call carries the calling principal as the keyword
``sender``; the protocol acts on ``sender``'s funds and allowances.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from eth_abi import decode, encode
from web3 import Web3

from flashcollateral.chain.address import MAX_UINT256
from flashcollateral.vocabulary import InterestRateMode


# Sentinel for "repay everything outstanding" / "withdraw everything"
REPAY_ALL = MAX_UINT256

# Layout of the opaque resumption params carried through the flash loan
RESUME_PARAMS_TYPES = ["uint256", "address"]


@dataclass(frozen=True)
class AccountData:
    """
    Account health as reported by the lending protocol.

    Values are in the protocol's base currency units; ``ltv`` and
    ``liquidation_threshold`` are basis points; ``health_factor`` is scaled
    by 1e18 and equals ``MAX_UINT256`` when there is no debt.
    """
    total_collateral: int
    total_debt: int
    available_borrow: int
    liquidation_threshold: int
    ltv: int
    health_factor: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_collateral": self.total_collateral,
            "total_debt": self.total_debt,
            "available_borrow": self.available_borrow,
            "liquidation_threshold": self.liquidation_threshold,
            "ltv": self.ltv,
            "health_factor": self.health_factor,
        }


@runtime_checkable
class LendingProtocol(Protocol):
    """
    Protocol for the orchestrated lending pool.
    """

    address: str

    def flash_borrow(
        self,
        receiver: str,
        asset: str,
        amount: int,
        params: bytes,
        referral: int = 0,
        *,
        sender: str,
    ) -> None:
        """Lend ``amount`` to ``receiver`` for the duration of one call."""
        ...

    def supply(
        self,
        asset: str,
        amount: int,
        on_behalf_of: str,
        referral: int = 0,
        *,
        sender: str,
    ) -> None:
        ...

    def set_collateral_flag(self, asset: str, enabled: bool, *, sender: str) -> None:
        ...

    def borrow(
        self,
        asset: str,
        amount: int,
        rate_mode: InterestRateMode,
        referral: int,
        on_behalf_of: str,
        *,
        sender: str,
    ) -> None:
        ...

    def repay(
        self,
        asset: str,
        amount: int,
        rate_mode: InterestRateMode,
        on_behalf_of: str,
        *,
        sender: str,
    ) -> int:
        """Repay debt; ``REPAY_ALL`` settles everything. Returns amount repaid."""
        ...

    def withdraw(self, asset: str, amount: int, to: str, *, sender: str) -> int:
        """Withdraw supplied collateral. Returns amount withdrawn."""
        ...

    def query_account(self, who: str) -> AccountData:
        ...


@runtime_checkable
class FlashLoanReceiver(Protocol):
    """
    Protocol for contracts that accept a flash loan callback.

    The receiver must leave an allowance of ``amount + premium`` for the
    lending protocol before returning ``True``.
    """

    address: str

    def on_loan_received(
        self,
        asset: str,
        amount: int,
        premium: int,
        initiator: str,
        params: bytes,
        *,
        sender: str,
    ) -> bool:
        ...


def encode_resume_params(borrow_amount: int, executor: str) -> bytes:
    """ABI-encode ``(uint256 borrowAmount, address executor)``."""
    return encode(RESUME_PARAMS_TYPES, [borrow_amount, Web3.to_checksum_address(executor)])


def decode_resume_params(params: bytes) -> tuple[int, str]:
    """Inverse of ``encode_resume_params``."""
    borrow_amount, executor = decode(RESUME_PARAMS_TYPES, params)
    return borrow_amount, Web3.to_checksum_address(executor)
