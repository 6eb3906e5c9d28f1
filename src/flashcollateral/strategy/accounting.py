"""
Accounting Guard — Fee arithmetic and balance-delta verification.

Stateless integer math used by the orchestrator's dispatch/verify step and
exposed read-only to observers. All figures are base units; division
truncates.
"""

from dataclasses import dataclass

from flashcollateral.errors import InsufficientReturn
from flashcollateral.protocol import AccountData, LendingProtocol


BPS_DENOMINATOR = 10_000

# Flash loan premium charged by the lending protocol (0.05%)
FLASH_FEE_BPS = 5

# Buffer the executor is asked to return on top of the dispatched amount (2%)
RETURN_BUFFER_PERCENT = 2


def flash_fee(amount: int) -> int:
    """Flash loan premium for ``amount``."""
    return amount * FLASH_FEE_BPS // BPS_DENOMINATOR


def required_collateral(borrow_amount: int, ltv_bps: int) -> int:
    """Collateral value needed to borrow ``borrow_amount`` at ``ltv_bps``; 0 if ltv is 0."""
    if ltv_bps == 0:
        return 0
    return borrow_amount * BPS_DENOMINATOR // ltv_bps


def required_return(borrow_amount: int) -> int:
    """Dispatched amount plus a 2% buffer, rounded up."""
    buffer = -(-borrow_amount * RETURN_BUFFER_PERCENT // 100)
    return borrow_amount + buffer


@dataclass(frozen=True)
class BalanceSnapshot:
    """Holder's balance of one asset either side of the executor call."""
    asset: str
    holder: str
    before: int
    after: int

    @property
    def delta(self) -> int:
        return self.after - self.before

    def returned_amount(self, borrow_amount: int) -> int:
        """What the executor handed back, counting the dispatched funds."""
        return self.delta + borrow_amount


def verify_return(snapshot: BalanceSnapshot, borrow_amount: int) -> int:
    """
    Check that the executor made the holder whole.

    Returns:
        The returned amount (``after - before + borrow_amount``)

    Raises:
        InsufficientReturn: post-call balance is below the dispatched amount
    """
    if snapshot.after < borrow_amount:
        raise InsufficientReturn(expected=borrow_amount, actual=snapshot.after)
    return snapshot.returned_amount(borrow_amount)


class AccountingGuard:
    """
    Read-only window onto the lending protocol's view of an account.

    Informational only; nothing here gates a run.
    """

    def __init__(self, protocol: LendingProtocol):
        self.protocol = protocol

    def account_data(self, who: str) -> AccountData:
        return self.protocol.query_account(who)

    def health_factor(self, who: str) -> int:
        return self.protocol.query_account(who).health_factor
