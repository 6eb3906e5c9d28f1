"""
Admin Surface — Owner-gated maintenance operations.

Usable at any time, independent of runs: update the advisory profit
threshold, or sweep tokens the strategy holds back to the owner.
"""

from typing import TYPE_CHECKING, Any, Callable

from flashcollateral.chain.address import is_null_address, same_address
from flashcollateral.errors import AuthorizationDenied, InvalidAddress, InvalidAmount
from flashcollateral.observability.logging import get_logger
from flashcollateral.vocabulary import EventName

if TYPE_CHECKING:
    from flashcollateral.chain import Ledger
    from flashcollateral.observability import MetricsRegistry
    from flashcollateral.strategy.config import StrategyConfig


logger = get_logger("strategy.admin")


class AdminSurface:
    """
    Mixin providing owner checks and admin operations.

    Expects the host class to provide ``ledger``, ``config``, ``address``,
    ``threshold``, ``metrics`` and ``_emit``.
    """

    ledger: "Ledger"
    config: "StrategyConfig"
    address: str
    threshold: int
    metrics: "MetricsRegistry"
    _emit: "Callable[..., Any]"

    def _require_owner(self, sender: str | None) -> None:
        if not same_address(sender, self.config.owner):
            raise AuthorizationDenied(sender or "")

    def set_threshold(self, value: int, *, sender: str) -> None:
        """
        Store a new advisory profit threshold.

        Raises:
            AuthorizationDenied: sender is not the owner
            InvalidAmount: value is negative
        """
        self._require_owner(sender)
        if value < 0:
            raise InvalidAmount("threshold")

        with self.ledger.atomic():
            old = self.threshold
            self.ledger.store_attr(self, "threshold", value)
            self._emit(EventName.THRESHOLD_UPDATED, old=old, new=value)

        logger.info(f"Threshold updated {old} -> {value}")

    def sweep(self, token: str, amount: int, *, sender: str) -> None:
        """
        Transfer ``amount`` of ``token`` held by the strategy to the owner.

        Raises:
            AuthorizationDenied: sender is not the owner
            InvalidAddress: token is null
            InvalidAmount: amount is zero or negative
        """
        self._require_owner(sender)
        if is_null_address(token):
            raise InvalidAddress("token")
        if amount <= 0:
            raise InvalidAmount("amount")

        with self.ledger.atomic():
            self.ledger.transfer(token, self.address, self.config.owner, amount)
            self._emit(
                EventName.SWEPT,
                token=token,
                amount=amount,
                timestamp=self.ledger.block_timestamp,
            )

        self.metrics.sweeps_total.inc()
        logger.warning(f"Swept {amount} of {token} to owner")
