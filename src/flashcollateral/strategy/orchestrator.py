"""
Strategy Orchestrator — The callback-driven flash-loan collateral run.

One run is one continuous call chain:

    initiate ─► protocol.flash_borrow ─► on_loan_received
                                          ├─ supply + enable collateral
                                          ├─ borrow
                                          ├─ dispatch to executor, verify return
                                          ├─ repay (all), withdraw collateral
                                          └─ approve loan + premium
             ◄─ protocol pulls repayment ◄┘

Everything runs inside a single ledger atomic scope, so any failure at any
step discards every effect since entry, including effects made by the
lending protocol and the executor.
"""

from flashcollateral.chain import Ledger
from flashcollateral.chain.address import same_address
from flashcollateral.errors import (
    ExecutorFailed,
    IllegalTransition,
    ReentrantCall,
    UnauthorizedCallback,
)
from flashcollateral.executors import Executor
from flashcollateral.observability import LogContext, MetricsRegistry, get_logger
from flashcollateral.protocol import (
    REPAY_ALL,
    AccountData,
    LendingProtocol,
    decode_resume_params,
    encode_resume_params,
)
from flashcollateral.strategy.accounting import (
    AccountingGuard,
    BalanceSnapshot,
    flash_fee,
    required_collateral,
    required_return,
    verify_return,
)
from flashcollateral.strategy.admin import AdminSurface
from flashcollateral.strategy.config import StrategyConfig
from flashcollateral.strategy.fsm import RunStateMachine
from flashcollateral.strategy.models import CallbackContext, RunParameters
from flashcollateral.strategy.trace import RunResult, RunTrace
from flashcollateral.strategy.validation import validate_run_parameters
from flashcollateral.vocabulary import EventName, InterestRateMode, RunState


logger = get_logger("strategy.orchestrator")


# =============================================================================
# REENTRANCY GUARD
# =============================================================================

class RunLock:
    """
    Exclusive in-progress flag for one run.

    Set on entry, cleared on every exit path. Entering while held raises
    ``ReentrantCall`` and leaves the flag untouched.
    """

    def __init__(self):
        self.held = False

    def __enter__(self):
        if self.held:
            raise ReentrantCall()
        self.held = True
        return self

    def __exit__(self, *args):
        self.held = False
        return False


# =============================================================================
# STRATEGY
# =============================================================================

class FlashCollateralStrategy(AdminSurface):
    """
    Orchestrates one flash-loan collateral run per ``initiate`` call.

    Usage:
        strategy = FlashCollateralStrategy(ledger, config)
        result = strategy.initiate(
            collateral_amount=weth.units(10),
            borrow_amount=usdc.units(15000),
            executor_address=executor.address,
            sender=owner,
        )
        print(result.event_names)
    """

    def __init__(
        self,
        ledger: Ledger,
        config: StrategyConfig,
        metrics: MetricsRegistry | None = None,
    ):
        """
        Deploy a strategy on ``ledger``.

        Args:
            ledger: Hosting ledger
            config: Protocol, asset and owner addresses
            metrics: Metrics registry (a fresh one if omitted)
        """
        self.ledger = ledger
        self.config = config
        self.metrics = metrics or MetricsRegistry()
        self.threshold = 0

        self._lock = RunLock()
        self._fsm = RunStateMachine()
        self._trace: RunTrace | None = None

        self.address = ledger.deploy(self, "FlashCollateralStrategy")
        logger.info(f"Strategy deployed at {self.address} for owner {config.owner}")

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    @property
    def protocol_address(self) -> str:
        return self.config.protocol_address

    @property
    def collateral_asset(self) -> str:
        return self.config.collateral_asset

    @property
    def borrow_asset(self) -> str:
        return self.config.borrow_asset

    @property
    def owner(self) -> str:
        return self.config.owner

    @property
    def state(self) -> RunState:
        return self._fsm.state

    @property
    def in_progress(self) -> bool:
        return self._lock.held

    def flash_fee(self, amount: int) -> int:
        return flash_fee(amount)

    def required_collateral(self, borrow_amount: int, ltv_bps: int) -> int:
        return required_collateral(borrow_amount, ltv_bps)

    def account_data(self) -> AccountData:
        """The lending protocol's view of this strategy's position."""
        return AccountingGuard(self._protocol()).account_data(self.address)

    def health_factor(self) -> int:
        return AccountingGuard(self._protocol()).health_factor(self.address)

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def initiate(
        self,
        collateral_amount: int,
        borrow_amount: int,
        executor_address: str | None,
        *,
        sender: str,
    ) -> RunResult:
        """
        Run the full strategy once.

        Args:
            collateral_amount: Collateral asset to flash-borrow and pledge
            borrow_amount: Borrow asset to draw and dispatch
            executor_address: Executor contract receiving the borrowed funds
            sender: Calling principal (must be the owner)

        Returns:
            RunResult for the committed run

        Raises:
            ReentrantCall: another run is in flight
            AuthorizationDenied: sender is not the owner
            StrategyError / LedgerError: any step failed; nothing was committed
        """
        with self._lock:
            self._require_owner(sender)

            params = RunParameters(
                collateral_amount=collateral_amount,
                borrow_amount=borrow_amount,
                executor_address=executor_address,
            )
            trace = RunTrace(params=params)
            self._fsm.reset()
            trace.enter(RunState.IDLE)
            self._trace = trace

            self.metrics.runs_total.inc()
            self.metrics.runs_active.inc()

            with LogContext(trace.run_id):
                try:
                    with self.ledger.atomic():
                        self._request_loan(params)
                        if self._fsm.state != RunState.COMPLETED:
                            raise IllegalTransition(self._fsm.state, RunState.COMPLETED)
                except BaseException as exc:
                    self._abort(trace, exc)
                    raise
                finally:
                    self._trace = None
                    self.metrics.runs_active.dec()

                trace.complete()
                self.metrics.runs_completed.inc()
                self.metrics.run_duration_seconds.observe(trace.duration_seconds)
                logger.info(
                    f"Run completed: final borrow balance {trace.final_borrow_balance}",
                    extra={"extra_data": trace.to_summary()},
                )

        return RunResult.from_trace(trace)

    def _request_loan(self, params: RunParameters) -> None:
        validate_run_parameters(params, self.ledger.is_contract)

        self._advance(RunState.LOAN_REQUESTED)
        self._emit(
            EventName.RUN_INITIATED,
            collateralAmount=params.collateral_amount,
            borrowAmount=params.borrow_amount,
            executorAddress=params.executor_address,
            timestamp=self.ledger.block_timestamp,
        )

        self._protocol().flash_borrow(
            self.address,
            self.config.collateral_asset,
            params.collateral_amount,
            encode_resume_params(params.borrow_amount, params.executor_address),
            0,
            sender=self.address,
        )

    def _abort(self, trace: RunTrace, exc: BaseException) -> None:
        self._fsm.transition(RunState.REVERTED)
        trace.enter(RunState.REVERTED)
        trace.fail(exc)
        self.metrics.runs_reverted.inc()
        logger.warning(
            f"Run reverted: {trace.error}",
            extra={"extra_data": trace.to_summary()},
        )

    # -------------------------------------------------------------------------
    # Resumption handler
    # -------------------------------------------------------------------------

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
        """
        Resume the run once the lending protocol has lent the collateral.

        Raises:
            UnauthorizedCallback: caller is not the protocol, the loan was not
                initiated by this strategy, or the asset is wrong
        """
        context = CallbackContext(
            asset=asset,
            amount=amount,
            premium=premium,
            initiator=initiator,
            params=params,
        )
        self._authenticate(context, sender)

        borrow_amount, executor_address = decode_resume_params(context.params)
        protocol = self._protocol()
        collateral = self.config.collateral_asset
        borrow_asset = self.config.borrow_asset
        self._trace.premium = context.premium

        # Pledge what actually arrived
        self.ledger.approve(collateral, self.address, protocol.address, context.amount)
        protocol.supply(collateral, context.amount, self.address, 0, sender=self.address)
        protocol.set_collateral_flag(collateral, True, sender=self.address)
        self._advance(RunState.COLLATERAL_DEPOSITED)
        self._emit(EventName.COLLATERAL_DEPOSITED, asset=collateral, amount=context.amount)

        # The protocol rejects an under-collateralised borrow
        protocol.borrow(
            borrow_asset,
            borrow_amount,
            InterestRateMode.VARIABLE,
            0,
            self.address,
            sender=self.address,
        )
        self._advance(RunState.BORROWED)
        self._emit(EventName.BORROW_EXECUTED, asset=borrow_asset, amount=borrow_amount)

        before = self.ledger.balance_of(borrow_asset, self.address)
        self.ledger.transfer(borrow_asset, self.address, executor_address, borrow_amount)
        self._advance(RunState.DISPATCHED)

        returned = self._dispatch_and_verify(executor_address, borrow_amount, before)
        self._trace.returned_amount = returned
        self.metrics.borrow_asset_returned.observe(returned)
        self._advance(RunState.VERIFIED)
        self._emit(
            EventName.ARBITRAGE_EXECUTED,
            executorAddress=executor_address,
            borrowAmount=borrow_amount,
            returnedAmount=returned,
        )

        # Repay whatever is outstanding, including interest accrued mid-run
        held = self.ledger.balance_of(borrow_asset, self.address)
        self.ledger.approve(borrow_asset, self.address, protocol.address, held)
        repaid = protocol.repay(
            borrow_asset,
            REPAY_ALL,
            InterestRateMode.VARIABLE,
            self.address,
            sender=self.address,
        )
        self._advance(RunState.REPAID)
        logger.debug(f"Repaid {repaid} of borrow asset")

        withdrawn = protocol.withdraw(collateral, context.amount, self.address, sender=self.address)
        self._advance(RunState.UNWOUND)
        logger.debug(f"Withdrew {withdrawn} of collateral asset")

        # The protocol pulls amount + premium once this call returns
        self.ledger.approve(
            collateral,
            self.address,
            protocol.address,
            context.amount + context.premium,
        )
        final_balance = self.ledger.balance_of(borrow_asset, self.address)
        self._trace.final_borrow_balance = final_balance
        self._advance(RunState.COMPLETED)
        self._emit(
            EventName.STRATEGY_COMPLETED,
            finalBalance=final_balance,
            timestamp=self.ledger.block_timestamp,
        )
        return True

    def _authenticate(self, context: CallbackContext, sender: str) -> None:
        if not same_address(sender, self.config.protocol_address):
            self.metrics.unauthorized_callbacks.inc()
            raise UnauthorizedCallback(sender)

        # Only loans this strategy requested, while its run is in flight
        if not same_address(context.initiator, self.address) or self._trace is None:
            self.metrics.unauthorized_callbacks.inc()
            raise UnauthorizedCallback(context.initiator)

        if not same_address(context.asset, self.config.collateral_asset):
            self.metrics.unauthorized_callbacks.inc()
            raise UnauthorizedCallback(context.asset)

    def _dispatch_and_verify(self, executor_address: str, borrow_amount: int, before: int) -> int:
        executor = self.ledger.contract_at(executor_address)
        if not isinstance(executor, Executor):
            raise ExecutorFailed(executor_address, "not an executor")
        asset = self.config.borrow_asset

        ok = executor.execute(
            asset,
            borrow_amount,
            required_return(borrow_amount),
            sender=self.address,
        )
        if not ok:
            raise ExecutorFailed(executor_address, "executor reported failure")

        snapshot = BalanceSnapshot(
            asset=asset,
            holder=self.address,
            before=before,
            after=self.ledger.balance_of(asset, self.address),
        )
        return verify_return(snapshot, borrow_amount)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _protocol(self) -> LendingProtocol:
        return self.ledger.contract_at(self.config.protocol_address)

    def _advance(self, state: RunState) -> None:
        self._fsm.transition(state)
        if self._trace is not None:
            self._trace.enter(state)
        logger.debug(f"-> {state.value}")

    def _emit(self, name: EventName, **args) -> None:
        event = self.ledger.emit(self.address, name, **args)
        if self._trace is not None:
            self._trace.record_event(event)
        logger.info(f"{name.value} {args}", extra={"extra_data": {"event": name.value, **args}})
