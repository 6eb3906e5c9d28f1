"""Tests for a full strategy run driven through initiate()."""

import pytest

from flashcollateral.chain import InsufficientBalance, MAX_UINT256
from flashcollateral.errors import (
    AuthorizationDenied,
    ExecutorFailed,
    InsufficientReturn,
    InvalidAddress,
    InvalidAmount,
    ReentrantCall,
    TargetMustBeContract,
)
from flashcollateral.testing import ProtocolError, build_environment
from flashcollateral.vocabulary import RUN_EVENT_SEQUENCE, RUN_SEQUENCE, RunState


def run(env, collateral, borrow, executor=None, sender=None):
    return env.strategy.initiate(
        collateral,
        borrow,
        env.executor.address if executor is None else executor,
        sender=env.owner if sender is None else sender,
    )


def snapshot(env):
    """Balances that a reverted run must leave untouched."""
    holders = [env.strategy.address, env.pool.address, env.executor.address, env.owner]
    return {
        (token.symbol, holder): env.ledger.balance_of(token.address, holder)
        for token in (env.weth, env.usdc)
        for holder in holders
    }


class TestSuccessfulRun:
    """Tests for a run that commits."""

    def test_events_in_order(self, funded_env, collateral_amount, borrow_amount):
        funded_env.executor.profit_amount = funded_env.usdc.units(100)

        result = run(funded_env, collateral_amount, borrow_amount)

        assert result.success is True
        assert result.event_names == [e.value for e in RUN_EVENT_SEQUENCE]
        logged = funded_env.ledger.events(funded_env.strategy.address)
        assert [e.name for e in logged] == result.event_names

    def test_states_visited(self, funded_env, collateral_amount, borrow_amount):
        result = run(funded_env, collateral_amount, borrow_amount)

        assert result.trace.states == list(RUN_SEQUENCE)
        assert funded_env.strategy.state == RunState.COMPLETED
        assert funded_env.strategy.in_progress is False

    def test_balances_after_profit(self, funded_env, collateral_amount, borrow_amount):
        """Profit stays in USDC; the flash premium comes out of WETH."""
        env = funded_env
        env.executor.profit_amount = env.usdc.units(100)

        result = run(env, collateral_amount, borrow_amount)

        assert env.ledger.balance_of(env.usdc.address, env.strategy.address) == env.usdc.units(100)
        assert env.ledger.balance_of(env.weth.address, env.strategy.address) == env.weth.units("0.995")
        assert result.premium == env.weth.units("0.005")
        assert result.returned_amount == env.usdc.units(15100)
        assert result.final_borrow_balance == env.usdc.units(100)

    def test_position_fully_unwound(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        run(env, collateral_amount, borrow_amount)

        assert env.pool.debt(env.strategy.address, env.usdc.address) == 0
        assert env.pool.supplied(env.strategy.address, env.weth.address) == 0
        assert env.strategy.health_factor() == MAX_UINT256

    def test_event_arguments(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        env.executor.profit_amount = env.usdc.units(100)

        events = {e.name: e.args for e in run(env, collateral_amount, borrow_amount).events}

        assert events["RunInitiated"]["collateralAmount"] == collateral_amount
        assert events["RunInitiated"]["borrowAmount"] == borrow_amount
        assert events["RunInitiated"]["executorAddress"] == env.executor.address
        assert events["CollateralDeposited"] == {"asset": env.weth.address, "amount": collateral_amount}
        assert events["BorrowExecuted"] == {"asset": env.usdc.address, "amount": borrow_amount}
        assert events["ArbitrageExecuted"]["executorAddress"] == env.executor.address
        assert events["ArbitrageExecuted"]["returnedAmount"] == env.usdc.units(15100)
        assert events["StrategyCompleted"]["finalBalance"] == env.usdc.units(100)

    def test_executor_asked_for_buffer(self, funded_env, collateral_amount, borrow_amount):
        """The executor is told to return the amount plus 2%."""
        run(funded_env, collateral_amount, borrow_amount)

        call = funded_env.executor.calls[0]
        assert call["amount"] == borrow_amount
        assert call["required_return"] == funded_env.usdc.units(15300)
        assert call["sender"] == funded_env.strategy.address

    def test_consecutive_runs(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        env.executor.profit_amount = env.usdc.units(100)

        first = run(env, collateral_amount, borrow_amount)
        second = run(env, collateral_amount, borrow_amount)

        assert first.run_id != second.run_id
        assert env.ledger.balance_of(env.usdc.address, env.strategy.address) == env.usdc.units(200)
        assert env.strategy.metrics.runs_completed.value == 2

    def test_break_even_without_profit(self, env, collateral_amount, borrow_amount):
        """An unfunded executor that returns exactly the amount still commits."""
        result = run(env, collateral_amount, borrow_amount)
        assert result.final_borrow_balance == 0

    def test_interest_accrued_mid_run_is_repaid(self, funded_env, collateral_amount, borrow_amount):
        """Repay-all settles interest that accrued after the borrow."""
        env = funded_env
        env.executor.profit_amount = env.usdc.units(100)
        env.executor.on_execute = lambda ex: env.pool.accrue_interest(
            env.usdc.address, env.strategy.address, env.usdc.units(1)
        )

        result = run(env, collateral_amount, borrow_amount)

        assert result.final_borrow_balance == env.usdc.units(99)
        assert env.pool.debt(env.strategy.address, env.usdc.address) == 0


class TestRejectedRun:
    """Tests for runs that revert; nothing may persist."""

    def test_zero_borrow(self, funded_env, collateral_amount):
        env = funded_env
        before = snapshot(env)

        with pytest.raises(InvalidAmount) as exc_info:
            run(env, collateral_amount, 0)

        assert exc_info.value.field == "borrowAmount"
        assert snapshot(env) == before
        assert env.ledger.events(env.strategy.address) == []
        assert env.strategy.state == RunState.REVERTED

    def test_zero_collateral(self, funded_env, borrow_amount):
        with pytest.raises(InvalidAmount) as exc_info:
            run(funded_env, 0, borrow_amount)
        assert exc_info.value.field == "collateralAmount"

    def test_null_executor(self, funded_env, collateral_amount, borrow_amount):
        with pytest.raises(InvalidAddress) as exc_info:
            funded_env.strategy.initiate(
                collateral_amount, borrow_amount, None, sender=funded_env.owner
            )
        assert exc_info.value.field == "targetWallet"

    def test_executor_not_contract(self, funded_env, collateral_amount, borrow_amount):
        with pytest.raises(TargetMustBeContract):
            run(funded_env, collateral_amount, borrow_amount, executor=funded_env.user1)

    def test_malformed_executor(self, funded_env, collateral_amount, borrow_amount):
        """A short hex string is rejected as an address, not looked up."""
        with pytest.raises(InvalidAddress) as exc_info:
            run(funded_env, collateral_amount, borrow_amount, executor="0x1234")
        assert exc_info.value.field == "targetWallet"

    def test_executor_not_an_executor(self, funded_env, collateral_amount, borrow_amount):
        """A deployed contract without execute() fails the run cleanly."""
        env = funded_env
        before = snapshot(env)

        with pytest.raises(ExecutorFailed) as exc_info:
            run(env, collateral_amount, borrow_amount, executor=env.pool.address)

        assert exc_info.value.address == env.pool.address
        assert exc_info.value.reason == "not an executor"
        assert snapshot(env) == before

    def test_not_owner(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        with pytest.raises(AuthorizationDenied) as exc_info:
            run(env, collateral_amount, borrow_amount, sender=env.user1)

        assert exc_info.value.who == env.user1
        assert env.strategy.state == RunState.IDLE
        assert env.strategy.metrics.runs_total.value == 0

    def test_executor_reports_failure(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        env.executor.should_succeed = False
        before = snapshot(env)

        with pytest.raises(ExecutorFailed) as exc_info:
            run(env, collateral_amount, borrow_amount)

        assert exc_info.value.address == env.executor.address
        assert snapshot(env) == before
        assert env.ledger.events(env.strategy.address) == []

    def test_short_return(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        env.executor.should_return_enough = False
        before = snapshot(env)

        with pytest.raises(InsufficientReturn) as exc_info:
            run(env, collateral_amount, borrow_amount)

        assert exc_info.value.expected == borrow_amount
        assert exc_info.value.actual == borrow_amount // 2
        assert snapshot(env) == before
        assert env.pool.debt(env.strategy.address, env.usdc.address) == 0

    def test_borrow_beyond_capacity(self, funded_env, collateral_amount):
        """10 WETH at $2000 and 80% LTV cannot back 17,000 USDC."""
        env = funded_env
        before = snapshot(env)

        with pytest.raises(ProtocolError):
            run(env, collateral_amount, env.usdc.units(17000))

        assert snapshot(env) == before

    def test_premium_not_covered(self, collateral_amount, borrow_amount):
        """Settlement after the callback fails; the completed run still reverts."""
        env = build_environment(strategy_weth="0")
        before = snapshot(env)

        with pytest.raises(InsufficientBalance):
            run(env, collateral_amount, borrow_amount)

        assert snapshot(env) == before
        assert env.ledger.events(env.strategy.address) == []
        assert env.strategy.state == RunState.REVERTED

    def test_revert_is_counted(self, funded_env, collateral_amount, borrow_amount):
        funded_env.executor.should_succeed = False
        with pytest.raises(ExecutorFailed):
            run(funded_env, collateral_amount, borrow_amount)

        metrics = funded_env.strategy.metrics
        assert metrics.runs_total.value == 1
        assert metrics.runs_reverted.value == 1
        assert metrics.runs_active.value == 0

    def test_recovers_after_revert(self, funded_env, collateral_amount, borrow_amount):
        funded_env.executor.should_succeed = False
        with pytest.raises(ExecutorFailed):
            run(funded_env, collateral_amount, borrow_amount)

        funded_env.executor.should_succeed = True
        assert run(funded_env, collateral_amount, borrow_amount).success is True


class TestReentrancy:
    """Tests for the in-progress lock."""

    def test_reentry_from_executor(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        env.executor.on_execute = lambda ex: run(env, collateral_amount, borrow_amount)
        before = snapshot(env)

        with pytest.raises(ReentrantCall):
            run(env, collateral_amount, borrow_amount)

        assert env.strategy.in_progress is False
        assert snapshot(env) == before

    def test_reentry_by_stranger_is_still_reentry(self, funded_env, collateral_amount, borrow_amount):
        """The lock is checked before the owner."""
        env = funded_env
        env.executor.on_execute = lambda ex: run(
            env, collateral_amount, borrow_amount, sender=ex.address
        )

        with pytest.raises(ReentrantCall):
            run(env, collateral_amount, borrow_amount)

    def test_lock_released_for_next_run(self, funded_env, collateral_amount, borrow_amount):
        env = funded_env
        env.executor.on_execute = lambda ex: run(env, collateral_amount, borrow_amount)
        with pytest.raises(ReentrantCall):
            run(env, collateral_amount, borrow_amount)

        env.executor.on_execute = None
        assert run(env, collateral_amount, borrow_amount).success is True
