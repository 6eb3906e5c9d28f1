#!/usr/bin/env python3
"""
Flash Collateral Strategy Demo

Runs one strategy cycle against the in-memory ledger and mock lending pool:
flash-borrow 10 WETH, pledge it, borrow 15,000 USDC, hand it to a mock
executor, unwind, and print the emitted events and resulting balances.

Usage:
    python run_strategy_demo.py                      # Profitable run
    python run_strategy_demo.py --profit 250         # Custom profit in USDC
    python run_strategy_demo.py --fail               # Executor reports failure
    python run_strategy_demo.py --short-return       # Executor returns too little
    python run_strategy_demo.py --json               # Machine-readable output
"""

import argparse
import json
import logging
import sys

from flashcollateral.chain import LedgerError
from flashcollateral.errors import StrategyError
from flashcollateral.observability import configure_logging
from flashcollateral.testing import build_environment


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Flash Collateral Strategy Demo",
    )
    parser.add_argument("--collateral", default="10", help="WETH to flash-borrow (default: 10)")
    parser.add_argument("--borrow", default="15000", help="USDC to borrow (default: 15000)")
    parser.add_argument("--profit", default="100", help="USDC profit the executor adds (default: 100)")
    parser.add_argument("--executor-funds", default="20000", help="USDC pre-funded to the executor")
    parser.add_argument("--fail", action="store_true", help="Executor reports failure")
    parser.add_argument("--short-return", action="store_true", help="Executor returns half the funds")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        json_format=args.json,
    )

    env = build_environment()
    env.ledger.mint(env.usdc.address, env.executor.address, env.usdc.units(args.executor_funds))
    env.executor.profit_amount = env.usdc.units(args.profit)
    env.executor.should_succeed = not args.fail
    env.executor.should_return_enough = not args.short_return

    usdc_before = env.ledger.balance_of(env.usdc.address, env.strategy.address)
    weth_before = env.ledger.balance_of(env.weth.address, env.strategy.address)

    output: dict = {"success": False}
    try:
        result = env.strategy.initiate(
            env.weth.units(args.collateral),
            env.usdc.units(args.borrow),
            env.executor.address,
            sender=env.owner,
        )
        output["success"] = True
        output["run_id"] = str(result.run_id)
        output["events"] = [e.to_dict() for e in result.events]
    except (StrategyError, LedgerError) as exc:
        output["error"] = f"{type(exc).__name__}: {exc}"

    output["usdc_delta"] = env.ledger.balance_of(env.usdc.address, env.strategy.address) - usdc_before
    output["weth_delta"] = env.ledger.balance_of(env.weth.address, env.strategy.address) - weth_before

    if args.json:
        print(json.dumps(output, indent=2, default=str))
    else:
        print("=" * 60)
        print("Flash Collateral Strategy - Demo Run")
        print("=" * 60)
        if output["success"]:
            print(f"Run {output['run_id']} COMPLETED")
            for event in output["events"]:
                print(f"  {event['name']:<20} {event['args']}")
        else:
            print(f"Run REVERTED: {output['error']}")
        print(f"USDC delta: {output['usdc_delta']}")
        print(f"WETH delta: {output['weth_delta']}")

    return 0 if output["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
