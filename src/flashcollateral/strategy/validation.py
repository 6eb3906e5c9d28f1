"""
Run Validation — Pre-flight checks on run parameters.

First gate of every run. Checks run in a fixed order and the first failure
wins; nothing is called out to and nothing is mutated.
"""

from typing import Callable

from web3 import Web3

from flashcollateral.chain.address import is_null_address
from flashcollateral.errors import InvalidAddress, InvalidAmount, TargetMustBeContract
from flashcollateral.strategy.models import RunParameters


def validate_run_parameters(
    params: RunParameters,
    is_contract: Callable[[str], bool],
) -> None:
    """
    Validate run parameters.

    Args:
        params: Parameters supplied by the owner
        is_contract: Read-only predicate telling whether code lives at an address

    Raises:
        InvalidAmount: collateral or borrow amount is not positive
        InvalidAddress: executor address is null or malformed
        TargetMustBeContract: executor address is a bare account
    """
    if params.collateral_amount <= 0:
        raise InvalidAmount("collateralAmount")

    if params.borrow_amount <= 0:
        raise InvalidAmount("borrowAmount")

    if is_null_address(params.executor_address) or not Web3.is_address(params.executor_address):
        raise InvalidAddress("targetWallet")

    if not is_contract(params.executor_address):
        raise TargetMustBeContract(params.executor_address)
