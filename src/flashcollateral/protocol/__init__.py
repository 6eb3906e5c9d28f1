"""
Protocol — Lending protocol capability interfaces.
"""

from flashcollateral.protocol.base import (
    REPAY_ALL,
    RESUME_PARAMS_TYPES,
    AccountData,
    LendingProtocol,
    FlashLoanReceiver,
    encode_resume_params,
    decode_resume_params,
)

__all__ = [
    "REPAY_ALL",
    "RESUME_PARAMS_TYPES",
    "AccountData",
    "LendingProtocol",
    "FlashLoanReceiver",
    "encode_resume_params",
    "decode_resume_params",
]
