"""
Address helpers — normalisation and derivation of 20-byte hex addresses.
"""

from web3 import Web3

from flashcollateral.errors import InvalidAddress


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

MAX_UINT256 = 2**256 - 1


def is_null_address(value: str | None) -> bool:
    """True for None, the empty string, and the all-zero address."""
    if not value:
        return True
    if Web3.is_address(value):
        return int(value, 16) == 0
    return False


def normalize_address(value: str | None, field: str) -> str:
    """
    Return the checksummed form of ``value``.

    Raises:
        InvalidAddress: value is null or not a hex address
    """
    if is_null_address(value) or not Web3.is_address(value):
        raise InvalidAddress(field)
    return Web3.to_checksum_address(value)


def same_address(a: str | None, b: str | None) -> bool:
    """Case-insensitive address comparison."""
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


def derive_address(label: str) -> str:
    """Deterministic address from a label (last 20 bytes of keccak256)."""
    digest = Web3.keccak(text=label)
    return Web3.to_checksum_address("0x" + bytes(digest[-20:]).hex())
