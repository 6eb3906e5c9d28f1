"""
Strategy Configuration — Immutable identity of a strategy instance.

Set once at construction and never mutated: the lending protocol to drive,
the collateral and borrow assets, and the owning principal.
"""

from dataclasses import dataclass

from flashcollateral.chain.address import normalize_address


@dataclass(frozen=True)
class StrategyConfig:
    """
    Addresses a strategy is bound to.

    All four are checksummed on construction; a null or malformed value
    raises ``InvalidAddress`` naming the offending field.
    """
    protocol_address: str
    collateral_asset: str
    borrow_asset: str
    owner: str

    def __post_init__(self):
        for name in ("protocol_address", "collateral_asset", "borrow_asset", "owner"):
            object.__setattr__(self, name, normalize_address(getattr(self, name), name))

    def to_dict(self) -> dict[str, str]:
        return {
            "protocol_address": self.protocol_address,
            "collateral_asset": self.collateral_asset,
            "borrow_asset": self.borrow_asset,
            "owner": self.owner,
        }
