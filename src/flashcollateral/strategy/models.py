"""
Run Models — Per-invocation data carried through one strategy run.

RunParameters and CallbackContext are the two inputs a run receives (from
the owner and from the lending protocol respectively). Neither outlives
the call that created it.
"""

from pydantic import BaseModel, ConfigDict, Field


class RunParameters(BaseModel):
    """
    Owner-supplied parameters for one run.

    Unconstrained here; ``validate_run_parameters`` applies the range and
    address checks and raises the strategy errors.
    """
    model_config = ConfigDict(frozen=True)

    collateral_amount: int = Field(
        ...,
        description="Collateral asset to flash-borrow and pledge (base units)"
    )

    borrow_amount: int = Field(
        ...,
        description="Borrow asset to draw against the pledged collateral (base units)"
    )

    executor_address: str | None = Field(
        ...,
        description="Contract that receives the borrowed funds"
    )


class CallbackContext(BaseModel):
    """
    Data delivered by the lending protocol when it resumes a run.

    Untrusted until the resumption handler has authenticated it.
    """
    model_config = ConfigDict(frozen=True)

    asset: str = Field(..., description="Asset that was lent")
    amount: int = Field(..., description="Amount actually received")
    premium: int = Field(..., description="Flash fee owed on top of amount")
    initiator: str = Field(..., description="Principal that requested the loan")
    params: bytes = Field(default=b"", description="Opaque resumption data")
