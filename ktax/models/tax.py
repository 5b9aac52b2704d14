"""Immutable value types consumed and produced by the tax engine.

A bracket's upper limit is a tagged variant: ``Bounded(amount)`` for a
closed bracket and ``Unbounded()`` for the open-ended top bracket.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Bounded(BaseModel):
    """Bracket closed at ``amount`` (inclusive)."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["bounded"] = "bounded"
    amount: float = Field(..., gt=0)


class Unbounded(BaseModel):
    """Open-ended bracket that absorbs whatever income remains."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["unbounded"] = "unbounded"


UpperBound = Annotated[Union[Bounded, Unbounded], Field(discriminator="kind")]


class Bracket(BaseModel):
    """A contiguous income range taxed at a single marginal rate."""
    model_config = ConfigDict(frozen=True)

    percentage: float = Field(..., description="Marginal rate as a fraction, e.g. 0.10")
    upper_bound: UpperBound
    label: str = Field(..., description="Display string, e.g. '150,001-500,000'")

    @property
    def is_unbounded(self) -> bool:
        return isinstance(self.upper_bound, Unbounded)


class TaxConfig(BaseModel):
    """Bracket table plus the two allowance tables.

    ``default_allowances`` are always granted; ``allowed_allowances`` maps an
    elective allowance type to its maximum permitted amount.
    """
    model_config = ConfigDict(frozen=True)

    brackets: Tuple[Bracket, ...]
    default_allowances: Dict[str, float] = Field(default_factory=dict)
    allowed_allowances: Dict[str, float] = Field(default_factory=dict)


class TaxpayerInput(BaseModel):
    """One taxpayer's figures, built once from a finished allowance mapping."""
    model_config = ConfigDict(frozen=True)

    income: float
    withholding: float = 0.0
    allowances: Dict[str, float] = Field(default_factory=dict)


class TaxStatement(BaseModel):
    model_config = ConfigDict(frozen=True)

    bracket: Bracket
    tax: float


class TaxSummary(BaseModel):
    """Per-bracket statements plus the reconciled payable tax or refund."""
    model_config = ConfigDict(frozen=True)

    statements: List[TaxStatement]
    tax: float = 0.0
    refund: float = 0.0
