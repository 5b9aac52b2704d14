"""Pydantic request / response schemas for all API endpoints.

Field names follow the public API (camelCase):
  - Allowance   → one itemized deduction submitted by the taxpayer
  - TaxLevel    → tax attributed to one bracket, keyed by its label
"""

from __future__ import annotations
from typing import List
from pydantic import BaseModel, Field, field_validator

from ktax.utils.helpers import build_allowance_map

class Allowance(BaseModel):
    """A single itemized deduction."""
    allowanceType: str = Field(..., min_length=1, description="Allowance type, lowercase (e.g. 'donation')")
    amount: float = Field(..., ge=0, allow_inf_nan=False, description="Claimed amount")

    @field_validator("allowanceType")
    @classmethod
    def _require_lowercase(cls, value: str) -> str:
        if value != value.lower():
            raise ValueError("allowanceType must be lowercase")
        return value

# ── 1. Tax Calculation  (/tax/calculations) ──────────────────────────────

class TaxRequest(BaseModel):
    totalIncome: float = Field(..., ge=0, allow_inf_nan=False, description="Annual income")
    wht: float = Field(0.0, ge=0, allow_inf_nan=False, description="Withholding tax already paid")
    allowances: List[Allowance] = Field(default_factory=list)

    def allowance_map(self) -> dict[str, float]:
        """Submitted allowances as a mapping; a repeated type keeps its last amount."""
        return build_allowance_map((a.allowanceType, a.amount) for a in self.allowances)

class TaxLevel(BaseModel):
    level: str = Field(..., description="Bracket label")
    tax: float = Field(..., description="Tax attributed to this bracket")

class TaxResponse(BaseModel):
    tax: float = Field(..., description="Tax still payable after withholding")
    taxRefund: float = Field(..., description="Withholding to be refunded")
    taxLevel: List[TaxLevel]

# ── 2. CSV Batch  (/tax/calculations/upload-csv) ─────────────────────────

class TaxCSV(BaseModel):
    totalIncome: float
    tax: float

class TaxCSVResponse(BaseModel):
    taxes: List[TaxCSV]

# ── 3. Admin  (/admin/deductions/*) ──────────────────────────────────────

class AdminDeductionRequest(BaseModel):
    amount: float = Field(..., allow_inf_nan=False, description="New deduction amount")

class PersonalDeductionResponse(BaseModel):
    personalDeduction: float

class KReceiptResponse(BaseModel):
    kReceipt: float
