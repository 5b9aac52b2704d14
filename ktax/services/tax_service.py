"""Progressive personal income-tax engine.

Tax Brackets:
    0 – 150,000               → 0 %
    150,001 – 500,000         → 10 %
    500,001 – 1,000,000       → 15 %
    1,000,001 – 2,000,000     → 20 %
    2,000,001 and above       → 35 %

Every function here is pure: configuration and taxpayer figures come in,
numbers come out.  Inputs are assumed validated by the caller.
"""

from __future__ import annotations

from typing import List, Mapping, Sequence, Tuple

from ktax.models.tax import (
    Bounded,
    Bracket,
    TaxConfig,
    TaxpayerInput,
    TaxStatement,
    TaxSummary,
    Unbounded,
)

TAX_BRACKETS: Tuple[Bracket, ...] = (
    Bracket(percentage=0.00, upper_bound=Bounded(amount=150_000), label="0-150,000"),
    Bracket(percentage=0.10, upper_bound=Bounded(amount=500_000), label="150,001-500,000"),
    Bracket(percentage=0.15, upper_bound=Bounded(amount=1_000_000), label="500,001-1,000,000"),
    Bracket(percentage=0.20, upper_bound=Bounded(amount=2_000_000), label="1,000,001-2,000,000"),
    Bracket(percentage=0.35, upper_bound=Unbounded(), label="2,000,001 ขึ้นไป"),
)


def check_bracket_table(brackets: Sequence[Bracket]) -> None:
    """Raise ``ValueError`` unless *brackets* is a usable bracket table.

    The engine itself never checks; callers run this on configuration
    before handing it over.
    """
    if not brackets:
        raise ValueError("Bracket table is empty")

    unbounded = [b for b in brackets if b.is_unbounded]
    if len(unbounded) != 1:
        raise ValueError(
            f"Bracket table must have exactly one unbounded bracket, found {len(unbounded)}"
        )
    if not brackets[-1].is_unbounded:
        raise ValueError("The unbounded bracket must be the last one")

    previous = 0.0
    for bracket in brackets:
        if not 0.0 <= bracket.percentage <= 1.0:
            raise ValueError(
                f"Bracket '{bracket.label}' has rate {bracket.percentage} outside [0, 1]"
            )
        if isinstance(bracket.upper_bound, Bounded):
            if bracket.upper_bound.amount <= previous:
                raise ValueError(
                    f"Bracket '{bracket.label}' is not above the previous bound {previous}"
                )
            previous = bracket.upper_bound.amount


def calculate_total_allowance(
    config: TaxConfig,
    allowances: Mapping[str, float],
) -> float:
    """Default allowances plus submitted allowances clamped to their caps.

    Submitted types that are default allowances are skipped (defaults can't
    be overridden or stacked), as are types with no configured cap.
    """
    total = sum(config.default_allowances.values())

    for allowance_type, amount in allowances.items():
        if allowance_type in config.default_allowances:
            continue

        cap = config.allowed_allowances.get(allowance_type)
        if cap is None:
            continue

        total += min(amount, cap)

    return total


def calculate_tax_statements(
    brackets: Sequence[Bracket],
    net_income: float,
) -> List[TaxStatement]:
    """Split *net_income* across *brackets*, one statement per bracket.

    The bracket that holds ``net_income`` (or the unbounded one) takes the
    whole remainder; brackets below it are taxed on their full span.
    Brackets above it get a zero statement.
    """
    statements: list[TaxStatement] = []
    remainder = net_income
    previous_bound = 0.0

    for bracket in brackets:
        if remainder <= 0:
            statements.append(TaxStatement(bracket=bracket, tax=0.0))
            continue

        bound = bracket.upper_bound
        if isinstance(bound, Unbounded) or net_income <= bound.amount:
            tax = remainder * bracket.percentage
            remainder = 0.0
        else:
            span = bound.amount - previous_bound
            tax = span * bracket.percentage
            remainder -= span
            previous_bound = bound.amount

        statements.append(TaxStatement(bracket=bracket, tax=tax))

    return statements


def reconcile_withholding(total_tax: float, withholding: float) -> Tuple[float, float]:
    """Return ``(tax, refund)``; at most one of them is non-zero."""
    if total_tax <= withholding:
        return 0.0, withholding - total_tax
    return total_tax - withholding, 0.0


def calculate_tax_summary(config: TaxConfig, taxpayer: TaxpayerInput) -> TaxSummary:
    """Compute the per-bracket breakdown and the payable tax or refund.

    When allowances swallow the whole income the statement list is still
    returned zero-filled, one entry per bracket, and all withholding is
    refunded.
    """
    net_income = taxpayer.income - calculate_total_allowance(config, taxpayer.allowances)

    statements = calculate_tax_statements(config.brackets, net_income)
    total_tax = sum(s.tax for s in statements)

    tax, refund = reconcile_withholding(total_tax, taxpayer.withholding)

    return TaxSummary(statements=statements, tax=tax, refund=refund)
