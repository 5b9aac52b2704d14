"""Shared utility functions: rounding and allowance-key handling."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple


# ── Financial helpers ─────────────────────────────────────────────────────

def round_currency(value: float, decimals: int = 2) -> float:
    """Round to *decimals* places (standard banker-friendly rounding)."""
    return round(value, decimals)


# ── Allowance keys ────────────────────────────────────────────────────────

def normalise_allowance_type(value: str) -> str:
    """Canonical form of an allowance-type key: stripped and lower-cased."""
    return value.strip().lower()


def build_allowance_map(pairs: Iterable[Tuple[str, float]]) -> Dict[str, float]:
    """Collapse ``(type, amount)`` pairs into a mapping.

    Keys are normalised; when a type repeats, the last amount wins.
    """
    allowances: dict[str, float] = {}
    for allowance_type, amount in pairs:
        allowances[normalise_allowance_type(allowance_type)] = float(amount)
    return allowances


def snapshot(allowances: Mapping[str, float]) -> Dict[str, float]:
    """Detached copy of an allowance mapping for a single computation."""
    return dict(allowances)
