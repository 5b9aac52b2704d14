"""Allowance configuration store.

1. Load: default allowances + allowed-allowance caps → ``TaxConfig``.
2. Update: admin changes to the personal deduction and the k-receipt cap.

Backed by PostgreSQL when available; otherwise an in-process store seeded
from settings takes its place.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ktax.config import settings
from ktax.database import get_session
from ktax.models.db_models import AllowedAllowance, DefaultAllowance
from ktax.models.tax import TaxConfig
from ktax.services.tax_service import TAX_BRACKETS
from ktax.utils.helpers import normalise_allowance_type, snapshot

logger = logging.getLogger(__name__)

PERSONAL = "personal"
DONATION = "donation"
K_RECEIPT = "k-receipt"


def _seed_default_allowances() -> Dict[str, float]:
    return {PERSONAL: settings.PERSONAL_DEDUCTION}


def _seed_allowed_allowances() -> Dict[str, float]:
    return {
        DONATION: settings.DONATION_MAX,
        K_RECEIPT: settings.K_RECEIPT_MAX,
    }


# ── In-memory fallback ────────────────────────────────────────────────────
_memory_default: Dict[str, float] = _seed_default_allowances()
_memory_allowed: Dict[str, float] = _seed_allowed_allowances()


def reset_memory_store() -> None:
    """Restore the in-memory store to its seed values."""
    global _memory_default, _memory_allowed
    _memory_default = _seed_default_allowances()
    _memory_allowed = _seed_allowed_allowances()


async def seed_allowances(session: Optional[AsyncSession]) -> None:
    """Insert seed rows that are missing; existing rows are left alone."""
    if session is None:
        return

    for allowance_type, amount in _seed_default_allowances().items():
        if await session.get(DefaultAllowance, allowance_type) is None:
            session.add(DefaultAllowance(allowance_type=allowance_type, amount=amount))

    for allowance_type, max_amount in _seed_allowed_allowances().items():
        if await session.get(AllowedAllowance, allowance_type) is None:
            session.add(AllowedAllowance(allowance_type=allowance_type, max_amount=max_amount))


# ── 1. Load ───────────────────────────────────────────────────────────────

async def find_default_allowances() -> Dict[str, float]:
    async with get_session() as session:
        if session is None:
            return snapshot(_memory_default)

        rows = (await session.scalars(select(DefaultAllowance))).all()
        return {normalise_allowance_type(r.allowance_type): r.amount for r in rows}


async def find_allowed_allowances() -> Dict[str, float]:
    async with get_session() as session:
        if session is None:
            return snapshot(_memory_allowed)

        rows = (await session.scalars(select(AllowedAllowance))).all()
        return {normalise_allowance_type(r.allowance_type): r.max_amount for r in rows}


async def load_tax_config() -> TaxConfig:
    """Snapshot the current configuration for one or more computations."""
    return TaxConfig(
        brackets=TAX_BRACKETS,
        default_allowances=await find_default_allowances(),
        allowed_allowances=await find_allowed_allowances(),
    )


# ── 2. Update ─────────────────────────────────────────────────────────────

async def update_default_allowance(allowance_type: str, amount: float) -> float:
    """Set a default allowance amount and return the stored value."""
    allowance_type = normalise_allowance_type(allowance_type)

    async with get_session() as session:
        if session is None:
            _memory_default[allowance_type] = amount
        else:
            row = await session.get(DefaultAllowance, allowance_type)
            if row is None:
                row = DefaultAllowance(allowance_type=allowance_type, amount=amount)
                session.add(row)
            else:
                row.amount = amount

    logger.info("Default allowance '%s' set to %.2f", allowance_type, amount)
    return amount


async def update_allowed_allowance(allowance_type: str, max_amount: float) -> float:
    """Set the cap of an elective allowance and return the stored value."""
    allowance_type = normalise_allowance_type(allowance_type)

    async with get_session() as session:
        if session is None:
            _memory_allowed[allowance_type] = max_amount
        else:
            row = await session.get(AllowedAllowance, allowance_type)
            if row is None:
                row = AllowedAllowance(allowance_type=allowance_type, max_amount=max_amount)
                session.add(row)
            else:
                row.max_amount = max_amount

    logger.info("Allowed allowance '%s' capped at %.2f", allowance_type, max_amount)
    return max_amount
