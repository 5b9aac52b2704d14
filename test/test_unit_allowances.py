# Test type: Unit Test
# Validation to be executed: Validates the allowance store running on its
#   in-memory fallback (no PostgreSQL): loading, snapshots and updates.
# Command: pytest test/test_unit_allowances.py -v

"""Unit tests for ktax.services.allowance_service module."""

import pytest

from ktax.services import allowance_service
from ktax.services.allowance_service import (
    find_allowed_allowances,
    find_default_allowances,
    load_tax_config,
    reset_memory_store,
    seed_allowances,
    update_allowed_allowance,
    update_default_allowance,
)
from ktax.services.tax_service import TAX_BRACKETS

pytestmark = pytest.mark.anyio


async def test_seeded_defaults():
    assert await find_default_allowances() == {"personal": 60_000.0}


async def test_seeded_caps():
    assert await find_allowed_allowances() == {"donation": 100_000.0, "k-receipt": 50_000.0}


async def test_load_tax_config():
    config = await load_tax_config()
    assert config.brackets == TAX_BRACKETS
    assert config.default_allowances == {"personal": 60_000.0}
    assert config.allowed_allowances["k-receipt"] == 50_000.0


async def test_update_personal():
    assert await update_default_allowance("personal", 70_000) == 70_000
    assert (await find_default_allowances())["personal"] == 70_000


async def test_update_cap_normalises_key():
    await update_allowed_allowance("K-Receipt", 80_000)
    assert (await find_allowed_allowances())["k-receipt"] == 80_000


async def test_loaded_config_is_a_snapshot():
    """Later admin updates don't reach a configuration already handed out."""
    config = await load_tax_config()
    await update_default_allowance("personal", 90_000)
    assert config.default_allowances["personal"] == 60_000


async def test_reset_memory_store():
    await update_default_allowance("personal", 90_000)
    reset_memory_store()
    assert allowance_service._memory_default == {"personal": 60_000.0}


async def test_seed_without_session_is_noop():
    await seed_allowances(None)
    assert await find_default_allowances() == {"personal": 60_000.0}
