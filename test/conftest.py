# Test type: Configuration
# Validation to be executed: Shared fixtures for all test modules
# Command: pytest test/ -v (this file is auto-loaded by pytest)

"""Shared pytest fixtures for the K-Tax API test suite."""

from __future__ import annotations

import base64

import pytest
from httpx import ASGITransport, AsyncClient

from ktax.config import settings
from ktax.main import app
from ktax.models.tax import TaxConfig
from ktax.services.allowance_service import reset_memory_store
from ktax.services.tax_service import TAX_BRACKETS


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_allowance_store():
    """Every test starts from the seeded in-memory allowance tables."""
    reset_memory_store()
    yield
    reset_memory_store()


@pytest.fixture
async def client():
    """Async HTTP client bound to the FastAPI app (no real server needed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def admin_auth():
    """Authorization header carrying the configured admin credentials."""
    token = base64.b64encode(
        f"{settings.ADMIN_USERNAME}:{settings.ADMIN_PASSWORD}".encode("utf-8")
    ).decode("ascii")
    return {"Authorization": f"Basic {token}"}


# ── Sample configuration ─────────────────────────────────────────────────

@pytest.fixture
def tax_config():
    """Built-in brackets, personal 60,000, donation cap 100,000, k-receipt cap 50,000."""
    return TaxConfig(
        brackets=TAX_BRACKETS,
        default_allowances={"personal": 60_000},
        allowed_allowances={"donation": 100_000, "k-receipt": 50_000},
    )
