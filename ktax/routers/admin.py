"""Admin endpoints for configurable deduction limits (HTTP Basic auth):
    POST  /admin/deductions/personal
    POST  /admin/deductions/k-receipt
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ktax.config import settings
from ktax.models.schemas import (
    AdminDeductionRequest,
    KReceiptResponse,
    PersonalDeductionResponse,
)
from ktax.services.allowance_service import (
    K_RECEIPT,
    PERSONAL,
    update_allowed_allowance,
    update_default_allowance,
)

logger = logging.getLogger(__name__)

_basic = HTTPBasic()


def require_admin(credentials: HTTPBasicCredentials = Depends(_basic)) -> str:
    """Reject the request unless it carries the configured admin credentials."""
    username_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8")
    )
    if not (username_ok and password_ok):
        logger.warning("Rejected admin credentials for user '%s'", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


router = APIRouter(
    prefix="/admin/deductions",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


@router.post(
    "/personal",
    response_model=PersonalDeductionResponse,
    summary="Set the personal deduction granted to every taxpayer",
)
async def update_personal(body: AdminDeductionRequest) -> PersonalDeductionResponse:
    if not settings.PERSONAL_DEDUCTION_MIN <= body.amount <= settings.PERSONAL_DEDUCTION_MAX:
        raise HTTPException(status_code=400, detail="Invalid amount")

    amount = await update_default_allowance(PERSONAL, body.amount)
    return PersonalDeductionResponse(personalDeduction=amount)


@router.post(
    "/k-receipt",
    response_model=KReceiptResponse,
    summary="Set the maximum k-receipt deduction",
)
async def update_k_receipt(body: AdminDeductionRequest) -> KReceiptResponse:
    if not 0 < body.amount <= settings.K_RECEIPT_LIMIT:
        raise HTTPException(status_code=400, detail="Invalid amount")

    amount = await update_allowed_allowance(K_RECEIPT, body.amount)
    return KReceiptResponse(kReceipt=amount)
