"""Routers for tax calculation endpoints:
    POST  /tax/calculations
    POST  /tax/calculations/upload-csv
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, HTTPException, Request

from ktax.database import get_session
from ktax.models.db_models import CalculationAudit
from ktax.models.schemas import (
    TaxCSV,
    TaxCSVResponse,
    TaxLevel,
    TaxRequest,
    TaxResponse,
)
from ktax.models.tax import TaxpayerInput
from ktax.services.allowance_service import DONATION, load_tax_config
from ktax.services.csv_service import CSVFormatError, parse_tax_csv
from ktax.services.tax_service import calculate_tax_summary
from ktax.utils.helpers import round_currency

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tax",
    tags=["Tax"],
)


async def _record_audit(endpoint: str, input_count: int, summary: dict) -> None:
    async with get_session() as session:
        if session is not None:
            session.add(
                CalculationAudit(
                    endpoint=endpoint,
                    input_count=input_count,
                    summary=json.dumps(summary),
                )
            )


# ── 1. Single calculation ────────────────────────────────────────────────

@router.post(
    "/calculations",
    response_model=TaxResponse,
    summary="Calculate payable tax or refund for one taxpayer",
)
async def calculate_tax(body: TaxRequest) -> TaxResponse:
    """Apply allowances, tax net income per bracket and reconcile against
    withholding.  Returns one ``taxLevel`` entry per bracket.
    """
    if body.wht > body.totalIncome:
        raise HTTPException(status_code=400, detail="Invalid wht")

    config = await load_tax_config()
    summary = calculate_tax_summary(
        config,
        TaxpayerInput(
            income=body.totalIncome,
            withholding=body.wht,
            allowances=body.allowance_map(),
        ),
    )

    response = TaxResponse(
        tax=round_currency(summary.tax),
        taxRefund=round_currency(summary.refund),
        taxLevel=[
            TaxLevel(level=s.bracket.label, tax=round_currency(s.tax))
            for s in summary.statements
        ],
    )

    await _record_audit(
        "/tax/calculations",
        1,
        {"tax": response.tax, "taxRefund": response.taxRefund},
    )
    return response


# ── 2. CSV batch ─────────────────────────────────────────────────────────

@router.post(
    "/calculations/upload-csv",
    response_model=TaxCSVResponse,
    summary="Calculate tax for every row of a CSV upload",
)
async def calculate_tax_with_csv(request: Request) -> TaxCSVResponse:
    """Accept a ``text/csv`` body with columns ``totalIncome,wht,donation``
    and return the payable tax per row, in row order.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != "text/csv":
        raise HTTPException(
            status_code=400,
            detail="Unacceptable content, require CSV content",
        )

    raw = await request.body()
    try:
        rows = parse_tax_csv(raw.decode("utf-8-sig"))
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Bad request, might not be csv format")
    except CSVFormatError as exc:
        logger.info("Rejected CSV upload: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))

    config = await load_tax_config()

    taxes: list[TaxCSV] = []
    for row in rows:
        summary = calculate_tax_summary(
            config,
            TaxpayerInput(
                income=row.total_income,
                withholding=row.wht,
                allowances={DONATION: row.donation},
            ),
        )
        taxes.append(TaxCSV(totalIncome=row.total_income, tax=round_currency(summary.tax)))

    await _record_audit(
        "/tax/calculations/upload-csv",
        len(rows),
        {"totalTax": round_currency(sum(t.tax for t in taxes))},
    )
    return TaxCSVResponse(taxes=taxes)
