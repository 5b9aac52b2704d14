"""Batch input parsing for ``totalIncome,wht,donation`` CSV uploads.

Every row is validated before any tax is computed; the first bad row
rejects the whole upload.
"""

from __future__ import annotations

import csv
import io
import math
from typing import List

from pydantic import BaseModel

CSV_HEADER = ["totalIncome", "wht", "donation"]


class CSVFormatError(ValueError):
    """Raised when an upload cannot be turned into tax rows."""


class TaxRow(BaseModel):
    """One validated CSV data row."""
    total_income: float
    wht: float
    donation: float


def _parse_amount(value: str, message: str) -> float:
    try:
        amount = float(value.strip())
    except ValueError:
        raise CSVFormatError(message) from None
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        raise CSVFormatError(message)
    return amount


def parse_tax_csv(content: str) -> List[TaxRow]:
    """Parse and validate CSV *content* into ``TaxRow`` objects.

    Raises ``CSVFormatError`` with a client-facing message on any problem.
    """
    try:
        rows = list(csv.reader(io.StringIO(content), strict=True))
    except csv.Error:
        raise CSVFormatError("Bad request, might not be csv format") from None

    rows = [row for row in rows if row]

    if not rows:
        raise CSVFormatError("Wrong csv content, no content")
    if len(rows) == 1:
        raise CSVFormatError(
            "Wrong csv content, should have more than 1 row due to it is header"
        )

    header, *body = rows
    if len(header) != len(CSV_HEADER):
        raise CSVFormatError("Wrong csv column length")
    if [h.strip() for h in header] != CSV_HEADER:
        raise CSVFormatError("Wrong csv header")

    parsed: list[TaxRow] = []
    for row in body:
        if len(row) != len(CSV_HEADER):
            raise CSVFormatError("Wrong csv column length")

        income = _parse_amount(row[0], "Invalid income amount")
        wht = _parse_amount(row[1], "Invalid wht amount")
        donation = _parse_amount(row[2], "Invalid donation amount")

        if income < wht:
            raise CSVFormatError("Income amount should be more than wht amount")

        parsed.append(TaxRow(total_income=income, wht=wht, donation=donation))

    return parsed
