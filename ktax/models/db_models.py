"""SQLAlchemy ORM models for PostgreSQL persistence."""

from __future__ import annotations
from datetime import datetime
from sqlalchemy import DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass

class DefaultAllowance(Base):
    """Deductions granted to every taxpayer (e.g. personal)."""

    __tablename__ = "default_allowances"

    allowance_type: Mapped[str] = mapped_column(String(100), primary_key=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class AllowedAllowance(Base):
    """Elective deduction types and their maximum claimable amount."""

    __tablename__ = "allowed_allowances"

    allowance_type: Mapped[str] = mapped_column(String(100), primary_key=True)
    max_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class CalculationAudit(Base):
    """Audit trail for tax calculations served by the API."""

    __tablename__ = "calculation_audits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    endpoint: Mapped[str] = mapped_column(String(256), nullable=False)
    input_count: Mapped[int] = mapped_column(Integer, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
