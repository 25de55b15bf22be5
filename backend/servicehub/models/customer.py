"""
ServiceHub Backend — Customer Model
=====================================

What:  A tenant's customer (person billed for work orders).
Query Patterns:
    - List: WHERE tenant_id = :t AND NOT is_deleted ORDER BY last_name
    - Search: ILIKE over first_name, last_name, email, phone
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base
from servicehub.models.base import MONEY, TenantScopedMixin, UTCDateTime, money_default


class Customer(TenantScopedMixin, Base):
    __tablename__ = "customers"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    mobile: Mapped[Optional[str]] = mapped_column(String(20))

    # ── Address ───────────────────────────────────────────────────────────
    address: Mapped[Optional[str]] = mapped_column(String(500))
    city: Mapped[Optional[str]] = mapped_column(String(100))
    state: Mapped[Optional[str]] = mapped_column(String(100))
    zip_code: Mapped[Optional[str]] = mapped_column(String(20))
    country: Mapped[Optional[str]] = mapped_column(String(100))

    notes: Mapped[Optional[str]] = mapped_column(Text)

    # ── Activity ──────────────────────────────────────────────────────────
    # Maintained by payment and work order flows, read-only over the API
    total_spent: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    total_visits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_visit_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)

    __table_args__ = (
        Index("ix_customers_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_customers_tenant_last_name", "tenant_id", "last_name"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.full_name}')>"
