"""
ServiceHub Backend — Service Catalog Model
============================================

What:  A billable service the tenant offers (e.g. "Oil change", 45 min, $60).
Note:  Named ServiceOffering in Python to avoid clashing with the service
       layer's classes; the table is `services`.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, true
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base
from servicehub.models.base import MONEY, RATE, TenantScopedMixin, money_default


class ServiceOffering(TenantScopedMixin, Base):
    __tablename__ = "services"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100))
    # Whole-number percent (8 = 8%)
    tax_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=money_default)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (
        Index("ix_services_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_services_tenant_category", "tenant_id", "category"),
    )

    def __repr__(self) -> str:
        return f"<ServiceOffering(id={self.id}, name='{self.name}', price={self.price})>"
