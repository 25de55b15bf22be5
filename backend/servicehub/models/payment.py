"""
ServiceHub Backend — Payment Model
====================================

What:  Money received against an invoice. Payments never exceed the
       invoice's remaining balance.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base
from servicehub.models.base import MONEY, TenantScopedMixin, UTCDateTime, utcnow


class PaymentMethod:
    CASH = "Cash"
    CARD = "Card"
    ONLINE = "Online"
    CHECK = "Check"
    OTHER = "Other"

    ALL = (CASH, CARD, ONLINE, CHECK, OTHER)


class Payment(TenantScopedMixin, Base):
    __tablename__ = "payments"

    invoice_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("invoices.id"), nullable=False)
    payment_number: Mapped[str] = mapped_column(String(50), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow
    )
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    reference_number: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    processed_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)

    __table_args__ = (
        Index("ix_payments_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_payments_invoice", "invoice_id"),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, number='{self.payment_number}', amount={self.amount})>"
