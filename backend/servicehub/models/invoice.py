"""
ServiceHub Backend — Invoice Models
=====================================

What:  A bill issued to a customer, usually created from a completed work order.

Status lifecycle:
    Draft → Sent → PartiallyPaid → Paid
    Overdue and Cancelled are set by back-office flows.
    Payments move the status to PartiallyPaid or Paid (services/payment_service.py).

Header totals:
    subtotal = Σ q*p, tax_amount = Σ q*p*r/100,
    total_amount = subtotal + tax_amount - discount_amount.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from servicehub.database import Base
from servicehub.models.base import (
    MONEY,
    QUANTITY,
    RATE,
    TenantScopedMixin,
    UTCDateTime,
    money_default,
    utcnow,
)
from servicehub.models.customer import Customer


class InvoiceStatus:
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    PARTIALLY_PAID = "PartiallyPaid"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"

    ALL = (DRAFT, SENT, PAID, PARTIALLY_PAID, OVERDUE, CANCELLED)


class Invoice(TenantScopedMixin, Base):
    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    customer_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("customers.id"), nullable=False)
    work_order_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("work_orders.id"))
    location_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("locations.id"), nullable=False)

    invoice_date: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=InvoiceStatus.DRAFT)

    subtotal: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    tax_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    discount_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    paid_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)

    notes: Mapped[Optional[str]] = mapped_column(Text)
    terms: Mapped[Optional[str]] = mapped_column(Text)

    customer: Mapped[Customer] = relationship(lazy="raise_on_sql")
    items: Mapped[List["InvoiceItem"]] = relationship(
        back_populates="invoice",
        order_by="InvoiceItem.created_at",
        lazy="raise_on_sql",
    )

    __table_args__ = (
        Index("ix_invoices_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_invoices_tenant_number", "tenant_id", "invoice_number", unique=True),
        Index("ix_invoices_work_order", "work_order_id"),
    )

    @property
    def balance(self) -> Decimal:
        return self.total_amount - self.paid_amount

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, number='{self.invoice_number}', "
            f"status='{self.status}', total={self.total_amount})>"
        )


class InvoiceItem(TenantScopedMixin, Base):
    __tablename__ = "invoice_items"

    invoice_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("invoices.id"), nullable=False)
    item_type: Mapped[str] = mapped_column(String(50), nullable=False)
    service_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("services.id"))
    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("products.id"))
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=money_default)
    discount_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)

    invoice: Mapped[Invoice] = relationship(back_populates="items", lazy="raise_on_sql")

    __table_args__ = (
        Index("ix_invoice_items_invoice", "invoice_id"),
    )
