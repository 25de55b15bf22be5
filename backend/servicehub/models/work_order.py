"""
ServiceHub Backend — Work Order Models
========================================

What:  A unit of field work for one customer at one location, plus its
       billable line items.

Status lifecycle:
    Draft → InProgress ⇄ OnHold → Completed
      └──────────────→ Cancelled
    started_at is stamped on the first move to InProgress and completed_at on
    the first move to Completed. Only Completed work orders can be invoiced.

Totals:
    Each item stores its tax-inclusive total (services/tax.item_total).
    The order's total_amount is recomputed from live items whenever an item
    is added or removed.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from servicehub.database import Base
from servicehub.models.base import (
    MONEY,
    QUANTITY,
    RATE,
    TenantScopedMixin,
    UTCDateTime,
    money_default,
)
from servicehub.models.customer import Customer
from servicehub.models.location import Location


class WorkOrderStatus:
    DRAFT = "Draft"
    IN_PROGRESS = "InProgress"
    ON_HOLD = "OnHold"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    ALL = (DRAFT, IN_PROGRESS, ON_HOLD, COMPLETED, CANCELLED)


class ItemType:
    SERVICE = "Service"
    PRODUCT = "Product"
    LABOR = "Labor"

    ALL = (SERVICE, PRODUCT, LABOR)


class WorkOrder(TenantScopedMixin, Base):
    __tablename__ = "work_orders"

    # WO-YYYYMMDD-NNNN, unique per tenant (see services/numbering.py)
    work_order_number: Mapped[str] = mapped_column(String(50), nullable=False)
    customer_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("customers.id"), nullable=False)
    location_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("locations.id"), nullable=False)
    appointment_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("appointments.id"))
    assigned_to_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)

    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=WorkOrderStatus.DRAFT
    )
    description: Mapped[Optional[str]] = mapped_column(Text)
    internal_notes: Mapped[Optional[str]] = mapped_column(Text)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)

    started_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)

    # ── Relationships ─────────────────────────────────────────────────────
    # Async sessions cannot lazy-load: services eager-load these with selectinload
    customer: Mapped[Customer] = relationship(lazy="raise_on_sql")
    location: Mapped[Location] = relationship(lazy="raise_on_sql")
    items: Mapped[List["WorkOrderItem"]] = relationship(
        back_populates="work_order",
        order_by="WorkOrderItem.created_at",
        lazy="raise_on_sql",
    )

    __table_args__ = (
        Index("ix_work_orders_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_work_orders_tenant_number", "tenant_id", "work_order_number", unique=True),
        Index("ix_work_orders_tenant_created", "tenant_id", "created_at"),
    )

    @property
    def live_items(self) -> List["WorkOrderItem"]:
        return [item for item in self.items if not item.is_deleted]

    def __repr__(self) -> str:
        return (
            f"<WorkOrder(id={self.id}, number='{self.work_order_number}', "
            f"status='{self.status}')>"
        )


class WorkOrderItem(TenantScopedMixin, Base):
    __tablename__ = "work_order_items"

    work_order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("work_orders.id"), nullable=False)
    item_type: Mapped[str] = mapped_column(String(50), nullable=False, default=ItemType.SERVICE)
    service_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("services.id"))
    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("products.id"))
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=money_default)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)

    work_order: Mapped[WorkOrder] = relationship(back_populates="items", lazy="raise_on_sql")

    __table_args__ = (
        Index("ix_work_order_items_order", "work_order_id"),
    )

    def __repr__(self) -> str:
        return f"<WorkOrderItem(id={self.id}, qty={self.quantity}, price={self.unit_price})>"
