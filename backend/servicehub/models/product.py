"""
ServiceHub Backend — Product Model
====================================

What:  A stocked item sold or used on jobs (filters, parts, consumables),
       held at one of the tenant's locations.

Stock:
    A product is "low stock" when stock_quantity <= low_stock_threshold.
    The products list can filter on it and the dashboard counts active ones.
"""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, true
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base
from servicehub.models.base import MONEY, TenantScopedMixin, money_default

DEFAULT_LOW_STOCK_THRESHOLD = 10


class Product(TenantScopedMixin, Base):
    __tablename__ = "products"

    location_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("locations.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    sku: Mapped[Optional[str]] = mapped_column(String(100))
    category: Mapped[Optional[str]] = mapped_column(String(100))
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    cost_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=money_default)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    low_stock_threshold: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_LOW_STOCK_THRESHOLD
    )
    # "Each", "Box", "Pack", ...
    unit: Mapped[Optional[str]] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (
        Index("ix_products_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_products_tenant_location", "tenant_id", "location_id"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock_quantity})>"
