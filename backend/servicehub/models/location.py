"""
ServiceHub Backend — Location Model
=====================================

What:  A physical site (shop, branch) where the tenant performs work.
"""

from typing import Optional

from sqlalchemy import Boolean, Index, String, true
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base
from servicehub.models.base import TenantScopedMixin


class Location(TenantScopedMixin, Base):
    __tablename__ = "locations"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500))
    city: Mapped[Optional[str]] = mapped_column(String(100))
    state: Mapped[Optional[str]] = mapped_column(String(100))
    zip_code: Mapped[Optional[str]] = mapped_column(String(20))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (
        Index("ix_locations_tenant_deleted", "tenant_id", "is_deleted"),
    )

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name='{self.name}', active={self.is_active})>"
