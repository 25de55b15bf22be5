"""
ServiceHub Backend — Notification Model
=========================================

What:  An in-app message for a tenant (optionally addressed to one user).
Types: AppointmentReminder, InvoiceSent, LowStock, System
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Index, String, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base
from servicehub.models.base import TenantScopedMixin, UTCDateTime


class Notification(TenantScopedMixin, Base):
    __tablename__ = "notifications"

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    read_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    link_url: Mapped[Optional[str]] = mapped_column(String(500))
    related_entity_type: Mapped[Optional[str]] = mapped_column(String(50))
    related_entity_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)

    __table_args__ = (
        Index("ix_notifications_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_notifications_tenant_unread", "tenant_id", "is_read"),
    )
