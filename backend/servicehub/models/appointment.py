"""
ServiceHub Backend — Appointment Model
========================================

What:  A booked time slot for a customer at a location, optionally for a
       catalog service and a staff member.

Status values:
    Scheduled (on creation), Confirmed, InProgress, Completed, Cancelled, NoShow

Scheduling:
    Slots are half-open [scheduled_start, scheduled_end): one appointment may
    start exactly when another ends. Cancelled and NoShow appointments no
    longer hold their slot.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from servicehub.database import Base
from servicehub.models.base import TenantScopedMixin, UTCDateTime
from servicehub.models.catalog import ServiceOffering
from servicehub.models.customer import Customer
from servicehub.models.location import Location


class AppointmentStatus:
    SCHEDULED = "Scheduled"
    CONFIRMED = "Confirmed"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "NoShow"

    ALL = (SCHEDULED, CONFIRMED, IN_PROGRESS, COMPLETED, CANCELLED, NO_SHOW)
    # Statuses that release the slot
    RELEASED = (CANCELLED, NO_SHOW)
    # Statuses that no longer count as upcoming or ongoing work
    CLOSED = (COMPLETED, CANCELLED, NO_SHOW)


class Appointment(TenantScopedMixin, Base):
    __tablename__ = "appointments"

    customer_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("customers.id"), nullable=False)
    service_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("services.id"))
    staff_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    location_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("locations.id"), nullable=False)

    scheduled_start: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    scheduled_end: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=AppointmentStatus.SCHEDULED
    )
    notes: Mapped[Optional[str]] = mapped_column(Text)
    internal_notes: Mapped[Optional[str]] = mapped_column(Text)

    is_reminder_sent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    reminder_sent_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)

    # Async sessions cannot lazy-load: services eager-load these with selectinload
    customer: Mapped[Customer] = relationship(lazy="raise_on_sql")
    location: Mapped[Location] = relationship(lazy="raise_on_sql")
    service: Mapped[Optional[ServiceOffering]] = relationship(lazy="raise_on_sql")

    __table_args__ = (
        Index("ix_appointments_tenant_deleted", "tenant_id", "is_deleted"),
        Index("ix_appointments_tenant_start", "tenant_id", "scheduled_start"),
        Index("ix_appointments_tenant_location", "tenant_id", "location_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, start={self.scheduled_start}, "
            f"status='{self.status}')>"
        )
