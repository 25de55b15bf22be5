"""
ServiceHub Backend — Shared Model Columns
===========================================

What:  Columns every tenant-owned table carries, and column type helpers.
How:   A declarative mixin copied into each mapped class.

Tenant-scoped record lifecycle:
    1. Created with the caller's tenant_id (never supplied by the client)
    2. Mutated only after the service re-reads it inside the same tenant
    3. Never physically deleted: is_deleted=True + deleted_at stamped

Column types are the dialect-neutral SQLAlchemy ones (Uuid, Numeric) plus
UTCDateTime, so the same models run on PostgreSQL and on the SQLite test
database.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Numeric, Uuid, false, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

# Money: 2 decimal places; quantities allow fractional hours/units
MONEY = Numeric(12, 2)
QUANTITY = Numeric(10, 2)
RATE = Numeric(5, 2)


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC datetime; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timestamp that always loads as an aware UTC datetime.

    PostgreSQL returns timestamptz values aware; SQLite drops the offset and
    returns them naive. Bound and loaded values both go through as_utc, so
    comparisons behave the same on both databases.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)


class TenantScopedMixin:
    """Primary key, tenant ownership, audit timestamps and soft-delete flag."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Indexed per table together with is_deleted (see each __table_args__)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    def touch(self) -> None:
        self.updated_at = utcnow()

    def mark_deleted(self) -> None:
        now = utcnow()
        self.is_deleted = True
        self.deleted_at = now
        self.updated_at = now


def money_default() -> Decimal:
    return Decimal("0.00")
