"""
ServiceHub Backend — Document Numbering
=========================================

Format:  {PREFIX}-{YYYYMMDD}-{NNNN}
         e.g. WO-20240115-0003 is the tenant's third work order of that UTC day.

NNNN counts every record the tenant created that day, soft-deleted ones
included, so a number is never handed out twice after a delete.
"""

import uuid
from datetime import datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.base import utcnow
from servicehub.services.repository import TenantRepository

WORK_ORDER_PREFIX = "WO"
INVOICE_PREFIX = "INV"
PAYMENT_PREFIX = "PAY"


def format_document_number(prefix: str, day: datetime, sequence: int) -> str:
    return f"{prefix}-{day:%Y%m%d}-{sequence:04d}"


async def next_document_number(
    db: AsyncSession,
    repository: TenantRepository,
    tenant_id: uuid.UUID,
    prefix: str,
    now: Optional[datetime] = None,
) -> str:
    now = now or utcnow()
    day_start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    created_today = await repository.count_created_between(
        db, tenant_id, day_start, day_start + timedelta(days=1)
    )
    return format_document_number(prefix, now, created_today + 1)
