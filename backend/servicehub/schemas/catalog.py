"""ServiceHub Backend — Service Catalog Schemas"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from servicehub.schemas.common import CamelModel, Money


class ServiceWrite(CamelModel):
    name: str = ""
    description: Optional[str] = None
    price: Decimal = Decimal("0")
    duration_minutes: int = 0
    category: Optional[str] = None
    # Whole-number percent: 8 means 8%
    tax_rate: Decimal = Decimal("0")
    is_active: bool = True


class ServiceResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Money
    duration_minutes: int
    category: Optional[str] = None
    tax_rate: Money
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
