"""ServiceHub Backend — Product Schemas"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from servicehub.models.product import DEFAULT_LOW_STOCK_THRESHOLD
from servicehub.schemas.common import CamelModel, Money


class ProductWrite(CamelModel):
    # Used on create only; a product stays at the location it was created at
    location_id: Optional[uuid.UUID] = None
    name: str = ""
    description: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    unit_price: Decimal = Decimal("0")
    cost_price: Decimal = Decimal("0")
    stock_quantity: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    unit: Optional[str] = None
    is_active: bool = True


class ProductResponse(CamelModel):
    id: uuid.UUID
    location_id: uuid.UUID
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    unit_price: Money
    cost_price: Money
    stock_quantity: int
    low_stock_threshold: int
    unit: Optional[str] = None
    is_active: bool
    is_low_stock: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
