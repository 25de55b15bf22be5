"""
ServiceHub Backend — Work Order Schemas
=========================================

Response totals are computed at projection time from live items
(services/tax.py), so they never drift from the lines actually shown.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from servicehub.schemas.common import CamelModel, Money


class WorkOrderCreate(CamelModel):
    customer_id: uuid.UUID
    location_id: uuid.UUID
    appointment_id: Optional[uuid.UUID] = None
    assigned_to_user_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    internal_notes: Optional[str] = None


class WorkOrderUpdate(CamelModel):
    status: str = ""
    assigned_to_user_id: Optional[uuid.UUID] = None
    # Blank values leave the stored text unchanged
    description: Optional[str] = None
    internal_notes: Optional[str] = None


class WorkOrderItemCreate(CamelModel):
    item_type: str = "Service"
    service_id: Optional[uuid.UUID] = None
    product_id: Optional[uuid.UUID] = None
    description: str = ""
    quantity: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")


class WorkOrderItemResponse(CamelModel):
    id: uuid.UUID
    work_order_id: uuid.UUID
    item_type: str
    service_id: Optional[uuid.UUID] = None
    product_id: Optional[uuid.UUID] = None
    description: str
    quantity: Money
    unit_price: Money
    tax_rate: Money
    total_amount: Money


class WorkOrderResponse(CamelModel):
    id: uuid.UUID
    work_order_number: str
    customer_id: uuid.UUID
    customer_name: str = ""
    appointment_id: Optional[uuid.UUID] = None
    assigned_to_user_id: Optional[uuid.UUID] = None
    location_id: uuid.UUID
    location_name: Optional[str] = None
    status: str
    description: Optional[str] = None
    internal_notes: Optional[str] = None
    total_amount: Money
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    items: List[WorkOrderItemResponse] = Field(default_factory=list)
