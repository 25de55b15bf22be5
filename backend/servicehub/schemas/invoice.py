"""ServiceHub Backend — Invoice Schemas"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from servicehub.schemas.common import CamelModel, Money


class InvoiceItemResponse(CamelModel):
    id: uuid.UUID
    item_type: str
    service_id: Optional[uuid.UUID] = None
    product_id: Optional[uuid.UUID] = None
    description: str
    quantity: Money
    unit_price: Money
    tax_rate: Money
    total_amount: Money


class InvoiceResponse(CamelModel):
    id: uuid.UUID
    invoice_number: str
    customer_id: uuid.UUID
    customer_name: str = ""
    work_order_id: Optional[uuid.UUID] = None
    invoice_date: datetime
    due_date: Optional[datetime] = None
    status: str
    subtotal: Money
    tax_amount: Money
    discount_amount: Money
    total_amount: Money
    paid_amount: Money
    balance: Money
    items: List[InvoiceItemResponse] = Field(default_factory=list)
    created_at: datetime
