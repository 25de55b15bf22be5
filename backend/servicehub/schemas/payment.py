"""ServiceHub Backend — Payment Schemas"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from servicehub.schemas.common import CamelModel, Money


class PaymentCreate(CamelModel):
    invoice_id: uuid.UUID
    amount: Decimal
    payment_method: str = ""
    # Defaults to now when omitted
    payment_date: Optional[datetime] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


class PaymentResponse(CamelModel):
    id: uuid.UUID
    payment_number: str
    invoice_id: uuid.UUID
    payment_date: datetime
    amount: Money
    payment_method: str
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
