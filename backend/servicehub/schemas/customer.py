"""
ServiceHub Backend — Customer Schemas
=======================================

Request bodies are deliberately permissive (plain optional strings): field
rules live in services/validators.py so every violation is reported together
in the envelope's `errors` list.
"""

import uuid
from datetime import datetime
from typing import Optional

from servicehub.schemas.common import CamelModel, Money


class CustomerWrite(CamelModel):
    """Body of POST /api/customers and PUT /api/customers/{id}."""

    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None


class CustomerResponse(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None
    total_spent: Money
    total_visits: int
    last_visit_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
