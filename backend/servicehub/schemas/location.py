"""ServiceHub Backend — Location Schemas"""

import uuid
from datetime import datetime
from typing import Optional

from servicehub.schemas.common import CamelModel


class LocationWrite(CamelModel):
    name: str = ""
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool = True


class LocationResponse(CamelModel):
    id: uuid.UUID
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
