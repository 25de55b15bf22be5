"""ServiceHub Backend — Appointment Schemas"""

import uuid
from datetime import datetime
from typing import Optional

from servicehub.schemas.common import CamelModel


class AppointmentWrite(CamelModel):
    """Body of create and full update; status is changed separately."""

    customer_id: uuid.UUID
    location_id: uuid.UUID
    service_id: Optional[uuid.UUID] = None
    staff_id: Optional[uuid.UUID] = None
    scheduled_start: datetime
    scheduled_end: datetime
    notes: Optional[str] = None
    internal_notes: Optional[str] = None


class AppointmentStatusUpdate(CamelModel):
    status: str = ""
    # Blank keeps the stored notes
    notes: Optional[str] = None


class AppointmentResponse(CamelModel):
    id: uuid.UUID
    customer_id: uuid.UUID
    customer_name: str = ""
    service_id: Optional[uuid.UUID] = None
    service_name: Optional[str] = None
    staff_id: Optional[uuid.UUID] = None
    location_id: uuid.UUID
    location_name: str = ""
    scheduled_start: datetime
    scheduled_end: datetime
    status: str
    notes: Optional[str] = None
    internal_notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
