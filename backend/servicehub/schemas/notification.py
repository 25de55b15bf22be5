"""ServiceHub Backend — Notification Schemas"""

import uuid
from datetime import datetime
from typing import Optional

from servicehub.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: uuid.UUID
    type: str
    title: str
    message: str
    is_read: bool
    read_at: Optional[datetime] = None
    link_url: Optional[str] = None
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[uuid.UUID] = None
    created_at: datetime
