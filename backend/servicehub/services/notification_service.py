"""
ServiceHub Backend — Notification Service
===========================================

What:  Lists a tenant's notifications and marks them read.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.exceptions import NotFoundError
from servicehub.models.base import utcnow
from servicehub.models.notification import Notification
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.notification import NotificationResponse
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import FieldFilter, QueryCriteria, SortKey, TenantRepository
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

NOTIFICATION_PAGE_SIZE = 20


def to_notification_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse.model_validate(notification)


class NotificationService:
    repository = TenantRepository(Notification)

    async def list_notifications(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        is_read: Optional[bool] = None,
        type: Optional[str] = None,
    ) -> ApiResponse:
        criteria = QueryCriteria(
            filters=[FieldFilter("is_read", is_read), FieldFilter("type", type)],
            sort=SortKey("created_at", descending=True),
        )
        return await fetch_tenant_page(
            db,
            ctx,
            self.repository,
            criteria,
            page,
            to_notification_response,
            default_page_size=NOTIFICATION_PAGE_SIZE,
        )

    async def mark_notification_as_read(
        self, db: AsyncSession, ctx: RequestContext, notification_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Mark notification read")
        notification = await self.repository.get(db, ctx.tenant_id, notification_id)
        if notification is None:
            raise NotFoundError(resource="Notification", resource_id=str(notification_id))

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            await self.repository.save(db, notification)
        return ApiResponse.ok(True, "Notification marked as read")

    async def mark_all_notifications_as_read(
        self, db: AsyncSession, ctx: RequestContext
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Mark all notifications read")
        unread = await self.repository.find_all(
            db, ctx.tenant_id, QueryCriteria(filters=[FieldFilter("is_read", False)])
        )
        now = utcnow()
        for notification in unread:
            notification.is_read = True
            notification.read_at = now
            notification.updated_at = now
        if unread:
            await db.flush()

        logger.info("Marked %d notifications read for tenant %s", len(unread), ctx.tenant_id)
        return ApiResponse.ok(len(unread), f"{len(unread)} notifications marked as read")


notification_service = NotificationService()
