"""
ServiceHub Backend — Notification Service Tests
=================================================
"""

import uuid

import pytest

from servicehub.exceptions import NotFoundError
from servicehub.models.notification import Notification
from servicehub.services.notification_service import NotificationService
from servicehub.services.paging import PageRequest
from servicehub.tenancy import TENANT_CONTEXT_MISSING


async def _notify(db_session, tenant_id, count, is_read=False, type="WorkOrder"):
    rows = [
        Notification(
            tenant_id=tenant_id,
            type=type,
            title=f"Notice {i}",
            message="Something happened",
            is_read=is_read,
        )
        for i in range(count)
    ]
    db_session.add_all(rows)
    await db_session.flush()
    return rows


class TestNotificationService:
    def setup_method(self):
        self.service = NotificationService()

    @pytest.mark.asyncio
    async def test_default_page_size_is_twenty(self, db_session, tenant_ctx):
        await _notify(db_session, tenant_ctx.tenant_id, 25)
        result = await self.service.list_notifications(db_session, tenant_ctx, PageRequest(1, 0))
        assert result.data.page_size == 20
        assert len(result.data.items) == 20
        assert result.data.total_pages == 2

    @pytest.mark.asyncio
    async def test_filter_unread_and_type(self, db_session, tenant_ctx):
        await _notify(db_session, tenant_ctx.tenant_id, 2, is_read=False)
        await _notify(db_session, tenant_ctx.tenant_id, 3, is_read=True)
        await _notify(db_session, tenant_ctx.tenant_id, 1, is_read=False, type="Payment")

        unread = await self.service.list_notifications(
            db_session, tenant_ctx, PageRequest(1, 20), is_read=False
        )
        assert unread.data.total_count == 3

        payments = await self.service.list_notifications(
            db_session, tenant_ctx, PageRequest(1, 20), is_read=False, type="Payment"
        )
        assert payments.data.total_count == 1

    @pytest.mark.asyncio
    async def test_mark_one_read(self, db_session, tenant_ctx):
        (row,) = await _notify(db_session, tenant_ctx.tenant_id, 1)
        result = await self.service.mark_notification_as_read(db_session, tenant_ctx, row.id)
        assert result.data is True
        assert result.message == "Notification marked as read"
        assert row.is_read is True
        assert row.read_at is not None

    @pytest.mark.asyncio
    async def test_mark_read_is_idempotent(self, db_session, tenant_ctx):
        (row,) = await _notify(db_session, tenant_ctx.tenant_id, 1)
        await self.service.mark_notification_as_read(db_session, tenant_ctx, row.id)
        first_read_at = row.read_at
        await self.service.mark_notification_as_read(db_session, tenant_ctx, row.id)
        assert row.read_at == first_read_at

    @pytest.mark.asyncio
    async def test_mark_unknown(self, db_session, tenant_ctx):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.mark_notification_as_read(db_session, tenant_ctx, uuid.uuid4())
        assert exc_info.value.message == "Notification not found"

    @pytest.mark.asyncio
    async def test_mark_all_only_touches_own_tenant(self, db_session, tenant_ctx, other_tenant_ctx):
        mine = await _notify(db_session, tenant_ctx.tenant_id, 3)
        await _notify(db_session, tenant_ctx.tenant_id, 1, is_read=True)
        theirs = await _notify(db_session, other_tenant_ctx.tenant_id, 2)

        result = await self.service.mark_all_notifications_as_read(db_session, tenant_ctx)
        assert result.data == 3
        assert result.message == "3 notifications marked as read"
        assert all(n.is_read for n in mine)
        assert not any(n.is_read for n in theirs)

    @pytest.mark.asyncio
    async def test_missing_tenant(self, db_session, no_tenant_ctx):
        result = await self.service.mark_all_notifications_as_read(db_session, no_tenant_ctx)
        assert result.success is False
        assert result.message == TENANT_CONTEXT_MISSING
