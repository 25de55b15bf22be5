"""
ServiceHub Backend — Notification Routes
==========================================
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.schemas.notification import NotificationResponse
from servicehub.services.notification_service import NOTIFICATION_PAGE_SIZE, notification_service
from servicehub.services.paging import PageRequest
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Notifications"])


@router.get(
    "/notifications",
    response_model=ApiResponse[PagedResult[NotificationResponse]],
    summary="List notifications (newest first)",
)
async def list_notifications(
    page_number: int = Query(default=1, alias="pageNumber"),
    page_size: int = Query(default=NOTIFICATION_PAGE_SIZE, alias="pageSize"),
    is_read: Optional[bool] = Query(default=None, alias="isRead"),
    type: Optional[str] = Query(default=None),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    page = PageRequest(page_number=page_number, page_size=page_size)
    return await notification_service.list_notifications(db, ctx, page, is_read=is_read, type=type)


# Registered before /{notification_id}/read so the literal path wins
@router.put(
    "/notifications/mark-all-read",
    response_model=ApiResponse[int],
    summary="Mark every unread notification as read",
)
async def mark_all_notifications_as_read(
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await notification_service.mark_all_notifications_as_read(db, ctx))


@router.put(
    "/notifications/{notification_id}/read",
    response_model=ApiResponse[bool],
    summary="Mark one notification as read",
)
async def mark_notification_as_read(
    notification_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await notification_service.mark_notification_as_read(db, ctx, notification_id)
    return command_result(response, result)
