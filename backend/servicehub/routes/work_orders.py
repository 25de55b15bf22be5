"""
ServiceHub Backend — Work Order Routes
========================================
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result, page_request
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.schemas.work_order import (
    WorkOrderCreate,
    WorkOrderItemCreate,
    WorkOrderItemResponse,
    WorkOrderResponse,
    WorkOrderUpdate,
)
from servicehub.services.paging import PageRequest
from servicehub.services.work_order_service import work_order_service
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Work Orders"])


@router.get(
    "/workorders",
    response_model=ApiResponse[PagedResult[WorkOrderResponse]],
    summary="List work orders (newest first)",
)
async def list_work_orders(
    page: PageRequest = Depends(page_request),
    status: Optional[str] = Query(default=None),
    customer_id: Optional[uuid.UUID] = Query(default=None, alias="customerId"),
    assigned_to_user_id: Optional[uuid.UUID] = Query(default=None, alias="assignedToUserId"),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await work_order_service.list_work_orders(
        db,
        ctx,
        page,
        status=status,
        customer_id=customer_id,
        assigned_to_user_id=assigned_to_user_id,
    )


@router.get(
    "/workorders/{work_order_id}",
    response_model=ApiResponse[WorkOrderResponse],
    summary="Get a work order with its items",
)
async def get_work_order(
    work_order_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await work_order_service.get_work_order(db, ctx, work_order_id)


@router.post(
    "/workorders",
    response_model=ApiResponse[WorkOrderResponse],
    status_code=201,
    summary="Open a draft work order",
)
async def create_work_order(
    body: WorkOrderCreate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await work_order_service.create_work_order(db, ctx, body)
    return command_result(response, result, success_status=201)


@router.put(
    "/workorders/{work_order_id}",
    response_model=ApiResponse[WorkOrderResponse],
    summary="Update status, assignee, description or notes",
)
async def update_work_order(
    work_order_id: uuid.UUID,
    body: WorkOrderUpdate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await work_order_service.update_work_order(db, ctx, work_order_id, body)
    return command_result(response, result)


@router.delete(
    "/workorders/{work_order_id}",
    response_model=ApiResponse[bool],
    summary="Soft-delete a work order",
    description="Refused with 400 once the work order has been invoiced.",
)
async def delete_work_order(
    work_order_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await work_order_service.delete_work_order(db, ctx, work_order_id))


@router.post(
    "/workorders/{work_order_id}/items",
    response_model=ApiResponse[WorkOrderItemResponse],
    status_code=201,
    summary="Add a line item and recompute the total",
)
async def add_work_order_item(
    work_order_id: uuid.UUID,
    body: WorkOrderItemCreate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await work_order_service.add_work_order_item(db, ctx, work_order_id, body)
    return command_result(response, result, success_status=201)


@router.delete(
    "/workorders/{work_order_id}/items/{item_id}",
    response_model=ApiResponse[bool],
    summary="Remove a line item and recompute the total",
)
async def remove_work_order_item(
    work_order_id: uuid.UUID,
    item_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await work_order_service.remove_work_order_item(db, ctx, work_order_id, item_id)
    return command_result(response, result)
