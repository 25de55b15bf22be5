"""
ServiceHub Backend — Invoice Routes
=====================================
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result, page_request
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.schemas.invoice import InvoiceResponse
from servicehub.services.invoice_service import invoice_service
from servicehub.services.paging import PageRequest
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Invoices"])


@router.get(
    "/invoices",
    response_model=ApiResponse[PagedResult[InvoiceResponse]],
    summary="List invoices (newest invoice date first)",
)
async def list_invoices(
    page: PageRequest = Depends(page_request),
    customer_id: Optional[uuid.UUID] = Query(default=None, alias="customerId"),
    status: Optional[str] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await invoice_service.list_invoices(
        db,
        ctx,
        page,
        customer_id=customer_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )


@router.get(
    "/invoices/{invoice_id}",
    response_model=ApiResponse[InvoiceResponse],
    summary="Get an invoice with its items",
)
async def get_invoice(
    invoice_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await invoice_service.get_invoice(db, ctx, invoice_id)


@router.post(
    "/invoices/from-workorder/{work_order_id}",
    response_model=ApiResponse[InvoiceResponse],
    status_code=201,
    summary="Invoice a completed work order",
)
async def create_invoice_from_work_order(
    work_order_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await invoice_service.create_invoice_from_work_order(db, ctx, work_order_id)
    return command_result(response, result, success_status=201)
