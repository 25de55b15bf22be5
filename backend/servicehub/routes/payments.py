"""
ServiceHub Backend — Payment Routes
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
from servicehub.schemas.payment import PaymentCreate, PaymentResponse
from servicehub.services.paging import PageRequest
from servicehub.services.payment_service import payment_service
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Payments"])


@router.get(
    "/payments",
    response_model=ApiResponse[PagedResult[PaymentResponse]],
    summary="List payments (newest payment date first)",
)
async def list_payments(
    page: PageRequest = Depends(page_request),
    invoice_id: Optional[uuid.UUID] = Query(default=None, alias="invoiceId"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    payment_method: Optional[str] = Query(default=None, alias="paymentMethod"),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await payment_service.list_payments(
        db,
        ctx,
        page,
        invoice_id=invoice_id,
        start_date=start_date,
        end_date=end_date,
        payment_method=payment_method,
    )


@router.post(
    "/payments",
    response_model=ApiResponse[PaymentResponse],
    status_code=201,
    summary="Record a payment against an invoice",
)
async def create_payment(
    body: PaymentCreate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await payment_service.create_payment(db, ctx, body)
    return command_result(response, result, success_status=201)
