"""
ServiceHub Backend — Customer Routes
======================================
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result, page_request
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.schemas.customer import CustomerResponse, CustomerWrite
from servicehub.services.customer_service import customer_service
from servicehub.services.paging import PageRequest
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Customers"])


@router.get(
    "/customers",
    response_model=ApiResponse[PagedResult[CustomerResponse]],
    summary="List customers",
)
async def list_customers(
    page: PageRequest = Depends(page_request),
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    sort_by: Optional[str] = Query(
        default=None, alias="sortBy", description="lastName, firstName, email or createdAt"
    ),
    sort_descending: bool = Query(default=False, alias="sortDescending"),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await customer_service.list_customers(
        db, ctx, page, search=search_term, sort_by=sort_by, sort_descending=sort_descending
    )


@router.get(
    "/customers/{customer_id}",
    response_model=ApiResponse[CustomerResponse],
    summary="Get a customer",
)
async def get_customer(
    customer_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await customer_service.get_customer(db, ctx, customer_id)


@router.post(
    "/customers",
    response_model=ApiResponse[CustomerResponse],
    status_code=201,
    summary="Create a customer",
)
async def create_customer(
    body: CustomerWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await customer_service.create_customer(db, ctx, body)
    return command_result(response, result, success_status=201)


@router.put(
    "/customers/{customer_id}",
    response_model=ApiResponse[CustomerResponse],
    summary="Update a customer",
)
async def update_customer(
    customer_id: uuid.UUID,
    body: CustomerWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await customer_service.update_customer(db, ctx, customer_id, body))


@router.delete(
    "/customers/{customer_id}",
    response_model=ApiResponse[bool],
    summary="Soft-delete a customer",
)
async def delete_customer(
    customer_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await customer_service.delete_customer(db, ctx, customer_id))
