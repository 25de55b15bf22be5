"""
ServiceHub Backend — Product Routes
=====================================
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result, page_request
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.schemas.product import ProductResponse, ProductWrite
from servicehub.services.paging import PageRequest
from servicehub.services.product_service import product_service
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Products"])


@router.get(
    "/products",
    response_model=ApiResponse[PagedResult[ProductResponse]],
    summary="List products",
)
async def list_products(
    page: PageRequest = Depends(page_request),
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    location_id: Optional[uuid.UUID] = Query(default=None, alias="locationId"),
    low_stock: Optional[bool] = Query(
        default=None, alias="lowStock", description="true: only products at or below their threshold"
    ),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await product_service.list_products(
        db, ctx, page, search=search_term, location_id=location_id, low_stock=low_stock
    )


@router.get(
    "/products/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Get a product",
)
async def get_product(
    product_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await product_service.get_product(db, ctx, product_id)


@router.post(
    "/products",
    response_model=ApiResponse[ProductResponse],
    status_code=201,
    summary="Create a product",
)
async def create_product(
    body: ProductWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await product_service.create_product(db, ctx, body)
    return command_result(response, result, success_status=201)


@router.put(
    "/products/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Update a product",
    description="The location a product is held at is not changed.",
)
async def update_product(
    product_id: uuid.UUID,
    body: ProductWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await product_service.update_product(db, ctx, product_id, body))


@router.delete(
    "/products/{product_id}",
    response_model=ApiResponse[bool],
    summary="Soft-delete a product",
)
async def delete_product(
    product_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await product_service.delete_product(db, ctx, product_id))
