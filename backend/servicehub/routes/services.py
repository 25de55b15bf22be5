"""
ServiceHub Backend — Service Catalog Routes
=============================================
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result, page_request
from servicehub.schemas.catalog import ServiceResponse, ServiceWrite
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.services.catalog_service import catalog_service
from servicehub.services.paging import PageRequest
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Services"])


@router.get(
    "/services",
    response_model=ApiResponse[PagedResult[ServiceResponse]],
    summary="List catalog services",
)
async def list_services(
    page: PageRequest = Depends(page_request),
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    category: Optional[str] = Query(default=None),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    sort_by: Optional[str] = Query(
        default=None, alias="sortBy", description="name, price, duration or createdAt"
    ),
    sort_descending: bool = Query(default=False, alias="sortDescending"),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await catalog_service.list_services(
        db,
        ctx,
        page,
        search=search_term,
        category=category,
        is_active=is_active,
        sort_by=sort_by,
        sort_descending=sort_descending,
    )


@router.get(
    "/services/{service_id}",
    response_model=ApiResponse[ServiceResponse],
    summary="Get a catalog service",
)
async def get_service(
    service_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await catalog_service.get_service(db, ctx, service_id)


@router.post(
    "/services",
    response_model=ApiResponse[ServiceResponse],
    status_code=201,
    summary="Create a catalog service",
)
async def create_service(
    body: ServiceWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await catalog_service.create_service(db, ctx, body)
    return command_result(response, result, success_status=201)


@router.put(
    "/services/{service_id}",
    response_model=ApiResponse[ServiceResponse],
    summary="Update a catalog service",
)
async def update_service(
    service_id: uuid.UUID,
    body: ServiceWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await catalog_service.update_service(db, ctx, service_id, body))


@router.delete(
    "/services/{service_id}",
    response_model=ApiResponse[bool],
    summary="Soft-delete a catalog service",
)
async def delete_service(
    service_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await catalog_service.delete_service(db, ctx, service_id))
