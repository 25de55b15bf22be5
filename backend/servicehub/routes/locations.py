"""
ServiceHub Backend — Location Routes
======================================
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result, page_request
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.schemas.location import LocationResponse, LocationWrite
from servicehub.services.location_service import location_service
from servicehub.services.paging import PageRequest
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Locations"])


@router.get(
    "/locations",
    response_model=ApiResponse[PagedResult[LocationResponse]],
    summary="List locations",
)
async def list_locations(
    page: PageRequest = Depends(page_request),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await location_service.list_locations(db, ctx, page, is_active=is_active)


@router.get(
    "/locations/{location_id}",
    response_model=ApiResponse[LocationResponse],
    summary="Get a location",
)
async def get_location(
    location_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await location_service.get_location(db, ctx, location_id)


@router.post(
    "/locations",
    response_model=ApiResponse[LocationResponse],
    status_code=201,
    summary="Create a location",
)
async def create_location(
    body: LocationWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await location_service.create_location(db, ctx, body)
    return command_result(response, result, success_status=201)


@router.put(
    "/locations/{location_id}",
    response_model=ApiResponse[LocationResponse],
    summary="Update a location",
)
async def update_location(
    location_id: uuid.UUID,
    body: LocationWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await location_service.update_location(db, ctx, location_id, body))


@router.delete(
    "/locations/{location_id}",
    response_model=ApiResponse[bool],
    summary="Soft-delete a location",
    description="Refused with 400 while live work orders reference the location.",
)
async def delete_location(
    location_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await location_service.delete_location(db, ctx, location_id))
