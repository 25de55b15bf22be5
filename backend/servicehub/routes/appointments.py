"""
ServiceHub Backend — Appointment Routes
=========================================
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.routes.common import command_result, page_request
from servicehub.schemas.appointment import (
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentWrite,
)
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.services.appointment_service import appointment_service
from servicehub.services.paging import PageRequest
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Appointments"])


@router.get(
    "/appointments",
    response_model=ApiResponse[PagedResult[AppointmentResponse]],
    summary="List appointments (earliest start first)",
)
async def list_appointments(
    page: PageRequest = Depends(page_request),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    customer_id: Optional[uuid.UUID] = Query(default=None, alias="customerId"),
    staff_id: Optional[uuid.UUID] = Query(default=None, alias="staffId"),
    location_id: Optional[uuid.UUID] = Query(default=None, alias="locationId"),
    status: Optional[str] = Query(default=None),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await appointment_service.list_appointments(
        db,
        ctx,
        page,
        start_date=start_date,
        end_date=end_date,
        customer_id=customer_id,
        staff_id=staff_id,
        location_id=location_id,
        status=status,
    )


@router.get(
    "/appointments/{appointment_id}",
    response_model=ApiResponse[AppointmentResponse],
    summary="Get an appointment",
)
async def get_appointment(
    appointment_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await appointment_service.get_appointment(db, ctx, appointment_id)


@router.post(
    "/appointments",
    response_model=ApiResponse[AppointmentResponse],
    status_code=201,
    summary="Book an appointment",
    description="Refused with 400 when the slot overlaps a booking at the same location or staff member.",
)
async def create_appointment(
    body: AppointmentWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await appointment_service.create_appointment(db, ctx, body)
    return command_result(response, result, success_status=201)


@router.put(
    "/appointments/{appointment_id}",
    response_model=ApiResponse[AppointmentResponse],
    summary="Reschedule or reassign an appointment",
)
async def update_appointment(
    appointment_id: uuid.UUID,
    body: AppointmentWrite,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await appointment_service.update_appointment(db, ctx, appointment_id, body)
    return command_result(response, result)


@router.put(
    "/appointments/{appointment_id}/status",
    response_model=ApiResponse[AppointmentResponse],
    summary="Change an appointment's status",
)
async def update_appointment_status(
    appointment_id: uuid.UUID,
    body: AppointmentStatusUpdate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    result = await appointment_service.update_appointment_status(db, ctx, appointment_id, body)
    return command_result(response, result)


@router.delete(
    "/appointments/{appointment_id}",
    response_model=ApiResponse[bool],
    summary="Cancel and soft-delete an appointment",
)
async def delete_appointment(
    appointment_id: uuid.UUID,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return command_result(response, await appointment_service.delete_appointment(db, ctx, appointment_id))
