"""
ServiceHub Backend — Appointment Service
=========================================

What:  Booking, rescheduling and status changes for appointments.
Who:   Called by routes/appointments.py; work orders may reference an
       appointment and the dashboard counts them.

Slot rules (create and update):
    1. scheduled_end must be after scheduled_start (400)
    2. Customer, location and the optional service belong to the tenant (404)
    3. With a service, the slot length must be within DURATION_TOLERANCE
       minutes of the service's duration_minutes (400)
    4. The slot must not overlap another live appointment of the tenant that
       still holds its slot (not Cancelled/NoShow) at the same location, or
       with the same staff member when both name one (400)

    Two slots overlap when  existing.start < new.end  and  new.start < existing.end,
    so back-to-back appointments are allowed.

Deleting cancels the appointment and soft-deletes it.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from servicehub.exceptions import BusinessRuleError, NotFoundError
from servicehub.models.appointment import Appointment, AppointmentStatus
from servicehub.models.base import as_utc
from servicehub.models.catalog import ServiceOffering
from servicehub.models.customer import Customer
from servicehub.models.location import Location
from servicehub.schemas.appointment import (
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentWrite,
)
from servicehub.schemas.common import ApiResponse
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import (
    AnyOf,
    FieldFilter,
    QueryCriteria,
    SortKey,
    TenantRepository,
)
from servicehub.services.validators import (
    ensure_valid,
    is_blank,
    validate_appointment,
    validate_appointment_status,
)
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

# Minutes a booked slot may differ from the service's duration
DURATION_TOLERANCE = 5

CONFLICT_MESSAGE = "Appointment conflicts with an existing appointment"

customers = TenantRepository(Customer)
locations = TenantRepository(Location)
catalog = TenantRepository(ServiceOffering)

APPOINTMENT_LOAD = (
    selectinload(Appointment.customer),
    selectinload(Appointment.location),
    selectinload(Appointment.service),
)


def to_appointment_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        customer_id=appointment.customer_id,
        customer_name=appointment.customer.full_name if appointment.customer else "",
        service_id=appointment.service_id,
        service_name=appointment.service.name if appointment.service else None,
        staff_id=appointment.staff_id,
        location_id=appointment.location_id,
        location_name=appointment.location.name if appointment.location else "",
        scheduled_start=appointment.scheduled_start,
        scheduled_end=appointment.scheduled_end,
        status=appointment.status,
        notes=appointment.notes,
        internal_notes=appointment.internal_notes,
        created_at=appointment.created_at,
        updated_at=appointment.updated_at,
    )


def duration_message(minutes: int) -> str:
    return f"Appointment duration should be approximately {minutes} minutes for this service"


class AppointmentService:
    repository = TenantRepository(Appointment)

    async def list_appointments(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        customer_id: Optional[uuid.UUID] = None,
        staff_id: Optional[uuid.UUID] = None,
        location_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
    ) -> ApiResponse:
        """Appointments in schedule order; the date window must contain the whole slot."""
        criteria = QueryCriteria(
            filters=[
                FieldFilter("scheduled_start", start_date, op="ge"),
                FieldFilter("scheduled_end", end_date, op="le"),
                FieldFilter("customer_id", customer_id),
                FieldFilter("staff_id", staff_id),
                FieldFilter("location_id", location_id),
                FieldFilter("status", status),
            ],
            sort=SortKey("scheduled_start"),
            options=APPOINTMENT_LOAD,
        )
        return await fetch_tenant_page(
            db, ctx, self.repository, criteria, page, to_appointment_response
        )

    async def load(
        self, db: AsyncSession, ctx: RequestContext, appointment_id: uuid.UUID
    ) -> Appointment:
        appointment = await self.repository.get(
            db, ctx.tenant_id, appointment_id, options=APPOINTMENT_LOAD
        )
        if appointment is None:
            raise NotFoundError(resource="Appointment", resource_id=str(appointment_id))
        return appointment

    async def get_appointment(
        self, db: AsyncSession, ctx: RequestContext, appointment_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get appointment")
        return ApiResponse.ok(to_appointment_response(await self.load(db, ctx, appointment_id)))

    async def has_conflict(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        data: AppointmentWrite,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> bool:
        """Whether the requested slot overlaps a slot-holding appointment."""
        return await self.repository.exists(
            db,
            ctx.tenant_id,
            [
                FieldFilter("id", exclude_id, op="ne"),
                FieldFilter("status", AppointmentStatus.RELEASED, op="not_in"),
                AnyOf(
                    (
                        FieldFilter("location_id", data.location_id),
                        FieldFilter("staff_id", data.staff_id),
                    )
                ),
                FieldFilter("scheduled_start", as_utc(data.scheduled_end), op="lt"),
                FieldFilter("scheduled_end", as_utc(data.scheduled_start), op="gt"),
            ],
        )

    async def _check_slot(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        data: AppointmentWrite,
        exclude_id: Optional[uuid.UUID] = None,
    ):
        """Apply the slot rules; returns the (customer, location, service) rows."""
        ensure_valid(validate_appointment(data))

        customer = await customers.get(db, ctx.tenant_id, data.customer_id)
        if customer is None:
            raise NotFoundError(resource="Customer", resource_id=str(data.customer_id))
        location = await locations.get(db, ctx.tenant_id, data.location_id)
        if location is None:
            raise NotFoundError(resource="Location", resource_id=str(data.location_id))

        service = None
        if data.service_id is not None:
            service = await catalog.get(db, ctx.tenant_id, data.service_id)
            if service is None:
                raise NotFoundError(resource="Service", resource_id=str(data.service_id))
            length = as_utc(data.scheduled_end) - as_utc(data.scheduled_start)
            minutes = length.total_seconds() / 60
            if abs(minutes - service.duration_minutes) > DURATION_TOLERANCE:
                raise BusinessRuleError(duration_message(service.duration_minutes))

        if await self.has_conflict(db, ctx, data, exclude_id=exclude_id):
            raise BusinessRuleError(
                CONFLICT_MESSAGE,
                context={
                    "location_id": str(data.location_id),
                    "start": data.scheduled_start.isoformat(),
                },
            )
        return customer, location, service

    @staticmethod
    def _apply(
        appointment: Appointment, data: AppointmentWrite, customer, location, service
    ) -> None:
        appointment.customer_id = customer.id
        appointment.customer = customer
        appointment.location_id = location.id
        appointment.location = location
        appointment.service_id = service.id if service is not None else None
        appointment.service = service
        appointment.staff_id = data.staff_id
        appointment.scheduled_start = as_utc(data.scheduled_start)
        appointment.scheduled_end = as_utc(data.scheduled_end)
        appointment.notes = data.notes
        appointment.internal_notes = data.internal_notes

    async def create_appointment(
        self, db: AsyncSession, ctx: RequestContext, data: AppointmentWrite
    ) -> ApiResponse:
        """
        Book a Scheduled appointment.

        Raises:
            ValidationError: end not after start
            NotFoundError: customer, location or service missing from the tenant
            BusinessRuleError: duration mismatch or slot conflict
        """
        if not ctx.has_tenant:
            return tenant_missing("Create appointment")
        customer, location, service = await self._check_slot(db, ctx, data)

        appointment = Appointment(status=AppointmentStatus.SCHEDULED)
        self._apply(appointment, data, customer, location, service)
        await self.repository.add(db, ctx.tenant_id, appointment)
        logger.info(
            "Appointment %s booked at location %s from %s",
            appointment.id,
            location.id,
            appointment.scheduled_start,
        )
        return ApiResponse.ok(
            to_appointment_response(appointment), "Appointment created successfully"
        )

    async def update_appointment(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        appointment_id: uuid.UUID,
        data: AppointmentWrite,
    ) -> ApiResponse:
        """Reschedule or reassign; the appointment's own slot never conflicts with itself."""
        if not ctx.has_tenant:
            return tenant_missing("Update appointment")
        appointment = await self.load(db, ctx, appointment_id)
        customer, location, service = await self._check_slot(
            db, ctx, data, exclude_id=appointment.id
        )

        self._apply(appointment, data, customer, location, service)
        await self.repository.save(db, appointment)
        logger.info("Appointment %s updated", appointment.id)
        return ApiResponse.ok(
            to_appointment_response(appointment), "Appointment updated successfully"
        )

    async def update_appointment_status(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        appointment_id: uuid.UUID,
        data: AppointmentStatusUpdate,
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Update appointment status")
        appointment = await self.load(db, ctx, appointment_id)
        ensure_valid(validate_appointment_status(data))

        previous = appointment.status
        appointment.status = data.status
        if not is_blank(data.notes):
            appointment.notes = data.notes
        await self.repository.save(db, appointment)
        logger.info("Appointment %s status: %s -> %s", appointment.id, previous, data.status)
        return ApiResponse.ok(
            to_appointment_response(appointment), "Appointment status updated successfully"
        )

    async def delete_appointment(
        self, db: AsyncSession, ctx: RequestContext, appointment_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Delete appointment")
        appointment = await self.load(db, ctx, appointment_id)

        appointment.status = AppointmentStatus.CANCELLED
        await self.repository.soft_delete(db, appointment)
        logger.info("Appointment %s cancelled and deleted", appointment.id)
        return ApiResponse.ok(True, "Appointment deleted successfully")


appointment_service = AppointmentService()
