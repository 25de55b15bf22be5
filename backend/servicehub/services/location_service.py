"""
ServiceHub Backend — Location Service
=======================================

What:  Tenant locations (sites where work is performed).
Rule:  A location referenced by any live work order cannot be deleted.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.exceptions import BusinessRuleError, NotFoundError
from servicehub.models.location import Location
from servicehub.models.work_order import WorkOrder
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.location import LocationResponse, LocationWrite
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import FieldFilter, QueryCriteria, SortKey, TenantRepository
from servicehub.services.validators import ensure_valid, validate_location
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

work_orders = TenantRepository(WorkOrder)


def to_location_response(location: Location) -> LocationResponse:
    return LocationResponse.model_validate(location)


class LocationService:
    repository = TenantRepository(Location)

    async def list_locations(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        is_active: Optional[bool] = None,
    ) -> ApiResponse:
        criteria = QueryCriteria(
            filters=[FieldFilter("is_active", is_active)],
            sort=SortKey("name"),
        )
        return await fetch_tenant_page(db, ctx, self.repository, criteria, page, to_location_response)

    async def _load(self, db: AsyncSession, ctx: RequestContext, location_id: uuid.UUID) -> Location:
        location = await self.repository.get(db, ctx.tenant_id, location_id)
        if location is None:
            raise NotFoundError(resource="Location", resource_id=str(location_id))
        return location

    async def get_location(
        self, db: AsyncSession, ctx: RequestContext, location_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get location")
        return ApiResponse.ok(to_location_response(await self._load(db, ctx, location_id)))

    async def create_location(
        self, db: AsyncSession, ctx: RequestContext, data: LocationWrite
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Create location")
        ensure_valid(validate_location(data))

        location = Location(**data.model_dump())
        await self.repository.add(db, ctx.tenant_id, location)
        logger.info("Location %s created for tenant %s", location.id, ctx.tenant_id)
        return ApiResponse.ok(to_location_response(location), "Location created successfully")

    async def update_location(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        location_id: uuid.UUID,
        data: LocationWrite,
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Update location")
        location = await self._load(db, ctx, location_id)
        ensure_valid(validate_location(data))

        for name, value in data.model_dump().items():
            setattr(location, name, value)
        await self.repository.save(db, location)
        logger.info("Location %s updated", location.id)
        return ApiResponse.ok(to_location_response(location), "Location updated successfully")

    async def delete_location(
        self, db: AsyncSession, ctx: RequestContext, location_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Delete location")
        location = await self._load(db, ctx, location_id)

        in_use = await work_orders.exists(
            db, ctx.tenant_id, [FieldFilter("location_id", location.id)]
        )
        if in_use:
            raise BusinessRuleError(
                "Cannot delete location with associated work orders",
                context={"location_id": str(location.id)},
            )

        await self.repository.soft_delete(db, location)
        logger.info("Location %s deleted", location.id)
        return ApiResponse.ok(True, "Location deleted successfully")


location_service = LocationService()
