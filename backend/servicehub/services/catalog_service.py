"""
ServiceHub Backend — Service Catalog
======================================

What:  The billable services a tenant offers.

List options:
    search          contains-match over name and description
    category        exact match
    is_active       exact match
    sort_by         name (default) | price | duration | createdAt
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.exceptions import NotFoundError
from servicehub.models.catalog import ServiceOffering
from servicehub.schemas.catalog import ServiceResponse, ServiceWrite
from servicehub.schemas.common import ApiResponse
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import (
    FieldFilter,
    QueryCriteria,
    SortKey,
    TenantRepository,
    TextSearch,
)
from servicehub.services.tax import round_money
from servicehub.services.validators import ensure_valid, validate_service
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "name": "name",
    "price": "price",
    "duration": "duration_minutes",
    "createdat": "created_at",
}


def to_service_response(service: ServiceOffering) -> ServiceResponse:
    return ServiceResponse.model_validate(service)


class CatalogService:
    repository = TenantRepository(ServiceOffering)

    async def list_services(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        search: Optional[str] = None,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        sort_by: Optional[str] = None,
        sort_descending: bool = False,
    ) -> ApiResponse:
        criteria = QueryCriteria(
            filters=[
                FieldFilter("category", category),
                FieldFilter("is_active", is_active),
            ],
            search=TextSearch(term=search, fields=("name", "description")),
            sort=SortKey(
                SORT_FIELDS.get((sort_by or "").strip().lower(), "name"),
                descending=sort_descending,
            ),
        )
        return await fetch_tenant_page(db, ctx, self.repository, criteria, page, to_service_response)

    async def _load(
        self, db: AsyncSession, ctx: RequestContext, service_id: uuid.UUID
    ) -> ServiceOffering:
        service = await self.repository.get(db, ctx.tenant_id, service_id)
        if service is None:
            raise NotFoundError(resource="Service", resource_id=str(service_id))
        return service

    async def get_service(
        self, db: AsyncSession, ctx: RequestContext, service_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get service")
        return ApiResponse.ok(to_service_response(await self._load(db, ctx, service_id)))

    @staticmethod
    def _apply(service: ServiceOffering, data: ServiceWrite) -> None:
        service.name = data.name
        service.description = data.description
        service.price = round_money(data.price)
        service.duration_minutes = data.duration_minutes
        service.category = data.category
        service.tax_rate = data.tax_rate
        service.is_active = data.is_active

    async def create_service(
        self, db: AsyncSession, ctx: RequestContext, data: ServiceWrite
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Create service")
        ensure_valid(validate_service(data))

        service = ServiceOffering()
        self._apply(service, data)
        await self.repository.add(db, ctx.tenant_id, service)
        logger.info("Service %s created for tenant %s", service.id, ctx.tenant_id)
        return ApiResponse.ok(to_service_response(service), "Service created successfully")

    async def update_service(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        service_id: uuid.UUID,
        data: ServiceWrite,
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Update service")
        service = await self._load(db, ctx, service_id)
        ensure_valid(validate_service(data))

        self._apply(service, data)
        await self.repository.save(db, service)
        logger.info("Service %s updated", service.id)
        return ApiResponse.ok(to_service_response(service), "Service updated successfully")

    async def delete_service(
        self, db: AsyncSession, ctx: RequestContext, service_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Delete service")
        service = await self._load(db, ctx, service_id)
        await self.repository.soft_delete(db, service)
        logger.info("Service %s deleted", service.id)
        return ApiResponse.ok(True, "Service deleted successfully")


catalog_service = CatalogService()
