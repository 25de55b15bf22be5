"""
ServiceHub Backend — Customer Service
=======================================

What:  List, read, create, update and soft-delete a tenant's customers.
Who:   Called by routes/customers.py.

List options:
    search          contains-match over first name, last name, email, phone
    sort_by         lastName (default) | firstName | email | createdAt
    sort_descending reverses the chosen key
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.exceptions import NotFoundError
from servicehub.models.customer import Customer
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.customer import CustomerResponse, CustomerWrite
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import (
    QueryCriteria,
    SortKey,
    TenantRepository,
    TextSearch,
)
from servicehub.services.validators import ensure_valid, validate_customer
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

# Accepted sort_by values (case-insensitive) → column
SORT_FIELDS = {
    "lastname": "last_name",
    "firstname": "first_name",
    "email": "email",
    "createdat": "created_at",
}
SEARCH_FIELDS = ("first_name", "last_name", "email", "phone")


def to_customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse.model_validate(customer)


class CustomerService:
    repository = TenantRepository(Customer)

    async def list_customers(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_descending: bool = False,
    ) -> ApiResponse:
        sort_field = SORT_FIELDS.get((sort_by or "").strip().lower(), "last_name")
        criteria = QueryCriteria(
            search=TextSearch(term=search, fields=SEARCH_FIELDS),
            sort=SortKey(sort_field, descending=sort_descending),
        )
        return await fetch_tenant_page(db, ctx, self.repository, criteria, page, to_customer_response)

    async def _load(self, db: AsyncSession, ctx: RequestContext, customer_id: uuid.UUID) -> Customer:
        customer = await self.repository.get(db, ctx.tenant_id, customer_id)
        if customer is None:
            raise NotFoundError(resource="Customer", resource_id=str(customer_id))
        return customer

    async def get_customer(
        self, db: AsyncSession, ctx: RequestContext, customer_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get customer")
        customer = await self._load(db, ctx, customer_id)
        return ApiResponse.ok(to_customer_response(customer))

    async def create_customer(
        self, db: AsyncSession, ctx: RequestContext, data: CustomerWrite
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Create customer")
        ensure_valid(validate_customer(data))

        customer = Customer(**data.model_dump())
        await self.repository.add(db, ctx.tenant_id, customer)
        logger.info("Customer %s created for tenant %s", customer.id, ctx.tenant_id)
        return ApiResponse.ok(to_customer_response(customer), "Customer created successfully")

    async def update_customer(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        customer_id: uuid.UUID,
        data: CustomerWrite,
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Update customer")
        customer = await self._load(db, ctx, customer_id)
        ensure_valid(validate_customer(data))

        for name, value in data.model_dump().items():
            setattr(customer, name, value)
        await self.repository.save(db, customer)
        logger.info("Customer %s updated", customer.id)
        return ApiResponse.ok(to_customer_response(customer), "Customer updated successfully")

    async def delete_customer(
        self, db: AsyncSession, ctx: RequestContext, customer_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Delete customer")
        customer = await self._load(db, ctx, customer_id)
        await self.repository.soft_delete(db, customer)
        logger.info("Customer %s deleted", customer.id)
        return ApiResponse.ok(True, "Customer deleted successfully")


customer_service = CustomerService()
