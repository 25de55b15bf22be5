"""
ServiceHub Backend — Customer Service Tests
=============================================

What we test:
    ✅ Listing: search, sort keys, tenant scoping
    ✅ Create / update validation messages
    ✅ Not found across tenants, soft delete
    ✅ Missing tenant → failed envelope on every operation
"""

import uuid

import pytest

from servicehub.exceptions import NotFoundError, ValidationError
from servicehub.models.customer import Customer
from servicehub.schemas.customer import CustomerWrite
from servicehub.services.customer_service import CustomerService
from servicehub.services.paging import PageRequest
from servicehub.tenancy import TENANT_CONTEXT_MISSING


class TestListCustomers:
    def setup_method(self):
        self.service = CustomerService()

    @pytest.mark.asyncio
    async def test_default_sort_is_last_name(self, db_session, tenant_ctx):
        for first, last in [("Zed", "Brown"), ("Amy", "Adams"), ("Bob", "Clark")]:
            db_session.add(Customer(tenant_id=tenant_ctx.tenant_id, first_name=first, last_name=last))
        await db_session.flush()

        result = await self.service.list_customers(db_session, tenant_ctx, PageRequest())
        assert [c.last_name for c in result.data.items] == ["Adams", "Brown", "Clark"]

    @pytest.mark.asyncio
    async def test_sort_by_first_name_descending(self, db_session, tenant_ctx):
        for first, last in [("Zed", "Brown"), ("Amy", "Adams"), ("Bob", "Clark")]:
            db_session.add(Customer(tenant_id=tenant_ctx.tenant_id, first_name=first, last_name=last))
        await db_session.flush()

        result = await self.service.list_customers(
            db_session, tenant_ctx, PageRequest(), sort_by="firstName", sort_descending=True
        )
        assert [c.first_name for c in result.data.items] == ["Zed", "Bob", "Amy"]

    @pytest.mark.asyncio
    async def test_search_matches_phone(self, db_session, tenant_ctx, customer):
        db_session.add(Customer(tenant_id=tenant_ctx.tenant_id, first_name="No", last_name="Match"))
        await db_session.flush()

        result = await self.service.list_customers(db_session, tenant_ctx, PageRequest(), search="0100")
        assert result.data.total_count == 1
        assert result.data.items[0].id == customer.id

    @pytest.mark.asyncio
    async def test_missing_tenant(self, db_session, no_tenant_ctx):
        result = await self.service.list_customers(db_session, no_tenant_ctx, PageRequest())
        assert result.success is False
        assert result.message == TENANT_CONTEXT_MISSING


class TestCustomerCommands:
    def setup_method(self):
        self.service = CustomerService()

    @pytest.mark.asyncio
    async def test_create(self, db_session, tenant_ctx):
        result = await self.service.create_customer(
            db_session, tenant_ctx, CustomerWrite(first_name="Grace", last_name="Hopper", email="g@navy.mil")
        )
        assert result.success is True
        assert result.message == "Customer created successfully"
        assert result.data.total_visits == 0

        stored = await self.service.repository.get(db_session, tenant_ctx.tenant_id, result.data.id)
        assert stored.tenant_id == tenant_ctx.tenant_id

    @pytest.mark.asyncio
    async def test_create_reports_every_violation(self, db_session, tenant_ctx):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_customer(
                db_session, tenant_ctx, CustomerWrite(first_name="", last_name="", email="nope")
            )
        assert exc_info.value.errors == [
            "First name is required",
            "Last name is required",
            "Invalid email format",
        ]

    @pytest.mark.asyncio
    async def test_update(self, db_session, tenant_ctx, customer):
        result = await self.service.update_customer(
            db_session,
            tenant_ctx,
            customer.id,
            CustomerWrite(first_name="Augusta", last_name="King", city="London"),
        )
        assert result.message == "Customer updated successfully"
        assert result.data.first_name == "Augusta"
        assert result.data.city == "London"
        assert customer.updated_at is not None

    @pytest.mark.asyncio
    async def test_update_other_tenant_not_found(self, db_session, other_tenant_ctx, customer):
        with pytest.raises(NotFoundError):
            await self.service.update_customer(
                db_session, other_tenant_ctx, customer.id, CustomerWrite(first_name="X", last_name="Y")
            )

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, db_session, tenant_ctx, customer):
        result = await self.service.delete_customer(db_session, tenant_ctx, customer.id)
        assert result.data is True
        assert customer.is_deleted is True

        with pytest.raises(NotFoundError):
            await self.service.get_customer(db_session, tenant_ctx, customer.id)

    @pytest.mark.asyncio
    async def test_get_unknown(self, db_session, tenant_ctx):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_customer(db_session, tenant_ctx, uuid.uuid4())
        assert exc_info.value.message == "Customer not found"

    @pytest.mark.asyncio
    async def test_commands_without_tenant(self, db_session, no_tenant_ctx, customer):
        body = CustomerWrite(first_name="A", last_name="B")
        for result in (
            await self.service.create_customer(db_session, no_tenant_ctx, body),
            await self.service.update_customer(db_session, no_tenant_ctx, customer.id, body),
            await self.service.delete_customer(db_session, no_tenant_ctx, customer.id),
        ):
            assert result.success is False
            assert result.message == TENANT_CONTEXT_MISSING
        assert customer.is_deleted is False
