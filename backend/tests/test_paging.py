"""
ServiceHub Backend — Paged Query Tests
========================================

What we test:
    ✅ Page bounds: page < 1 → 1, size < 1 → default, size > max → max
    ✅ PagedResult.build computes total_pages
    ✅ Money values up to the column range keep their cents as JSON numbers
    ✅ Missing tenant → failed envelope, no query issued
    ✅ Page slicing, total count and deterministic ordering
"""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from servicehub.models.customer import Customer
from servicehub.schemas.common import ApiResponse, Money, PagedResult
from servicehub.services.customer_service import CustomerService, to_customer_response
from servicehub.services.paging import PageRequest, fetch_tenant_page
from servicehub.services.repository import QueryCriteria, SortKey
from servicehub.tenancy import TENANT_CONTEXT_MISSING


class TestPageRequestClamp:
    def test_valid_request_unchanged(self):
        assert PageRequest(3, 25).clamp() == PageRequest(3, 25)

    def test_page_number_below_one(self):
        assert PageRequest(0, 10).clamp().page_number == 1
        assert PageRequest(-4, 10).clamp().page_number == 1

    def test_page_size_below_one_uses_default(self):
        assert PageRequest(1, 0).clamp().page_size == 10
        assert PageRequest(1, -1).clamp(default_size=20).page_size == 20

    def test_page_size_capped_at_max(self):
        assert PageRequest(1, 5000).clamp().page_size == 100
        assert PageRequest(1, 60).clamp(max_size=50).page_size == 50

    def test_offset(self):
        assert PageRequest(3, 20).offset == 40
        assert PageRequest(1, 10).offset == 0


class TestPagedResult:
    def test_total_pages_rounds_up(self):
        result = PagedResult.build(items=[1, 2], total_count=21, page_number=3, page_size=10)
        assert result.total_pages == 3

    def test_empty(self):
        result = PagedResult.build(items=[], total_count=0, page_number=1, page_size=10)
        assert result.total_pages == 0
        assert result.items == []

    def test_camel_case_keys(self):
        dumped = PagedResult.build([], 5, 1, 10).model_dump(by_alias=True)
        assert set(dumped) == {"items", "totalCount", "pageNumber", "pageSize", "totalPages"}


class TestMoneyEncoding:
    @pytest.mark.parametrize(
        "amount", ["0.01", "26.60", "1234567.89", "9999999999.99", "-9999999999.99"]
    )
    def test_cents_survive_the_json_number(self, amount):
        body = json.loads(ApiResponse[Money].ok(Decimal(amount)).model_dump_json(by_alias=True))
        assert isinstance(body["data"], float)
        assert Decimal(str(body["data"])) == Decimal(amount)


async def _seed_customers(db_session, tenant_id, last_names):
    for name in last_names:
        db_session.add(Customer(tenant_id=tenant_id, first_name="Test", last_name=name))
    await db_session.flush()


class TestFetchTenantPage:
    def setup_method(self):
        self.repository = CustomerService.repository

    @pytest.mark.asyncio
    async def test_missing_tenant_returns_failed_envelope_without_query(self, no_tenant_ctx):
        db = AsyncMock()
        result = await fetch_tenant_page(
            db, no_tenant_ctx, self.repository, QueryCriteria(), PageRequest(), to_customer_response
        )
        assert result.success is False
        assert result.message == TENANT_CONTEXT_MISSING
        assert result.data is None
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_page(self, db_session, tenant_ctx):
        await _seed_customers(db_session, tenant_ctx.tenant_id, [f"Name{i:02d}" for i in range(25)])
        result = await fetch_tenant_page(
            db_session,
            tenant_ctx,
            self.repository,
            QueryCriteria(sort=SortKey("last_name")),
            PageRequest(page_number=2, page_size=10),
            to_customer_response,
        )
        page = result.data
        assert result.success is True
        assert page.total_count == 25
        assert page.total_pages == 3
        assert [c.last_name for c in page.items] == [f"Name{i:02d}" for i in range(10, 20)]

    @pytest.mark.asyncio
    async def test_last_partial_page(self, db_session, tenant_ctx):
        await _seed_customers(db_session, tenant_ctx.tenant_id, [f"Name{i:02d}" for i in range(25)])
        result = await fetch_tenant_page(
            db_session,
            tenant_ctx,
            self.repository,
            QueryCriteria(sort=SortKey("last_name")),
            PageRequest(page_number=3, page_size=10),
            to_customer_response,
        )
        assert len(result.data.items) == 5

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(self, db_session, tenant_ctx):
        await _seed_customers(db_session, tenant_ctx.tenant_id, ["A", "B"])
        result = await fetch_tenant_page(
            db_session,
            tenant_ctx,
            self.repository,
            QueryCriteria(),
            PageRequest(page_number=5, page_size=10),
            to_customer_response,
        )
        assert result.data.items == []
        assert result.data.total_count == 2

    @pytest.mark.asyncio
    async def test_envelope_echoes_effective_bounds(self, db_session, tenant_ctx):
        await _seed_customers(db_session, tenant_ctx.tenant_id, ["A"])
        result = await fetch_tenant_page(
            db_session,
            tenant_ctx,
            self.repository,
            QueryCriteria(),
            PageRequest(page_number=0, page_size=500),
            to_customer_response,
        )
        assert result.data.page_number == 1
        assert result.data.page_size == 100

    @pytest.mark.asyncio
    async def test_ties_ordered_by_id(self, db_session, tenant_ctx):
        await _seed_customers(db_session, tenant_ctx.tenant_id, ["Same"] * 6)
        criteria = QueryCriteria(sort=SortKey("last_name"))
        first = await fetch_tenant_page(
            db_session, tenant_ctx, self.repository, criteria, PageRequest(1, 3), to_customer_response
        )
        second = await fetch_tenant_page(
            db_session, tenant_ctx, self.repository, criteria, PageRequest(2, 3), to_customer_response
        )
        ids = [c.id for c in first.data.items] + [c.id for c in second.data.items]
        assert len(set(ids)) == 6
        assert ids == sorted(ids)
