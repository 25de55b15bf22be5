"""
ServiceHub Backend — Tenant Context Tests
==========================================

What we test:
    ✅ Claims → RequestContext (well-formed, malformed, missing)
    ✅ request.state.claims wins over gateway headers
    ✅ No identity at all → UnauthorizedError
"""

import uuid

import pytest
from starlette.requests import Request

from servicehub.exceptions import UnauthorizedError
from servicehub.tenancy import RequestContext, context_from_claims, get_request_context, parse_uuid


def _request(headers=None, claims=None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("test", 80),
        "root_path": "",
        "path": "/api/customers",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    request = Request(scope)
    if claims is not None:
        request.state.claims = claims
    return request


class TestParseUuid:
    def test_valid(self):
        value = uuid.uuid4()
        assert parse_uuid(str(value)) == value
        assert parse_uuid(f"  {value}  ") == value
        assert parse_uuid(value) is value

    @pytest.mark.parametrize("raw", [None, "", "not-a-uuid", 42])
    def test_invalid(self, raw):
        assert parse_uuid(raw) is None


class TestContextFromClaims:
    def test_tenant_and_user(self):
        tenant, user = uuid.uuid4(), uuid.uuid4()
        ctx = context_from_claims({"TenantId": str(tenant), "UserId": str(user)})
        assert ctx == RequestContext(tenant_id=tenant, user_id=user, authenticated=True)
        assert ctx.has_tenant

    def test_malformed_tenant_claim(self):
        ctx = context_from_claims({"TenantId": "acme"})
        assert ctx.tenant_id is None
        assert ctx.authenticated is True
        assert not ctx.has_tenant

    def test_no_claims(self):
        assert context_from_claims(None) == RequestContext()


class TestGetRequestContext:
    @pytest.mark.asyncio
    async def test_from_headers(self):
        tenant = uuid.uuid4()
        request = _request(headers={"X-Tenant-ID": str(tenant)})
        ctx = await get_request_context(request)
        assert ctx.tenant_id == tenant
        assert ctx.user_id is None
        assert request.state.tenant_id == tenant

    @pytest.mark.asyncio
    async def test_state_claims_take_precedence(self):
        from_claims, from_header = uuid.uuid4(), uuid.uuid4()
        request = _request(
            headers={"X-Tenant-ID": str(from_header)},
            claims={"TenantId": str(from_claims)},
        )
        ctx = await get_request_context(request)
        assert ctx.tenant_id == from_claims

    @pytest.mark.asyncio
    async def test_user_without_tenant(self):
        ctx = await get_request_context(_request(headers={"X-User-ID": str(uuid.uuid4())}))
        assert ctx.authenticated is True
        assert ctx.tenant_id is None

    @pytest.mark.asyncio
    async def test_no_identity_is_unauthorized(self):
        with pytest.raises(UnauthorizedError):
            await get_request_context(_request())
