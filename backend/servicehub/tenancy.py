"""
ServiceHub Backend — Tenant Context Resolution
================================================

What:  Resolves the caller's tenant id and user id once per request.
How:   Reads identity claims from `request.state.claims` (populated by an
       upstream authentication layer) or, failing that, from the trusted
       gateway headers named in settings. The result is an immutable
       RequestContext passed explicitly into every service call.
Who:   FastAPI dependency used by every tenant-scoped route.

Resolution rules:
    - No claims at all and REQUIRE_AUTHENTICATION on  → UnauthorizedError (401)
    - Tenant claim missing or not a UUID               → ctx.tenant_id is None
    - Services answer a None tenant with the failed envelope
      "Tenant context not found" (never an exception).
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi import Request

from servicehub.config import settings
from servicehub.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

TENANT_CONTEXT_MISSING = "Tenant context not found"


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for one request."""

    tenant_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    authenticated: bool = False

    @property
    def has_tenant(self) -> bool:
        return self.tenant_id is not None


def parse_uuid(value: Any) -> Optional[uuid.UUID]:
    """Returns a UUID for a well-formed value, else None."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (ValueError, AttributeError):
        return None


def context_from_claims(claims: Optional[Mapping[str, Any]]) -> RequestContext:
    """
    Build a RequestContext from a claims mapping.

    A present-but-unparsable tenant claim yields tenant_id=None, the same as
    a missing one.
    """
    if not claims:
        return RequestContext()

    tenant_id = parse_uuid(claims.get(settings.tenant_claim))
    user_id = parse_uuid(claims.get(settings.user_claim))
    if tenant_id is None and claims.get(settings.tenant_claim) is not None:
        logger.warning("Ignoring malformed tenant claim")
    return RequestContext(tenant_id=tenant_id, user_id=user_id, authenticated=True)


def _claims_from_request(request: Request) -> Optional[Mapping[str, Any]]:
    claims = getattr(request.state, "claims", None)
    if claims:
        return claims

    headers = {}
    tenant = request.headers.get(settings.tenant_header)
    user = request.headers.get(settings.user_header)
    if tenant:
        headers[settings.tenant_claim] = tenant
    if user:
        headers[settings.user_claim] = user
    return headers or None


async def get_request_context(request: Request) -> RequestContext:
    """
    FastAPI dependency returning the caller's RequestContext.

    FastAPI caches dependency results per request, so the claims are read
    once even when several dependencies ask for the context.

    Raises:
        UnauthorizedError: no identity claims and authentication is required
    """
    claims = _claims_from_request(request)
    if not claims and settings.require_authentication:
        raise UnauthorizedError(context={"path": request.url.path})

    ctx = context_from_claims(claims)
    request.state.tenant_id = ctx.tenant_id
    return ctx
