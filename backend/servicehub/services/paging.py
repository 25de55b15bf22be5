"""
ServiceHub Backend — Tenant-Scoped Paged Query
================================================

What:  The one list procedure every list endpoint runs.
How:
    1. Resolve the tenant from the RequestContext; without one, return the
       failed envelope "Tenant context not found" (no exception, no query)
    2. Scope to the tenant's live rows (repository)
    3. Apply the provided filters / search
    4. Sort by the requested key, id as tie-breaker
    5. Count the filtered set
    6. Skip (page_number - 1) * page_size, take page_size
    7. Project each row through its response schema
    8. Wrap in PagedResult inside a success ApiResponse

Page bounds:
    page_number < 1        → 1
    page_size < 1          → settings.default_page_size
    page_size > max        → settings.max_page_size
    The envelope echoes the effective values.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.config import settings
from servicehub.schemas.common import ApiResponse, PagedResult
from servicehub.services.repository import QueryCriteria, TenantRepository
from servicehub.tenancy import TENANT_CONTEXT_MISSING, RequestContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageRequest:
    page_number: int = 1
    page_size: int = 10

    def clamp(
        self,
        default_size: Optional[int] = None,
        max_size: Optional[int] = None,
    ) -> "PageRequest":
        """Return the effective page request after applying the bounds policy."""
        default_size = default_size or settings.default_page_size
        max_size = max_size or settings.max_page_size

        page_number = self.page_number if self.page_number >= 1 else 1
        page_size = self.page_size
        if page_size < 1:
            page_size = default_size
        page_size = min(page_size, max_size)
        return PageRequest(page_number=page_number, page_size=page_size)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


def tenant_missing(operation: str) -> ApiResponse:
    """The soft failure every operation returns when no tenant is resolved."""
    logger.warning("%s rejected: %s", operation, TENANT_CONTEXT_MISSING)
    return ApiResponse.fail(TENANT_CONTEXT_MISSING)


async def fetch_tenant_page(
    db: AsyncSession,
    ctx: RequestContext,
    repository: TenantRepository,
    criteria: QueryCriteria,
    page: PageRequest,
    project: Callable[[Any], Any],
    default_page_size: Optional[int] = None,
) -> ApiResponse:
    """
    Run the paged query for the caller's tenant.

    Args:
        db: Async database session
        ctx: Caller identity; ctx.tenant_id scopes every row
        repository: Repository of the listed model
        criteria: Filters, search and sort requested by the caller
        page: Requested page (bounds are applied here)
        project: Row → response schema (field allow-list)
        default_page_size: Size used when the caller sends page_size < 1

    Returns:
        ApiResponse whose data is a PagedResult, or the failed
        "Tenant context not found" envelope.
    """
    if not ctx.has_tenant:
        return tenant_missing(f"List {repository.model.__name__}")

    effective = page.clamp(default_size=default_page_size)
    rows, total = await repository.find_page(
        db,
        ctx.tenant_id,
        criteria,
        offset=effective.offset,
        limit=effective.page_size,
    )

    result = PagedResult.build(
        items=[project(row) for row in rows],
        total_count=total,
        page_number=effective.page_number,
        page_size=effective.page_size,
    )
    logger.debug(
        "Listed %d/%d %s rows (page %d, size %d) for tenant %s",
        len(result.items),
        total,
        repository.model.__name__,
        effective.page_number,
        effective.page_size,
        ctx.tenant_id,
    )
    return ApiResponse.ok(result)
