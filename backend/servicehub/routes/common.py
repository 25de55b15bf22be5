"""
Shared route helpers: paging query parameters and status selection.

Status policy for the soft "Tenant context not found" failure:
    queries  → 200 with success=false (the envelope is returned as-is)
    commands → 400 with success=false
Exceptions (validation, not found, business rule) are mapped by the
global handlers in main.py.
"""

from fastapi import Query, Response

from servicehub.schemas.common import ApiResponse
from servicehub.services.paging import PageRequest


def page_request(
    page_number: int = Query(default=1, alias="pageNumber", description="1-based page index"),
    page_size: int = Query(default=10, alias="pageSize", description="Items per page (max 100)"),
) -> PageRequest:
    return PageRequest(page_number=page_number, page_size=page_size)


def command_result(
    response: Response,
    result: ApiResponse,
    success_status: int = 200,
) -> ApiResponse:
    """Set the status code of a command: success_status, or 400 on a soft failure."""
    response.status_code = success_status if result.success else 400
    return result
