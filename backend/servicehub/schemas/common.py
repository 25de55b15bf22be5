"""
ServiceHub Backend — Shared Response Envelope & Paging Schemas
================================================================

What:  The uniform JSON envelope every endpoint returns, the paged result
       carried inside list envelopes, and the camelCase base model.
How:   Pydantic v2 generics; an alias generator turns snake_case attributes
       into camelCase JSON keys, and populate_by_name lets Python code keep
       using snake_case.

Envelope:
    {
        "success": true,
        "data": {...} | [...] | null,
        "message": "Location created successfully",
        "errors": []
    }

Paged result:
    {
        "items": [...],
        "totalCount": 42,
        "pageNumber": 2,
        "pageSize": 10,
        "totalPages": 5
    }
"""

import math
from decimal import Decimal
from typing import Annotated, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Decimal in Python, JSON number on the wire. Stored money is Numeric(12, 2),
# at most 12 significant digits; floats round-trip 15, so the JSON value reads
# back as the same cents. Larger or finer values would need a string encoding.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base for every request/response schema: camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PagedResult(CamelModel, Generic[T]):
    """
    One page of a tenant-scoped list.

    Invariant:
        len(items) == min(page_size, max(0, total_count - (page_number - 1) * page_size))
    """

    items: List[T] = Field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    page_size: int = 10
    total_pages: int = 0

    @classmethod
    def build(
        cls,
        items: Sequence[T],
        total_count: int,
        page_number: int,
        page_size: int,
    ) -> "PagedResult[T]":
        return cls(
            items=list(items),
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
            total_pages=math.ceil(total_count / page_size) if page_size > 0 else 0,
        )


class ApiResponse(CamelModel, Generic[T]):
    """
    Uniform result envelope.

    Callers must check `success`: a missing tenant context comes back as a
    failed envelope rather than an exception.
    """

    success: bool
    data: Optional[T] = None
    message: str = ""
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, data: Optional[T] = None, message: str = "") -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, message: str, errors: Optional[List[str]] = None) -> "ApiResponse[T]":
        return cls(success=False, data=None, message=message, errors=list(errors or []))


class HealthResponse(CamelModel):
    """
    What:  System health status for monitoring and container orchestration.
    Who:   Returned by GET /health.
    """

    status: str = Field(description="'healthy' or 'degraded'")
    database: str = Field(description="'connected' or 'disconnected'")
    version: str = Field(description="Application version")
