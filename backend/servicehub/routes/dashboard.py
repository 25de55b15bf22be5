"""
ServiceHub Backend — Dashboard Routes
=======================================
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db_session
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.dashboard import DashboardStats
from servicehub.services.dashboard_service import dashboard_service
from servicehub.tenancy import RequestContext, get_request_context

router = APIRouter(prefix="/api", tags=["Dashboard"])


@router.get(
    "/dashboard/stats",
    response_model=ApiResponse[DashboardStats],
    summary="Revenue, bookings and stock figures for a window (default: last 30 days)",
)
async def get_dashboard_stats(
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db_session),
):
    return await dashboard_service.get_dashboard_stats(
        db, ctx, start_date=start_date, end_date=end_date
    )
