"""
ServiceHub Backend — Dashboard Statistics
===========================================

What:  One tenant-scoped summary for the dashboard page.

Window:
    start_date defaults to DASHBOARD_WINDOW_DAYS before now, end_date to now.
    Figures marked (window) only count rows inside it; the others are
    current totals.

Figures:
    total_revenue           Σ total_amount of Paid invoices dated in the window (window)
    total_appointments      appointments starting in the window (window)
    active_appointments     appointments not Completed, Cancelled or NoShow
    total_customers         live customers
    pending_invoices        invoices neither Paid nor Cancelled
    pending_invoice_amount  Σ (total_amount - paid_amount) of those invoices
    low_stock_products      active products with stock <= threshold
    top_services            5 services booked most often in the window, with
                            count × current price as revenue (window)
    recent_appointments     5 latest appointments by scheduled start
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from servicehub.models.appointment import Appointment, AppointmentStatus
from servicehub.models.base import as_utc, utcnow
from servicehub.models.catalog import ServiceOffering
from servicehub.models.customer import Customer
from servicehub.models.invoice import Invoice, InvoiceStatus
from servicehub.models.product import Product
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.dashboard import DashboardStats, RecentAppointment, TopService
from servicehub.services.paging import tenant_missing
from servicehub.services.repository import FieldFilter, QueryCriteria, SortKey, TenantRepository
from servicehub.services.tax import round_money
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

DASHBOARD_WINDOW_DAYS = 30
TOP_SERVICES_LIMIT = 5
RECENT_APPOINTMENTS_LIMIT = 5

PENDING_EXCLUDED = (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)

invoices = TenantRepository(Invoice)
appointments = TenantRepository(Appointment)
customers = TenantRepository(Customer)
products = TenantRepository(Product)
catalog = TenantRepository(ServiceOffering)


class DashboardService:
    async def get_dashboard_stats(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get dashboard stats")
        tenant_id = ctx.tenant_id

        end = as_utc(end_date) or utcnow()
        start = as_utc(start_date) or end - timedelta(days=DASHBOARD_WINDOW_DAYS)

        revenue = await invoices.total(
            db,
            tenant_id,
            Invoice.total_amount,
            [
                FieldFilter("status", InvoiceStatus.PAID),
                FieldFilter("invoice_date", start, op="ge"),
                FieldFilter("invoice_date", end, op="le"),
            ],
        )
        in_window = [
            FieldFilter("scheduled_start", start, op="ge"),
            FieldFilter("scheduled_start", end, op="le"),
        ]
        pending = [FieldFilter("status", PENDING_EXCLUDED, op="not_in")]

        stats = DashboardStats(
            start_date=start,
            end_date=end,
            total_revenue=round_money(revenue),
            total_appointments=await appointments.count(db, tenant_id, in_window),
            active_appointments=await appointments.count(
                db, tenant_id, [FieldFilter("status", AppointmentStatus.CLOSED, op="not_in")]
            ),
            total_customers=await customers.count(db, tenant_id),
            pending_invoices=await invoices.count(db, tenant_id, pending),
            pending_invoice_amount=round_money(
                await invoices.total(
                    db, tenant_id, Invoice.total_amount - Invoice.paid_amount, pending
                )
            ),
            low_stock_products=await products.count(
                db,
                tenant_id,
                [
                    FieldFilter("is_active", True),
                    FieldFilter("stock_quantity", "low_stock_threshold", op="le_field"),
                ],
            ),
            top_services=await self._top_services(db, ctx, in_window),
            recent_appointments=await self._recent_appointments(db, ctx),
        )
        logger.debug("Dashboard stats for tenant %s from %s to %s", tenant_id, start, end)
        return ApiResponse.ok(stats)

    async def _top_services(self, db: AsyncSession, ctx: RequestContext, in_window) -> list:
        counts = await appointments.count_by(db, ctx.tenant_id, "service_id", in_window)
        # Appointments without a service group under None
        counts = [(service_id, n) for service_id, n in counts if service_id is not None]
        counts = counts[:TOP_SERVICES_LIMIT]
        if not counts:
            return []

        services = await catalog.find_all(
            db,
            ctx.tenant_id,
            QueryCriteria(filters=[FieldFilter("id", [sid for sid, _ in counts], op="in")]),
        )
        by_id = {service.id: service for service in services}
        return [
            TopService(
                service_id=service_id,
                service_name=by_id[service_id].name,
                count=n,
                revenue=round_money(by_id[service_id].price * n),
            )
            for service_id, n in counts
            if service_id in by_id
        ]

    async def _recent_appointments(self, db: AsyncSession, ctx: RequestContext) -> list:
        rows, _ = await appointments.find_page(
            db,
            ctx.tenant_id,
            QueryCriteria(
                sort=SortKey("scheduled_start", descending=True),
                options=(selectinload(Appointment.customer),),
            ),
            offset=0,
            limit=RECENT_APPOINTMENTS_LIMIT,
        )
        return [
            RecentAppointment(
                id=row.id,
                customer_name=row.customer.full_name if row.customer else "",
                scheduled_start=row.scheduled_start,
                status=row.status,
            )
            for row in rows
        ]


dashboard_service = DashboardService()
