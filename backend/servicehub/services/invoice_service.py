"""
ServiceHub Backend — Invoice Service
======================================

What:  Invoice listing and creation from completed work orders.

create_invoice_from_work_order preconditions (each a 400 BusinessRuleError):
    1. The work order is Completed
    2. No invoice exists for it yet
    3. It has at least one live item
    4. Every live item has quantity > 0 and unit price >= 0

Totals come from tax.summarize over the copied items:
    subtotal = Σ q*p, tax = Σ q*p*r/100, total = subtotal + tax - discount
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from servicehub.config import settings
from servicehub.exceptions import BusinessRuleError, NotFoundError
from servicehub.models.base import utcnow
from servicehub.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from servicehub.models.work_order import WorkOrderStatus
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.invoice import InvoiceItemResponse, InvoiceResponse
from servicehub.services.numbering import INVOICE_PREFIX, next_document_number
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import FieldFilter, QueryCriteria, SortKey, TenantRepository
from servicehub.services.tax import item_total, round_money, summarize
from servicehub.services.work_order_service import work_order_service
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

INVOICE_LOAD = (
    selectinload(Invoice.items),
    selectinload(Invoice.customer),
)


def to_invoice_response(invoice: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        customer_id=invoice.customer_id,
        customer_name=invoice.customer.full_name if invoice.customer else "",
        work_order_id=invoice.work_order_id,
        invoice_date=invoice.invoice_date,
        due_date=invoice.due_date,
        status=invoice.status,
        subtotal=invoice.subtotal,
        tax_amount=invoice.tax_amount,
        discount_amount=invoice.discount_amount,
        total_amount=invoice.total_amount,
        paid_amount=invoice.paid_amount,
        balance=invoice.balance,
        items=[
            InvoiceItemResponse.model_validate(item)
            for item in invoice.items
            if not item.is_deleted
        ],
        created_at=invoice.created_at,
    )


class InvoiceService:
    repository = TenantRepository(Invoice)

    async def list_invoices(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        customer_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> ApiResponse:
        criteria = QueryCriteria(
            filters=[
                FieldFilter("customer_id", customer_id),
                FieldFilter("status", status),
                FieldFilter("invoice_date", start_date, op="ge"),
                FieldFilter("invoice_date", end_date, op="le"),
            ],
            sort=SortKey("invoice_date", descending=True),
            options=INVOICE_LOAD,
        )
        return await fetch_tenant_page(db, ctx, self.repository, criteria, page, to_invoice_response)

    async def get_invoice(
        self, db: AsyncSession, ctx: RequestContext, invoice_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get invoice")
        invoice = await self.repository.get(db, ctx.tenant_id, invoice_id, options=INVOICE_LOAD)
        if invoice is None:
            raise NotFoundError(resource="Invoice", resource_id=str(invoice_id))
        return ApiResponse.ok(to_invoice_response(invoice))

    async def create_invoice_from_work_order(
        self, db: AsyncSession, ctx: RequestContext, work_order_id: uuid.UUID
    ) -> ApiResponse:
        """
        Bill a completed work order.

        Copies every live work order item onto a new Draft invoice due
        INVOICE_DUE_DAYS from now, and links the work order to it.

        Raises:
            NotFoundError: work order missing from the tenant
            BusinessRuleError: any precondition in the module docstring fails
        """
        if not ctx.has_tenant:
            return tenant_missing("Create invoice")

        work_order = await work_order_service.load(db, ctx, work_order_id)
        if work_order.status != WorkOrderStatus.COMPLETED:
            raise BusinessRuleError("Work order must be completed before creating an invoice")

        already_invoiced = work_order.invoice_id is not None or await self.repository.exists(
            db, ctx.tenant_id, [FieldFilter("work_order_id", work_order.id)]
        )
        if already_invoiced:
            raise BusinessRuleError("Invoice already exists for this work order")

        live = work_order.live_items
        if not live:
            raise BusinessRuleError(
                "Work order must have at least one item before creating an invoice"
            )
        for item in live:
            if item.quantity <= 0:
                raise BusinessRuleError(
                    f"Item '{item.description}' has invalid quantity: {item.quantity}"
                )
            if item.unit_price < 0:
                raise BusinessRuleError(
                    f"Item '{item.description}' has invalid unit price: {item.unit_price}"
                )

        now = utcnow()
        number = await next_document_number(db, self.repository, ctx.tenant_id, INVOICE_PREFIX, now)
        totals = summarize(live)

        invoice = Invoice(
            invoice_number=number,
            customer_id=work_order.customer_id,
            work_order_id=work_order.id,
            location_id=work_order.location_id,
            invoice_date=now,
            due_date=now + timedelta(days=settings.invoice_due_days),
            status=InvoiceStatus.DRAFT,
            subtotal=round_money(totals.subtotal),
            tax_amount=round_money(totals.tax),
            discount_amount=round_money(totals.discount),
            total_amount=round_money(totals.total),
            paid_amount=round_money(0),
            customer=work_order.customer,
            items=[
                InvoiceItem(
                    tenant_id=ctx.tenant_id,
                    item_type=item.item_type,
                    service_id=item.service_id,
                    product_id=item.product_id,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    tax_rate=item.tax_rate,
                    discount_amount=round_money(0),
                    total_amount=round_money(
                        item_total(item.quantity, item.unit_price, item.tax_rate)
                    ),
                )
                for item in live
            ],
        )
        await self.repository.add(db, ctx.tenant_id, invoice)

        work_order.invoice_id = invoice.id
        await work_order_service.repository.save(db, work_order)

        logger.info(
            "Invoice %s created from work order %s: total %s",
            number,
            work_order.work_order_number,
            invoice.total_amount,
        )
        return ApiResponse.ok(to_invoice_response(invoice), "Invoice created successfully")


invoice_service = InvoiceService()
