"""
ServiceHub Backend — Work Order Service
=========================================

What:  Work order lifecycle and line items.
Who:   Called by routes/work_orders.py; invoice_service reads work orders
       through this module's repository.

Flow:
    create (Draft) → add/remove items → update status → invoice (Completed only)

Totals:
    - Adding an item stores item_total(q, p, r) on the item, then sets the
      order's total_amount to the sum over live items.
    - Removing an item soft-deletes it and recomputes the same sum.
    - Listings recompute totals from the loaded live items and fall back to
      the stored total when there are none (tax.aggregate_total).

Customer activity:
    The first move of an order to Completed counts as a visit for its
    customer (total_visits + 1, last_visit_at = now).
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from servicehub.exceptions import BusinessRuleError, NotFoundError
from servicehub.models.appointment import Appointment
from servicehub.models.base import utcnow
from servicehub.models.catalog import ServiceOffering
from servicehub.models.customer import Customer
from servicehub.models.invoice import Invoice
from servicehub.models.location import Location
from servicehub.models.product import Product
from servicehub.models.work_order import WorkOrder, WorkOrderItem, WorkOrderStatus
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.work_order import (
    WorkOrderCreate,
    WorkOrderItemCreate,
    WorkOrderItemResponse,
    WorkOrderResponse,
    WorkOrderUpdate,
)
from servicehub.services.numbering import WORK_ORDER_PREFIX, next_document_number
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import FieldFilter, QueryCriteria, SortKey, TenantRepository
from servicehub.services.tax import aggregate_total, item_total, round_money
from servicehub.services.validators import (
    ensure_valid,
    is_blank,
    validate_work_order_item,
    validate_work_order_update,
)
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

customers = TenantRepository(Customer)
locations = TenantRepository(Location)
catalog = TenantRepository(ServiceOffering)
products = TenantRepository(Product)
appointments = TenantRepository(Appointment)
invoices = TenantRepository(Invoice)
items_repository = TenantRepository(WorkOrderItem)

# Everything a WorkOrderResponse reads
WORK_ORDER_LOAD = (
    selectinload(WorkOrder.items),
    selectinload(WorkOrder.customer),
    selectinload(WorkOrder.location),
)


# ══════════════════════════════════════════════════════════════════════════
# Projection
# ══════════════════════════════════════════════════════════════════════════


def to_item_response(item: WorkOrderItem) -> WorkOrderItemResponse:
    return WorkOrderItemResponse(
        id=item.id,
        work_order_id=item.work_order_id,
        item_type=item.item_type,
        service_id=item.service_id,
        product_id=item.product_id,
        description=item.description,
        quantity=item.quantity,
        unit_price=item.unit_price,
        tax_rate=item.tax_rate,
        total_amount=round_money(item_total(item.quantity, item.unit_price, item.tax_rate)),
    )


def to_work_order_response(work_order: WorkOrder) -> WorkOrderResponse:
    live = work_order.live_items
    return WorkOrderResponse(
        id=work_order.id,
        work_order_number=work_order.work_order_number,
        customer_id=work_order.customer_id,
        customer_name=work_order.customer.full_name if work_order.customer else "",
        appointment_id=work_order.appointment_id,
        assigned_to_user_id=work_order.assigned_to_user_id,
        location_id=work_order.location_id,
        location_name=work_order.location.name if work_order.location else None,
        status=work_order.status,
        description=work_order.description,
        internal_notes=work_order.internal_notes,
        total_amount=round_money(aggregate_total(live, work_order.total_amount)),
        started_at=work_order.started_at,
        completed_at=work_order.completed_at,
        created_at=work_order.created_at,
        items=[to_item_response(item) for item in live],
    )


def recompute_total(work_order: WorkOrder) -> None:
    """Stored total = Σ item_total over live items (0 when none remain)."""
    work_order.total_amount = round_money(
        sum(
            (item_total(i.quantity, i.unit_price, i.tax_rate) for i in work_order.live_items),
            start=round_money(0),
        )
    )


# ══════════════════════════════════════════════════════════════════════════
# Service
# ══════════════════════════════════════════════════════════════════════════


class WorkOrderService:
    repository = TenantRepository(WorkOrder)

    async def list_work_orders(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        status: Optional[str] = None,
        customer_id: Optional[uuid.UUID] = None,
        assigned_to_user_id: Optional[uuid.UUID] = None,
    ) -> ApiResponse:
        criteria = QueryCriteria(
            filters=[
                FieldFilter("status", status),
                FieldFilter("customer_id", customer_id),
                FieldFilter("assigned_to_user_id", assigned_to_user_id),
            ],
            sort=SortKey("created_at", descending=True),
            options=WORK_ORDER_LOAD,
        )
        return await fetch_tenant_page(
            db, ctx, self.repository, criteria, page, to_work_order_response
        )

    async def load(
        self, db: AsyncSession, ctx: RequestContext, work_order_id: uuid.UUID
    ) -> WorkOrder:
        """The tenant's live work order with items, customer and location loaded."""
        work_order = await self.repository.get(
            db, ctx.tenant_id, work_order_id, options=WORK_ORDER_LOAD
        )
        if work_order is None:
            raise NotFoundError(resource="Work order", resource_id=str(work_order_id))
        return work_order

    async def get_work_order(
        self, db: AsyncSession, ctx: RequestContext, work_order_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Get work order")
        return ApiResponse.ok(to_work_order_response(await self.load(db, ctx, work_order_id)))

    async def create_work_order(
        self, db: AsyncSession, ctx: RequestContext, data: WorkOrderCreate
    ) -> ApiResponse:
        """
        Open a Draft work order for one of the tenant's customers at one of
        its locations.

        Raises:
            NotFoundError: customer or location (or the given appointment)
                missing from the tenant
        """
        if not ctx.has_tenant:
            return tenant_missing("Create work order")

        customer = await customers.get(db, ctx.tenant_id, data.customer_id)
        if customer is None:
            raise NotFoundError(resource="Customer", resource_id=str(data.customer_id))
        location = await locations.get(db, ctx.tenant_id, data.location_id)
        if location is None:
            raise NotFoundError(resource="Location", resource_id=str(data.location_id))
        if data.appointment_id is not None:
            if await appointments.get(db, ctx.tenant_id, data.appointment_id) is None:
                raise NotFoundError(resource="Appointment", resource_id=str(data.appointment_id))

        number = await next_document_number(db, self.repository, ctx.tenant_id, WORK_ORDER_PREFIX)
        work_order = WorkOrder(
            work_order_number=number,
            customer_id=customer.id,
            location_id=location.id,
            appointment_id=data.appointment_id,
            assigned_to_user_id=data.assigned_to_user_id,
            status=WorkOrderStatus.DRAFT,
            description=data.description,
            internal_notes=data.internal_notes,
            total_amount=round_money(0),
            customer=customer,
            location=location,
            items=[],
        )
        await self.repository.add(db, ctx.tenant_id, work_order)
        logger.info("Work order %s (%s) created", number, work_order.id)
        return ApiResponse.ok(to_work_order_response(work_order), "Work order created successfully")

    async def update_work_order(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        work_order_id: uuid.UUID,
        data: WorkOrderUpdate,
    ) -> ApiResponse:
        """
        Change status (and optionally assignee, description, notes).

        started_at / completed_at are stamped once, on the first move into
        InProgress / Completed. Blank description or notes keep stored text.
        """
        if not ctx.has_tenant:
            return tenant_missing("Update work order")
        work_order = await self.load(db, ctx, work_order_id)
        ensure_valid(validate_work_order_update(data))

        now = utcnow()
        if data.assigned_to_user_id is not None:
            work_order.assigned_to_user_id = data.assigned_to_user_id

        previous = work_order.status
        work_order.status = data.status
        if data.status == WorkOrderStatus.IN_PROGRESS and work_order.started_at is None:
            work_order.started_at = now
        if data.status == WorkOrderStatus.COMPLETED and work_order.completed_at is None:
            work_order.completed_at = now
            work_order.customer.total_visits += 1
            work_order.customer.last_visit_at = now

        if not is_blank(data.description):
            work_order.description = data.description
        if not is_blank(data.internal_notes):
            work_order.internal_notes = data.internal_notes

        await self.repository.save(db, work_order)
        logger.info(
            "Work order %s updated: %s -> %s", work_order.work_order_number, previous, data.status
        )
        return ApiResponse.ok(to_work_order_response(work_order), "Work order updated successfully")

    async def delete_work_order(
        self, db: AsyncSession, ctx: RequestContext, work_order_id: uuid.UUID
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Delete work order")
        work_order = await self.load(db, ctx, work_order_id)

        invoiced = work_order.invoice_id is not None or await invoices.exists(
            db, ctx.tenant_id, [FieldFilter("work_order_id", work_order.id)]
        )
        if invoiced:
            raise BusinessRuleError(
                "Cannot delete work order that has an associated invoice",
                context={"work_order_id": str(work_order.id)},
            )

        await self.repository.soft_delete(db, work_order)
        logger.info("Work order %s deleted", work_order.work_order_number)
        return ApiResponse.ok(True, "Work order deleted successfully")

    async def add_work_order_item(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        work_order_id: uuid.UUID,
        data: WorkOrderItemCreate,
    ) -> ApiResponse:
        """
        Append a line and recompute the order total.

        A referenced catalog service or product must belong to the same tenant.
        """
        if not ctx.has_tenant:
            return tenant_missing("Add work order item")
        work_order = await self.load(db, ctx, work_order_id)
        ensure_valid(validate_work_order_item(data))

        if data.service_id is not None:
            if await catalog.get(db, ctx.tenant_id, data.service_id) is None:
                raise NotFoundError(resource="Service", resource_id=str(data.service_id))
        if data.product_id is not None:
            if await products.get(db, ctx.tenant_id, data.product_id) is None:
                raise NotFoundError(resource="Product", resource_id=str(data.product_id))

        # Stored at column precision; the line total is computed from the stored values
        quantity = round_money(data.quantity)
        unit_price = round_money(data.unit_price)
        item = WorkOrderItem(
            item_type=data.item_type,
            service_id=data.service_id,
            product_id=data.product_id,
            description=data.description.strip(),
            quantity=quantity,
            unit_price=unit_price,
            tax_rate=data.tax_rate,
            total_amount=round_money(item_total(quantity, unit_price, data.tax_rate)),
        )
        work_order.items.append(item)
        await items_repository.add(db, ctx.tenant_id, item)

        recompute_total(work_order)
        await self.repository.save(db, work_order)
        logger.info(
            "Item %s added to work order %s; total now %s",
            item.id,
            work_order.work_order_number,
            work_order.total_amount,
        )
        return ApiResponse.ok(to_item_response(item), "Work order item added successfully")

    async def remove_work_order_item(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        work_order_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> ApiResponse:
        if not ctx.has_tenant:
            return tenant_missing("Remove work order item")
        work_order = await self.load(db, ctx, work_order_id)

        item = next((i for i in work_order.live_items if i.id == item_id), None)
        if item is None:
            raise NotFoundError(resource="Work order item", resource_id=str(item_id))

        await items_repository.soft_delete(db, item)
        recompute_total(work_order)
        await self.repository.save(db, work_order)
        logger.info(
            "Item %s removed from work order %s; total now %s",
            item.id,
            work_order.work_order_number,
            work_order.total_amount,
        )
        return ApiResponse.ok(True, "Work order item removed successfully")


work_order_service = WorkOrderService()
