"""
ServiceHub Backend — Work Order Service Tests
===============================================

What we test:
    ✅ Creation: numbering, Draft status, tenant-owned customer/location
    ✅ Items: validation, stored totals, recompute on add/remove
    ✅ Status changes stamp started/completed once and count customer visits
    ✅ Invoiced work orders cannot be deleted
    ✅ Referenced appointments and products must belong to the tenant
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from servicehub.exceptions import BusinessRuleError, NotFoundError, ValidationError
from servicehub.models.appointment import Appointment
from servicehub.models.product import Product
from servicehub.models.work_order import ItemType, WorkOrderStatus
from servicehub.schemas.work_order import WorkOrderCreate, WorkOrderItemCreate, WorkOrderUpdate
from servicehub.services.numbering import format_document_number
from servicehub.services.paging import PageRequest
from servicehub.services.work_order_service import WorkOrderService
from servicehub.tenancy import TENANT_CONTEXT_MISSING


@pytest.fixture
def service():
    return WorkOrderService()


async def _open(service, db_session, ctx, customer, location, **extra):
    result = await service.create_work_order(
        db_session,
        ctx,
        WorkOrderCreate(customer_id=customer.id, location_id=location.id, **extra),
    )
    return result.data


def _item(quantity="1", unit_price="10.00", tax_rate="0", **extra):
    return WorkOrderItemCreate(
        item_type=extra.pop("item_type", ItemType.SERVICE),
        description=extra.pop("description", "Labour"),
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        tax_rate=Decimal(tax_rate),
        **extra,
    )


class TestDocumentNumbers:
    def test_format(self):
        day = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert format_document_number("WO", day, 3) == "WO-20240115-0003"


class TestCreateWorkOrder:
    @pytest.mark.asyncio
    async def test_create_draft(self, service, db_session, tenant_ctx, customer, location):
        result = await service.create_work_order(
            db_session,
            tenant_ctx,
            WorkOrderCreate(customer_id=customer.id, location_id=location.id, description="Annual service"),
        )
        assert result.success is True
        assert result.message == "Work order created successfully"
        order = result.data
        assert order.status == WorkOrderStatus.DRAFT
        assert order.total_amount == Decimal("0.00")
        assert order.customer_name == "Ada Lovelace"
        assert order.location_name == "Main Street Shop"
        assert order.items == []

    @pytest.mark.asyncio
    async def test_numbers_increase_within_the_day(self, service, db_session, tenant_ctx, customer, location):
        first = await _open(service, db_session, tenant_ctx, customer, location)
        second = await _open(service, db_session, tenant_ctx, customer, location)

        today = datetime.now(timezone.utc).strftime("%Y%m%d")
        assert first.work_order_number == f"WO-{today}-0001"
        assert second.work_order_number == f"WO-{today}-0002"

    @pytest.mark.asyncio
    async def test_customer_of_other_tenant_rejected(
        self, service, db_session, other_tenant_ctx, customer, location
    ):
        with pytest.raises(NotFoundError) as exc_info:
            await _open(service, db_session, other_tenant_ctx, customer, location)
        assert exc_info.value.message == "Customer not found"

    @pytest.mark.asyncio
    async def test_appointment_must_belong_to_tenant(
        self, service, db_session, tenant_ctx, other_tenant_ctx, customer, location
    ):
        start = datetime(2030, 3, 4, 9, tzinfo=timezone.utc)
        mine = Appointment(
            tenant_id=tenant_ctx.tenant_id,
            customer_id=customer.id,
            location_id=location.id,
            scheduled_start=start,
            scheduled_end=start + timedelta(minutes=30),
        )
        theirs = Appointment(
            tenant_id=other_tenant_ctx.tenant_id,
            customer_id=customer.id,
            location_id=location.id,
            scheduled_start=start,
            scheduled_end=start + timedelta(minutes=30),
        )
        db_session.add_all([mine, theirs])
        await db_session.flush()

        linked = await _open(service, db_session, tenant_ctx, customer, location, appointment_id=mine.id)
        assert linked.appointment_id == mine.id

        with pytest.raises(NotFoundError) as exc_info:
            await _open(service, db_session, tenant_ctx, customer, location, appointment_id=theirs.id)
        assert exc_info.value.message == "Appointment not found"

    @pytest.mark.asyncio
    async def test_missing_tenant(self, service, db_session, no_tenant_ctx, customer, location):
        result = await service.create_work_order(
            db_session, no_tenant_ctx, WorkOrderCreate(customer_id=customer.id, location_id=location.id)
        )
        assert result.success is False
        assert result.message == TENANT_CONTEXT_MISSING


class TestWorkOrderItems:
    @pytest.mark.asyncio
    async def test_add_item_stores_tax_inclusive_total(
        self, service, db_session, tenant_ctx, customer, location, service_offering
    ):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        result = await service.add_work_order_item(
            db_session,
            tenant_ctx,
            order.id,
            _item("2", "50.00", "8", service_id=service_offering.id, description="Oil change"),
        )
        assert result.message == "Work order item added successfully"
        assert result.data.total_amount == Decimal("108.00")

        reloaded = (await service.get_work_order(db_session, tenant_ctx, order.id)).data
        assert reloaded.total_amount == Decimal("108.00")
        assert len(reloaded.items) == 1

    @pytest.mark.asyncio
    async def test_total_is_sum_over_items(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        await service.add_work_order_item(db_session, tenant_ctx, order.id, _item("2", "50.00", "8"))
        await service.add_work_order_item(db_session, tenant_ctx, order.id, _item("1", "25.00", "0"))

        work_order = await service.load(db_session, tenant_ctx, order.id)
        assert work_order.total_amount == Decimal("133.00")

    @pytest.mark.asyncio
    async def test_remove_item_recomputes(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        kept = await service.add_work_order_item(db_session, tenant_ctx, order.id, _item("1", "40.00"))
        dropped = await service.add_work_order_item(db_session, tenant_ctx, order.id, _item("3", "10.00"))

        result = await service.remove_work_order_item(db_session, tenant_ctx, order.id, dropped.data.id)
        assert result.message == "Work order item removed successfully"

        work_order = await service.load(db_session, tenant_ctx, order.id)
        assert work_order.total_amount == Decimal("40.00")
        assert [i.id for i in work_order.live_items] == [kept.data.id]

    @pytest.mark.asyncio
    async def test_remove_unknown_item(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        with pytest.raises(NotFoundError) as exc_info:
            await service.remove_work_order_item(db_session, tenant_ctx, order.id, uuid.uuid4())
        assert exc_info.value.message == "Work order item not found"

    @pytest.mark.asyncio
    async def test_item_validation(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        with pytest.raises(ValidationError) as exc_info:
            await service.add_work_order_item(
                db_session, tenant_ctx, order.id, _item("0", "-5", description=" ")
            )
        assert exc_info.value.errors == [
            "Description is required",
            "Quantity must be greater than 0",
            "Unit price cannot be negative",
        ]

    @pytest.mark.asyncio
    async def test_service_of_other_tenant_rejected(
        self, service, db_session, tenant_ctx, other_tenant_ctx, customer, location
    ):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        with pytest.raises(NotFoundError):
            await service.add_work_order_item(
                db_session, tenant_ctx, order.id, _item(service_id=uuid.uuid4())
            )

    @pytest.mark.asyncio
    async def test_product_must_belong_to_tenant(
        self, service, db_session, tenant_ctx, other_tenant_ctx, customer, location
    ):
        stocked = Product(tenant_id=tenant_ctx.tenant_id, location_id=location.id, name="Filter")
        foreign = Product(tenant_id=other_tenant_ctx.tenant_id, location_id=location.id, name="Filter")
        db_session.add_all([stocked, foreign])
        await db_session.flush()
        order = await _open(service, db_session, tenant_ctx, customer, location)

        added = await service.add_work_order_item(
            db_session,
            tenant_ctx,
            order.id,
            _item(item_type=ItemType.PRODUCT, product_id=stocked.id),
        )
        assert added.data.product_id == stocked.id

        with pytest.raises(NotFoundError) as exc_info:
            await service.add_work_order_item(
                db_session,
                tenant_ctx,
                order.id,
                _item(item_type=ItemType.PRODUCT, product_id=foreign.id),
            )
        assert exc_info.value.message == "Product not found"

    @pytest.mark.asyncio
    async def test_sub_cent_quantity_rejected(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        with pytest.raises(ValidationError) as exc_info:
            await service.add_work_order_item(db_session, tenant_ctx, order.id, _item("0.004"))
        assert exc_info.value.errors == ["Quantity must be greater than 0"]

        reloaded = await service.get_work_order(db_session, tenant_ctx, order.id)
        assert reloaded.data.items == []

    @pytest.mark.asyncio
    async def test_values_stored_at_cent_precision(
        self, service, db_session, tenant_ctx, customer, location
    ):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        result = await service.add_work_order_item(
            db_session, tenant_ctx, order.id, _item("1.005", "9.999", "0")
        )
        assert result.data.quantity == Decimal("1.01")
        assert result.data.unit_price == Decimal("10.00")
        assert result.data.total_amount == Decimal("10.10")


class TestUpdateWorkOrder:
    @pytest.mark.asyncio
    async def test_status_flow_stamps_once(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)

        started = await service.update_work_order(
            db_session, tenant_ctx, order.id, WorkOrderUpdate(status=WorkOrderStatus.IN_PROGRESS)
        )
        first_start = started.data.started_at
        assert first_start is not None

        # Re-read the stamps from the database rather than the identity map
        db_session.expire_all()
        reloaded = await service.get_work_order(db_session, tenant_ctx, order.id)
        assert reloaded.data.started_at == first_start
        assert reloaded.data.started_at.utcoffset() == timedelta(0)

        await service.update_work_order(
            db_session, tenant_ctx, order.id, WorkOrderUpdate(status=WorkOrderStatus.ON_HOLD)
        )
        resumed = await service.update_work_order(
            db_session, tenant_ctx, order.id, WorkOrderUpdate(status=WorkOrderStatus.IN_PROGRESS)
        )
        assert resumed.data.started_at == first_start

        done = await service.update_work_order(
            db_session, tenant_ctx, order.id, WorkOrderUpdate(status=WorkOrderStatus.COMPLETED)
        )
        assert done.data.status == WorkOrderStatus.COMPLETED
        assert done.data.completed_at is not None

    @pytest.mark.asyncio
    async def test_first_completion_counts_a_visit(
        self, service, db_session, tenant_ctx, customer, location
    ):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        complete = WorkOrderUpdate(status=WorkOrderStatus.COMPLETED)

        await service.update_work_order(db_session, tenant_ctx, order.id, complete)
        await service.update_work_order(db_session, tenant_ctx, order.id, complete)

        assert customer.total_visits == 1
        assert customer.last_visit_at is not None

    @pytest.mark.asyncio
    async def test_invalid_status(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        with pytest.raises(ValidationError) as exc_info:
            await service.update_work_order(
                db_session, tenant_ctx, order.id, WorkOrderUpdate(status="Finished")
            )
        assert exc_info.value.errors == [
            "Invalid status. Valid statuses are: Draft, InProgress, OnHold, Completed, Cancelled"
        ]

    @pytest.mark.asyncio
    async def test_blank_text_keeps_stored_values(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(
            service, db_session, tenant_ctx, customer, location,
            description="Replace filter", internal_notes="Gate code 1234",
        )
        assignee = uuid.uuid4()
        result = await service.update_work_order(
            db_session,
            tenant_ctx,
            order.id,
            WorkOrderUpdate(
                status=WorkOrderStatus.IN_PROGRESS,
                description="  ",
                assigned_to_user_id=assignee,
            ),
        )
        assert result.data.description == "Replace filter"
        assert result.data.internal_notes == "Gate code 1234"
        assert result.data.assigned_to_user_id == assignee


class TestListAndDelete:
    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, service, db_session, tenant_ctx, customer, location):
        draft = await _open(service, db_session, tenant_ctx, customer, location)
        active = await _open(service, db_session, tenant_ctx, customer, location)
        await service.update_work_order(
            db_session, tenant_ctx, active.id, WorkOrderUpdate(status=WorkOrderStatus.IN_PROGRESS)
        )

        result = await service.list_work_orders(
            db_session, tenant_ctx, PageRequest(), status=WorkOrderStatus.DRAFT
        )
        assert [w.id for w in result.data.items] == [draft.id]

    @pytest.mark.asyncio
    async def test_list_projects_totals_from_items(
        self, service, db_session, tenant_ctx, customer, location
    ):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        await service.add_work_order_item(db_session, tenant_ctx, order.id, _item("3", "10.00", "10"))

        result = await service.list_work_orders(db_session, tenant_ctx, PageRequest())
        assert result.data.items[0].total_amount == Decimal("33.00")

    @pytest.mark.asyncio
    async def test_delete(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        result = await service.delete_work_order(db_session, tenant_ctx, order.id)
        assert result.data is True

        with pytest.raises(NotFoundError):
            await service.load(db_session, tenant_ctx, order.id)

    @pytest.mark.asyncio
    async def test_delete_invoiced_refused(self, service, db_session, tenant_ctx, customer, location):
        order = await _open(service, db_session, tenant_ctx, customer, location)
        work_order = await service.load(db_session, tenant_ctx, order.id)
        work_order.invoice_id = uuid.uuid4()

        with pytest.raises(BusinessRuleError) as exc_info:
            await service.delete_work_order(db_session, tenant_ctx, order.id)
        assert exc_info.value.message == "Cannot delete work order that has an associated invoice"
