"""
ServiceHub Backend — Invoice & Payment Service Tests
======================================================

What we test:
    ✅ Invoicing preconditions and their messages
    ✅ Invoice totals copied from live work order items
    ✅ Payments: balance checks, invoice status, customer spend
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest

from servicehub.exceptions import BusinessRuleError, NotFoundError, ValidationError
from servicehub.models.invoice import InvoiceStatus
from servicehub.models.work_order import WorkOrderStatus
from servicehub.schemas.payment import PaymentCreate
from servicehub.schemas.work_order import WorkOrderCreate, WorkOrderItemCreate, WorkOrderUpdate
from servicehub.services.invoice_service import InvoiceService
from servicehub.services.paging import PageRequest
from servicehub.services.payment_service import PaymentService, balance_exceeded_message
from servicehub.services.work_order_service import work_order_service
from servicehub.tenancy import TENANT_CONTEXT_MISSING


async def _work_order(db_session, ctx, customer, location, lines=(), complete=True):
    created = await work_order_service.create_work_order(
        db_session, ctx, WorkOrderCreate(customer_id=customer.id, location_id=location.id)
    )
    order_id = created.data.id
    for quantity, unit_price, tax_rate in lines:
        await work_order_service.add_work_order_item(
            db_session,
            ctx,
            order_id,
            WorkOrderItemCreate(
                description="Line",
                quantity=Decimal(quantity),
                unit_price=Decimal(unit_price),
                tax_rate=Decimal(tax_rate),
            ),
        )
    if complete:
        await work_order_service.update_work_order(
            db_session, ctx, order_id, WorkOrderUpdate(status=WorkOrderStatus.COMPLETED)
        )
    return order_id


@pytest.fixture
def invoices():
    return InvoiceService()


@pytest.fixture
def payments():
    return PaymentService()


class TestCreateInvoice:
    @pytest.mark.asyncio
    async def test_invoice_from_completed_work_order(
        self, invoices, db_session, tenant_ctx, customer, location
    ):
        order_id = await _work_order(
            db_session, tenant_ctx, customer, location,
            lines=[("2", "50.00", "8"), ("1", "20.00", "10")],
        )
        result = await invoices.create_invoice_from_work_order(db_session, tenant_ctx, order_id)

        assert result.success is True
        assert result.message == "Invoice created successfully"
        invoice = result.data
        assert invoice.invoice_number.startswith("INV-")
        assert invoice.invoice_number.endswith("-0001")
        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.subtotal == Decimal("120.00")
        assert invoice.tax_amount == Decimal("10.00")
        assert invoice.total_amount == Decimal("130.00")
        assert invoice.balance == Decimal("130.00")
        assert invoice.customer_name == "Ada Lovelace"
        assert sorted(i.total_amount for i in invoice.items) == [Decimal("22.00"), Decimal("108.00")]
        assert invoice.due_date - invoice.invoice_date == timedelta(days=30)

        work_order = await work_order_service.load(db_session, tenant_ctx, order_id)
        assert work_order.invoice_id == invoice.id

    @pytest.mark.asyncio
    async def test_requires_completed(self, invoices, db_session, tenant_ctx, customer, location):
        order_id = await _work_order(
            db_session, tenant_ctx, customer, location, lines=[("1", "10", "0")], complete=False
        )
        with pytest.raises(BusinessRuleError) as exc_info:
            await invoices.create_invoice_from_work_order(db_session, tenant_ctx, order_id)
        assert exc_info.value.message == "Work order must be completed before creating an invoice"

    @pytest.mark.asyncio
    async def test_only_once(self, invoices, db_session, tenant_ctx, customer, location):
        order_id = await _work_order(db_session, tenant_ctx, customer, location, lines=[("1", "10", "0")])
        await invoices.create_invoice_from_work_order(db_session, tenant_ctx, order_id)

        with pytest.raises(BusinessRuleError) as exc_info:
            await invoices.create_invoice_from_work_order(db_session, tenant_ctx, order_id)
        assert exc_info.value.message == "Invoice already exists for this work order"

    @pytest.mark.asyncio
    async def test_requires_items(self, invoices, db_session, tenant_ctx, customer, location):
        order_id = await _work_order(db_session, tenant_ctx, customer, location)
        with pytest.raises(BusinessRuleError) as exc_info:
            await invoices.create_invoice_from_work_order(db_session, tenant_ctx, order_id)
        assert exc_info.value.message == (
            "Work order must have at least one item before creating an invoice"
        )

    @pytest.mark.asyncio
    async def test_other_tenant_work_order(
        self, invoices, db_session, tenant_ctx, other_tenant_ctx, customer, location
    ):
        order_id = await _work_order(db_session, tenant_ctx, customer, location, lines=[("1", "10", "0")])
        with pytest.raises(NotFoundError):
            await invoices.create_invoice_from_work_order(db_session, other_tenant_ctx, order_id)

    @pytest.mark.asyncio
    async def test_missing_tenant(self, invoices, db_session, no_tenant_ctx):
        result = await invoices.create_invoice_from_work_order(db_session, no_tenant_ctx, uuid.uuid4())
        assert result.success is False
        assert result.message == TENANT_CONTEXT_MISSING

    @pytest.mark.asyncio
    async def test_list_and_get(self, invoices, db_session, tenant_ctx, customer, location):
        order_id = await _work_order(db_session, tenant_ctx, customer, location, lines=[("1", "10", "0")])
        created = await invoices.create_invoice_from_work_order(db_session, tenant_ctx, order_id)

        listed = await invoices.list_invoices(
            db_session, tenant_ctx, PageRequest(), customer_id=customer.id, status=InvoiceStatus.DRAFT
        )
        assert [i.id for i in listed.data.items] == [created.data.id]

        fetched = await invoices.get_invoice(db_session, tenant_ctx, created.data.id)
        assert fetched.data.invoice_number == created.data.invoice_number


class TestPayments:
    async def _invoice(self, invoices, db_session, ctx, customer, location):
        order_id = await _work_order(db_session, ctx, customer, location, lines=[("2", "50.00", "8")])
        return (await invoices.create_invoice_from_work_order(db_session, ctx, order_id)).data

    @pytest.mark.asyncio
    async def test_partial_then_full(self, invoices, payments, db_session, tenant_ctx, customer, location):
        invoice = await self._invoice(invoices, db_session, tenant_ctx, customer, location)

        first = await payments.create_payment(
            db_session,
            tenant_ctx,
            PaymentCreate(invoice_id=invoice.id, amount=Decimal("40.00"), payment_method="Cash"),
        )
        assert first.message == "Payment recorded successfully"
        assert first.data.payment_number.startswith("PAY-")
        fetched = (await invoices.get_invoice(db_session, tenant_ctx, invoice.id)).data
        assert fetched.status == InvoiceStatus.PARTIALLY_PAID
        assert fetched.balance == Decimal("68.00")

        await payments.create_payment(
            db_session,
            tenant_ctx,
            PaymentCreate(invoice_id=invoice.id, amount=Decimal("68.00"), payment_method="Card"),
        )
        fetched = (await invoices.get_invoice(db_session, tenant_ctx, invoice.id)).data
        assert fetched.status == InvoiceStatus.PAID
        assert fetched.paid_amount == Decimal("108.00")
        assert customer.total_spent == Decimal("108.00")

    @pytest.mark.asyncio
    async def test_overpayment_rejected(self, invoices, payments, db_session, tenant_ctx, customer, location):
        invoice = await self._invoice(invoices, db_session, tenant_ctx, customer, location)
        await payments.create_payment(
            db_session,
            tenant_ctx,
            PaymentCreate(invoice_id=invoice.id, amount=Decimal("100.00"), payment_method="Cash"),
        )

        with pytest.raises(BusinessRuleError) as exc_info:
            await payments.create_payment(
                db_session,
                tenant_ctx,
                PaymentCreate(invoice_id=invoice.id, amount=Decimal("10.00"), payment_method="Cash"),
            )
        assert exc_info.value.message == (
            "Payment amount exceeds invoice balance. Remaining balance: $8.00"
        )

    @pytest.mark.asyncio
    async def test_validation(self, payments, db_session, tenant_ctx):
        with pytest.raises(ValidationError) as exc_info:
            await payments.create_payment(
                db_session,
                tenant_ctx,
                PaymentCreate(invoice_id=uuid.uuid4(), amount=Decimal("0"), payment_method="Barter"),
            )
        assert exc_info.value.errors[0] == "Payment amount must be greater than 0"
        assert exc_info.value.errors[1].startswith("Invalid payment method")

    @pytest.mark.asyncio
    async def test_sub_cent_amount_rejected(
        self, invoices, payments, db_session, tenant_ctx, customer, location
    ):
        invoice = await self._invoice(invoices, db_session, tenant_ctx, customer, location)
        with pytest.raises(ValidationError) as exc_info:
            await payments.create_payment(
                db_session,
                tenant_ctx,
                PaymentCreate(invoice_id=invoice.id, amount=Decimal("0.004"), payment_method="Cash"),
            )
        assert exc_info.value.errors == ["Payment amount must be greater than 0"]

        listed = await payments.list_payments(db_session, tenant_ctx, PageRequest(), invoice_id=invoice.id)
        assert listed.data.total_count == 0
        fetched = (await invoices.get_invoice(db_session, tenant_ctx, invoice.id)).data
        assert fetched.paid_amount == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_amount_rounded_half_up_to_cents(
        self, invoices, payments, db_session, tenant_ctx, customer, location
    ):
        invoice = await self._invoice(invoices, db_session, tenant_ctx, customer, location)
        result = await payments.create_payment(
            db_session,
            tenant_ctx,
            PaymentCreate(invoice_id=invoice.id, amount=Decimal("0.005"), payment_method="Cash"),
        )
        assert result.data.amount == Decimal("0.01")

    @pytest.mark.asyncio
    async def test_unknown_invoice(self, payments, db_session, tenant_ctx):
        with pytest.raises(NotFoundError):
            await payments.create_payment(
                db_session,
                tenant_ctx,
                PaymentCreate(invoice_id=uuid.uuid4(), amount=Decimal("5"), payment_method="Cash"),
            )

    @pytest.mark.asyncio
    async def test_list_filters_by_method(
        self, invoices, payments, db_session, tenant_ctx, customer, location
    ):
        invoice = await self._invoice(invoices, db_session, tenant_ctx, customer, location)
        for amount, method in [("10", "Cash"), ("20", "Card"), ("30", "Cash")]:
            await payments.create_payment(
                db_session,
                tenant_ctx,
                PaymentCreate(invoice_id=invoice.id, amount=Decimal(amount), payment_method=method),
            )

        result = await payments.list_payments(
            db_session, tenant_ctx, PageRequest(), invoice_id=invoice.id, payment_method="Cash"
        )
        assert result.data.total_count == 2
        assert sorted(p.amount for p in result.data.items) == [Decimal("10.00"), Decimal("30.00")]

    def test_balance_message_rounds_to_cents(self):
        assert balance_exceeded_message(Decimal("8.005")) == (
            "Payment amount exceeds invoice balance. Remaining balance: $8.01"
        )
