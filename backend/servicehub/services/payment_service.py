"""
ServiceHub Backend — Payment Service
======================================

What:  Payments against invoices.

create_payment:
    1. The invoice must belong to the caller's tenant (else 404)
    2. already_paid = Σ amount of the invoice's live payments
    3. already_paid + amount > invoice total → 400 with the remaining balance
    4. Record PAY-YYYYMMDD-NNNN, update invoice.paid_amount, and move the
       invoice to Paid (fully paid) or PartiallyPaid
    5. Add the amount to the customer's total_spent
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from servicehub.exceptions import BusinessRuleError, NotFoundError
from servicehub.models.base import utcnow
from servicehub.models.invoice import Invoice, InvoiceStatus
from servicehub.models.payment import Payment
from servicehub.schemas.common import ApiResponse
from servicehub.schemas.payment import PaymentCreate, PaymentResponse
from servicehub.services.numbering import PAYMENT_PREFIX, next_document_number
from servicehub.services.paging import PageRequest, fetch_tenant_page, tenant_missing
from servicehub.services.repository import FieldFilter, QueryCriteria, SortKey, TenantRepository
from servicehub.services.tax import round_money
from servicehub.services.validators import ensure_valid, validate_payment
from servicehub.tenancy import RequestContext

logger = logging.getLogger(__name__)

invoices = TenantRepository(Invoice)


def to_payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse.model_validate(payment)


def balance_exceeded_message(remaining: Decimal) -> str:
    return f"Payment amount exceeds invoice balance. Remaining balance: ${round_money(remaining):.2f}"


class PaymentService:
    repository = TenantRepository(Payment)

    async def list_payments(
        self,
        db: AsyncSession,
        ctx: RequestContext,
        page: PageRequest,
        invoice_id: Optional[uuid.UUID] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        payment_method: Optional[str] = None,
    ) -> ApiResponse:
        criteria = QueryCriteria(
            filters=[
                FieldFilter("invoice_id", invoice_id),
                FieldFilter("payment_date", start_date, op="ge"),
                FieldFilter("payment_date", end_date, op="le"),
                FieldFilter("payment_method", payment_method),
            ],
            sort=SortKey("payment_date", descending=True),
        )
        return await fetch_tenant_page(db, ctx, self.repository, criteria, page, to_payment_response)

    async def create_payment(
        self, db: AsyncSession, ctx: RequestContext, data: PaymentCreate
    ) -> ApiResponse:
        """
        Record a payment and update the invoice.

        Raises:
            ValidationError: amount <= 0 or unknown payment method
            NotFoundError: invoice missing from the tenant
            BusinessRuleError: payment exceeds the remaining balance
        """
        if not ctx.has_tenant:
            return tenant_missing("Create payment")
        ensure_valid(validate_payment(data))

        invoice = await invoices.get(
            db, ctx.tenant_id, data.invoice_id, options=(selectinload(Invoice.customer),)
        )
        if invoice is None:
            raise NotFoundError(resource="Invoice", resource_id=str(data.invoice_id))

        existing = await self.repository.find_all(
            db,
            ctx.tenant_id,
            QueryCriteria(filters=[FieldFilter("invoice_id", invoice.id)]),
        )
        already_paid = sum((p.amount for p in existing), Decimal("0"))
        amount = round_money(data.amount)

        if already_paid + amount > invoice.total_amount:
            raise BusinessRuleError(
                balance_exceeded_message(invoice.total_amount - already_paid),
                context={"invoice_id": str(invoice.id), "amount": str(amount)},
            )

        now = utcnow()
        number = await next_document_number(db, self.repository, ctx.tenant_id, PAYMENT_PREFIX, now)
        payment = Payment(
            invoice_id=invoice.id,
            payment_number=number,
            payment_date=data.payment_date or now,
            amount=amount,
            payment_method=data.payment_method,
            reference_number=data.reference_number,
            notes=data.notes,
            processed_by_user_id=ctx.user_id,
        )
        await self.repository.add(db, ctx.tenant_id, payment)

        invoice.paid_amount = already_paid + amount
        if invoice.paid_amount >= invoice.total_amount:
            invoice.status = InvoiceStatus.PAID
        elif invoice.paid_amount > 0:
            invoice.status = InvoiceStatus.PARTIALLY_PAID
        if invoice.customer is not None:
            invoice.customer.total_spent = (invoice.customer.total_spent or Decimal("0")) + amount
        await invoices.save(db, invoice)

        logger.info(
            "Payment %s of %s recorded on invoice %s (%s)",
            number,
            amount,
            invoice.invoice_number,
            invoice.status,
        )
        return ApiResponse.ok(to_payment_response(payment), "Payment recorded successfully")


payment_service = PaymentService()
