"""
ServiceHub Backend — Command Validator Tests
==============================================
"""

import uuid
from decimal import Decimal

import pytest

from servicehub.exceptions import ValidationError
from servicehub.schemas.customer import CustomerWrite
from servicehub.schemas.location import LocationWrite
from servicehub.schemas.payment import PaymentCreate
from servicehub.services.validators import (
    ensure_valid,
    is_blank,
    validate_customer,
    validate_location,
    validate_payment,
    validate_work_order_item,
)
from servicehub.schemas.work_order import WorkOrderItemCreate


class TestValidators:
    def test_valid_customer(self):
        assert validate_customer(CustomerWrite(first_name="A", last_name="B", email="a@b.co")) == []

    def test_name_length(self):
        errors = validate_customer(CustomerWrite(first_name="x" * 101, last_name="B"))
        assert errors == ["First name must not exceed 100 characters"]

    def test_phone_length(self):
        errors = validate_customer(CustomerWrite(first_name="A", last_name="B", phone="1" * 21))
        assert errors == ["Phone must not exceed 20 characters"]

    def test_empty_email_allowed(self):
        assert validate_location(LocationWrite(name="Depot", email="")) == []

    def test_invalid_email(self):
        assert validate_location(LocationWrite(name="Depot", email="depot@")) == ["Invalid email format"]

    def test_item_type(self):
        errors = validate_work_order_item(
            WorkOrderItemCreate(item_type="Gadget", description="x", quantity=Decimal("1"))
        )
        assert errors == ["Invalid item type. Valid types are: Service, Product, Labor"]

    @pytest.mark.parametrize("amount,valid", [("0.004", False), ("0.005", True), ("0.01", True)])
    def test_payment_amount_checked_at_cent_precision(self, amount, valid):
        errors = validate_payment(
            PaymentCreate(invoice_id=uuid.uuid4(), amount=Decimal(amount), payment_method="Cash")
        )
        assert (errors == []) is valid

    @pytest.mark.parametrize("quantity,valid", [("0.004", False), ("0.005", True), ("2", True)])
    def test_item_quantity_checked_at_cent_precision(self, quantity, valid):
        errors = validate_work_order_item(
            WorkOrderItemCreate(description="Labour", quantity=Decimal(quantity))
        )
        assert (errors == []) is valid

    @pytest.mark.parametrize("value,expected", [(None, True), ("", True), ("  ", True), ("a", False)])
    def test_is_blank(self, value, expected):
        assert is_blank(value) is expected

    def test_ensure_valid(self):
        ensure_valid([])
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(["one", "two"])
        assert exc_info.value.status_code == 400
        assert exc_info.value.errors == ["one", "two"]
