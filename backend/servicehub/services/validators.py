"""
ServiceHub Backend — Command Validators
=========================================

What:  One explicit validation function per command. Each returns the list
       of field-level messages (empty when valid); `ensure_valid` turns a
       non-empty list into a ValidationError (HTTP 400, messages in `errors`).
How:   Plain functions over the request schemas, so every violation in a
       request is reported at once instead of failing on the first.
"""

import re
from decimal import Decimal
from typing import List, Optional

from servicehub.exceptions import ValidationError
from servicehub.models.appointment import AppointmentStatus
from servicehub.models.base import as_utc
from servicehub.models.payment import PaymentMethod
from servicehub.models.work_order import ItemType, WorkOrderStatus
from servicehub.schemas.appointment import AppointmentStatusUpdate, AppointmentWrite
from servicehub.schemas.catalog import ServiceWrite
from servicehub.schemas.customer import CustomerWrite
from servicehub.schemas.location import LocationWrite
from servicehub.schemas.payment import PaymentCreate
from servicehub.schemas.product import ProductWrite
from servicehub.schemas.work_order import WorkOrderItemCreate, WorkOrderUpdate
from servicehub.services.tax import round_money

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _required(errors: List[str], value: Optional[str], label: str, max_length: int) -> None:
    if is_blank(value):
        errors.append(f"{label} is required")
    elif len(value) > max_length:
        errors.append(f"{label} must not exceed {max_length} characters")


def _max_length(errors: List[str], value: Optional[str], label: str, max_length: int) -> None:
    if value is not None and len(value) > max_length:
        errors.append(f"{label} must not exceed {max_length} characters")


def _email(errors: List[str], value: Optional[str]) -> None:
    # Empty means "no email"; only a supplied address is checked
    if value and not EMAIL_PATTERN.match(value.strip()):
        errors.append("Invalid email format")


def _tax_rate(errors: List[str], value: Decimal) -> None:
    if value < 0 or value > 100:
        errors.append("Tax rate must be between 0 and 100")


def ensure_valid(errors: List[str]) -> None:
    if errors:
        raise ValidationError(messages=errors)


# ══════════════════════════════════════════════════════════════════════════
# Per-command validators
# ══════════════════════════════════════════════════════════════════════════


def validate_customer(data: CustomerWrite) -> List[str]:
    errors: List[str] = []
    _required(errors, data.first_name, "First name", 100)
    _required(errors, data.last_name, "Last name", 100)
    _email(errors, data.email)
    _max_length(errors, data.phone, "Phone", 20)
    _max_length(errors, data.mobile, "Mobile", 20)
    return errors


def validate_location(data: LocationWrite) -> List[str]:
    errors: List[str] = []
    _required(errors, data.name, "Location name", 200)
    _email(errors, data.email)
    _max_length(errors, data.phone, "Phone", 20)
    return errors


def validate_service(data: ServiceWrite) -> List[str]:
    errors: List[str] = []
    _required(errors, data.name, "Service name", 200)
    if data.price < 0:
        errors.append("Price must be greater than or equal to 0")
    if data.duration_minutes <= 0:
        errors.append("Duration must be greater than 0")
    _tax_rate(errors, data.tax_rate)
    return errors


def validate_work_order_update(data: WorkOrderUpdate) -> List[str]:
    if data.status not in WorkOrderStatus.ALL:
        return [f"Invalid status. Valid statuses are: {', '.join(WorkOrderStatus.ALL)}"]
    return []


def validate_work_order_item(data: WorkOrderItemCreate) -> List[str]:
    errors: List[str] = []
    if data.item_type not in ItemType.ALL:
        errors.append(f"Invalid item type. Valid types are: {', '.join(ItemType.ALL)}")
    _required(errors, data.description, "Description", 500)
    # Checked at the stored precision: 0.004 is stored as 0.00
    if round_money(data.quantity) <= 0:
        errors.append("Quantity must be greater than 0")
    if round_money(data.unit_price) < 0:
        errors.append("Unit price cannot be negative")
    _tax_rate(errors, data.tax_rate)
    return errors


def validate_payment(data: PaymentCreate) -> List[str]:
    errors: List[str] = []
    if round_money(data.amount) <= 0:
        errors.append("Payment amount must be greater than 0")
    if data.payment_method not in PaymentMethod.ALL:
        errors.append(
            f"Invalid payment method. Valid methods are: {', '.join(PaymentMethod.ALL)}"
        )
    _max_length(errors, data.reference_number, "Reference number", 100)
    return errors


def validate_product(data: ProductWrite, creating: bool = True) -> List[str]:
    errors: List[str] = []
    _required(errors, data.name, "Product name", 200)
    if creating and data.location_id is None:
        errors.append("Location is required")
    _max_length(errors, data.sku, "SKU", 100)
    if round_money(data.unit_price) < 0:
        errors.append("Unit price must be greater than or equal to 0")
    if round_money(data.cost_price) < 0:
        errors.append("Cost price must be greater than or equal to 0")
    if data.stock_quantity < 0:
        errors.append("Stock quantity must be greater than or equal to 0")
    if data.low_stock_threshold < 0:
        errors.append("Low stock threshold must be greater than or equal to 0")
    return errors


def validate_appointment(data: AppointmentWrite) -> List[str]:
    errors: List[str] = []
    if as_utc(data.scheduled_end) <= as_utc(data.scheduled_start):
        errors.append("Scheduled end must be after scheduled start")
    return errors


def validate_appointment_status(data: AppointmentStatusUpdate) -> List[str]:
    if data.status not in AppointmentStatus.ALL:
        return [f"Invalid status. Valid statuses are: {', '.join(AppointmentStatus.ALL)}"]
    return []
