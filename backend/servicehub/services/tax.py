"""
ServiceHub Backend — Tax & Total Calculator
=============================================

What:  Exact decimal arithmetic for line-item totals and document totals.
How:   Pure functions over decimal.Decimal. Floats are converted through str()
       so binary representation noise never enters a money value.
Who:   Work order, invoice and payment services; list projections.

Conventions:
    - tax_rate is a whole-number percentage (8 means 8%) and is divided by
      100 here, every time. Stored values are never pre-divided.
    - No rounding happens inside the calculator. round_money() is applied at
      persistence and display boundaries only.
    - Negative inputs are not rejected at this layer; command validators do that.

Example:
    >>> item_total(2, Decimal("50.00"), 8)
    Decimal('108.0000')
    >>> tax_amount(2, Decimal("50.00"), 8)
    Decimal('8.0000')
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, NamedTuple, Optional, Union

Numeric = Union[int, float, str, Decimal]

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


class LineItem(NamedTuple):
    """Minimal line shape; ORM items with the same attributes work too."""

    quantity: Numeric
    unit_price: Numeric
    tax_rate: Numeric = 0


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def to_decimal(value: Optional[Numeric]) -> Decimal:
    """Convert a numeric value to Decimal (None counts as zero)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Optional[Numeric]) -> Decimal:
    """Round to cents using ROUND_HALF_UP."""
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def decimal_fraction(rate_percent: Numeric) -> Decimal:
    """8 → 0.08"""
    return to_decimal(rate_percent) / HUNDRED


def line_subtotal(quantity: Numeric, unit_price: Numeric) -> Decimal:
    return to_decimal(quantity) * to_decimal(unit_price)


def tax_amount(quantity: Numeric, unit_price: Numeric, rate_percent: Numeric) -> Decimal:
    """Tax portion of one line: q * p * r/100."""
    return line_subtotal(quantity, unit_price) * decimal_fraction(rate_percent)


def item_total(quantity: Numeric, unit_price: Numeric, rate_percent: Numeric) -> Decimal:
    """Tax-inclusive line total: q * p * (1 + r/100)."""
    return line_subtotal(quantity, unit_price) * (1 + decimal_fraction(rate_percent))


def aggregate_total(items: Optional[Iterable[Any]], stored_total: Numeric = ZERO) -> Decimal:
    """
    Sum of item_total over the given lines.

    When there are no lines (None or empty) the previously stored total is
    returned unchanged rather than zero, so a header-only record keeps the
    amount it was saved with.
    """
    lines = list(items) if items is not None else []
    if not lines:
        return to_decimal(stored_total)
    return sum(
        (item_total(line.quantity, line.unit_price, line.tax_rate) for line in lines),
        ZERO,
    )


def summarize(items: Iterable[Any], discount: Numeric = ZERO) -> Totals:
    """
    Document totals: subtotal, tax, discount and total = subtotal + tax - discount.

    Used by invoices, whose header stores all four figures.
    """
    subtotal = ZERO
    tax = ZERO
    for line in items:
        subtotal += line_subtotal(line.quantity, line.unit_price)
        tax += tax_amount(line.quantity, line.unit_price, line.tax_rate)
    discount_value = to_decimal(discount)
    return Totals(
        subtotal=subtotal,
        tax=tax,
        discount=discount_value,
        total=subtotal + tax - discount_value,
    )
