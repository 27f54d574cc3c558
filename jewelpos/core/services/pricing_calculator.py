"""
Pricing calculator.

Turns cart lines plus a document discount and tax rate into a totals
breakdown. Pure: no I/O, no rounding (see ``PricingBreakdown.rounded``).

Order of operations:
    1. line_total = unit_price * quantity * (1 - line_discount / 100)
    2. subtotal = sum(line_total)
    3. discount_amount = subtotal * document_discount / 100
    4. taxable_amount = subtotal - discount_amount
    5. tax_amount = taxable_amount * tax / 100
    6. total = taxable_amount + tax_amount
"""

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from jewelpos.core.entities.pricing import HUNDRED, ZERO, PricingBreakdown, PricingLine
from jewelpos.core.exceptions import InvalidInputError


def _as_decimal(field: str, value: object) -> Decimal:
    if isinstance(value, float):
        # str() keeps the short repr (0.1 -> "0.1") instead of the binary expansion
        value = str(value)
    try:
        result = Decimal(value)  # type: ignore[arg-type]
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(field, "not a decimal number", value) from None
    if not result.is_finite():
        raise InvalidInputError(field, "must be finite", value)
    return result


def validate_percentage(field: str, value: object) -> Decimal:
    """Coerce to Decimal and require 0 <= value <= 100."""
    pct = _as_decimal(field, value)
    if pct < ZERO or pct > HUNDRED:
        raise InvalidInputError(field, "must be between 0 and 100", value)
    return pct


def validate_line(line: PricingLine, index: int = 0) -> PricingLine:
    """Check a single pricing line, raising InvalidInputError."""
    prefix = f"items[{index}]"
    unit_price = _as_decimal(f"{prefix}.unit_price", line.unit_price)
    if unit_price < ZERO:
        raise InvalidInputError(f"{prefix}.unit_price", "must not be negative", unit_price)
    if isinstance(line.quantity, bool) or not isinstance(line.quantity, int):
        raise InvalidInputError(f"{prefix}.quantity", "must be an integer", line.quantity)
    if line.quantity <= 0:
        raise InvalidInputError(f"{prefix}.quantity", "must be positive", line.quantity)
    validate_percentage(f"{prefix}.discount_percentage", line.discount_percentage)
    return line


def line_total(line: PricingLine) -> Decimal:
    """Exact net total of one line after its own discount."""
    return (
        line.unit_price
        * line.quantity
        * (1 - line.discount_percentage / HUNDRED)
    )


def calculate_pricing(
    lines: Iterable[PricingLine],
    discount_percentage: Decimal | int | str = ZERO,
    tax_percentage: Decimal | int | str = ZERO,
) -> PricingBreakdown:
    """
    Compute the exact pricing breakdown for a cart.

    An empty cart prices to zero; rejecting empty carts is the caller's job.

    Raises:
        InvalidInputError: negative price, non-positive quantity or a
            percentage outside [0, 100]
    """
    doc_discount = validate_percentage("discount_percentage", discount_percentage)
    tax = validate_percentage("tax_percentage", tax_percentage)

    totals: list[Decimal] = []
    for index, line in enumerate(lines):
        validate_line(line, index)
        totals.append(line_total(line))

    subtotal = sum(totals, ZERO)
    discount_amount = subtotal * doc_discount / HUNDRED
    taxable_amount = subtotal - discount_amount
    tax_amount = taxable_amount * tax / HUNDRED

    return PricingBreakdown(
        line_totals=totals,
        subtotal=subtotal,
        discount_percentage=doc_discount,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_percentage=tax,
        tax_amount=tax_amount,
        total=taxable_amount + tax_amount,
    )
