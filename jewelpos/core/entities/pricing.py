"""Pricing value objects."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def quantize_money(value: Decimal, places: int = 2) -> Decimal:
    """Round a monetary amount half-up to a fixed number of places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class PricingLine(BaseModel):
    """One cart line as seen by the pricing calculator."""

    model_config = ConfigDict(frozen=True)

    unit_price: Decimal
    quantity: int
    discount_percentage: Decimal = ZERO


class PricingBreakdown(BaseModel):
    """
    Document totals in the order they are derived.

    Values are exact until ``rounded()`` is called, which is the only
    rounding point before persistence or display.
    """

    model_config = ConfigDict(frozen=True)

    line_totals: list[Decimal] = Field(default_factory=list)
    subtotal: Decimal = ZERO
    discount_percentage: Decimal = ZERO
    discount_amount: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    tax_percentage: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO

    def rounded(self, places: int = 2) -> "PricingBreakdown":
        """
        Quantize to ``places`` fraction digits.

        Line totals are rounded first and the subtotal is their sum, so
        persisted line items always add up to the header. Discount and tax
        are then taken from that subtotal with the same percentages and
        rounded, and ``total == subtotal - discount_amount + tax_amount``
        holds exactly.
        """
        line_totals = [quantize_money(t, places) for t in self.line_totals]
        if line_totals:
            subtotal = sum(line_totals, ZERO)
        else:
            subtotal = quantize_money(self.subtotal, places)
        discount_amount = quantize_money(subtotal * self.discount_percentage / HUNDRED, places)
        taxable_amount = subtotal - discount_amount
        tax_amount = quantize_money(taxable_amount * self.tax_percentage / HUNDRED, places)
        return PricingBreakdown(
            line_totals=line_totals,
            subtotal=subtotal,
            discount_percentage=self.discount_percentage,
            discount_amount=discount_amount,
            taxable_amount=taxable_amount,
            tax_percentage=self.tax_percentage,
            tax_amount=tax_amount,
            total=taxable_amount + tax_amount,
        )
