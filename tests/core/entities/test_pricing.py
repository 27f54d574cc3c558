"""Tests for pricing value objects."""

from decimal import Decimal

from jewelpos.core.entities import PricingBreakdown, PricingLine, quantize_money
from jewelpos.core.services import calculate_pricing


class TestQuantizeMoney:
    def test_rounds_half_up(self):
        assert quantize_money(Decimal("2.345")) == Decimal("2.35")
        assert quantize_money(Decimal("2.344")) == Decimal("2.34")

    def test_custom_places(self):
        assert quantize_money(Decimal("1.5"), places=0) == Decimal("2")


class TestPricingBreakdownRounded:
    def test_total_derived_from_rounded_parts(self):
        exact = PricingBreakdown(
            line_totals=[Decimal("33.335"), Decimal("33.335")],
            subtotal=Decimal("66.670"),
            discount_percentage=Decimal("0"),
            discount_amount=Decimal("0"),
            taxable_amount=Decimal("66.670"),
            tax_percentage=Decimal("7.5"),
            tax_amount=Decimal("5.00025"),
            total=Decimal("71.67025"),
        )
        rounded = exact.rounded()
        assert rounded.line_totals == [Decimal("33.34"), Decimal("33.34")]
        assert rounded.subtotal == Decimal("66.68")
        assert rounded.tax_amount == Decimal("5.00")
        assert rounded.total == rounded.subtotal - rounded.discount_amount + rounded.tax_amount

    def test_subtotal_is_sum_of_rounded_lines(self):
        lines = [PricingLine(unit_price=Decimal("0.015"), quantity=1)] * 2
        rounded = calculate_pricing(lines).rounded()

        assert rounded.line_totals == [Decimal("0.02"), Decimal("0.02")]
        assert rounded.subtotal == sum(rounded.line_totals)
        assert rounded.total == Decimal("0.04")

    def test_discount_and_tax_follow_rounded_subtotal(self):
        lines = [PricingLine(unit_price=Decimal("10.005"), quantity=1)] * 3
        rounded = calculate_pricing(lines, "10", "5").rounded()

        assert rounded.subtotal == Decimal("30.03")
        assert rounded.discount_amount == Decimal("3.00")
        assert rounded.taxable_amount == Decimal("27.03")
        assert rounded.tax_amount == Decimal("1.35")
        assert rounded.total == Decimal("28.38")

    def test_without_lines_rounds_subtotal(self):
        rounded = PricingBreakdown(subtotal=Decimal("12.345")).rounded()
        assert rounded.subtotal == Decimal("12.35")
        assert rounded.total == Decimal("12.35")

    def test_percentages_untouched(self):
        exact = PricingBreakdown(discount_percentage=Decimal("2.5"), tax_percentage=Decimal("18"))
        rounded = exact.rounded()
        assert rounded.discount_percentage == Decimal("2.5")
        assert rounded.tax_percentage == Decimal("18")
