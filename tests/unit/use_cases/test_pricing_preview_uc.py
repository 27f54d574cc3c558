"""Tests for PricingPreviewUseCase and GetSaleUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from jewelpos.application.dto.requests import PricingLineRequest, PricingPreviewRequest
from jewelpos.application.use_cases.get_sale import GetSaleUseCase
from jewelpos.application.use_cases.pricing_preview import PricingPreviewUseCase
from jewelpos.core.exceptions import InvalidInputError, SaleNotFoundError


class TestPricingPreview:
    def test_breakdown(self):
        use_case = PricingPreviewUseCase(money_places=2)
        request = PricingPreviewRequest(
            items=[
                PricingLineRequest(
                    unit_price=Decimal("100"), quantity=2, discount_percentage=Decimal("10")
                )
            ],
            discount_percentage=Decimal("5"),
            tax_percentage=Decimal("3"),
        )

        breakdown = use_case.execute(request)

        assert breakdown.subtotal == Decimal("180")
        assert breakdown.taxable_amount == Decimal("171")
        assert breakdown.total.quantize(Decimal("0.01")) == Decimal("176.13")

    def test_rounded_and_exact(self):
        use_case = PricingPreviewUseCase(money_places=2)
        request = PricingPreviewRequest(
            items=[PricingLineRequest(unit_price=Decimal("33.335"), quantity=1)]
        )

        response = use_case.to_response(use_case.execute(request))

        assert response.exact.total == Decimal("33.335")
        assert response.rounded.total == Decimal("33.34")

    def test_empty_cart_is_zero(self):
        breakdown = PricingPreviewUseCase(money_places=2).execute(PricingPreviewRequest())
        assert breakdown.total == Decimal("0")

    def test_invalid_input(self):
        request = PricingPreviewRequest.model_construct(
            items=[PricingLineRequest.model_construct(
                unit_price=Decimal("-1"), quantity=1, discount_percentage=Decimal("0")
            )],
            discount_percentage=Decimal("0"),
            tax_percentage=Decimal("0"),
        )
        with pytest.raises(InvalidInputError):
            PricingPreviewUseCase(money_places=2).execute(request)


class TestGetSale:
    async def test_found(self, make_memo, today):
        store = AsyncMock()
        store.get_by_id.return_value = make_memo()
        use_case = GetSaleUseCase(sale_store=store)

        sale = await use_case.execute(10)

        assert sale.id == 10
        store.get_by_id.assert_awaited_once_with(10, with_items=True)

    async def test_not_found(self):
        store = AsyncMock()
        store.get_by_id.return_value = None
        with pytest.raises(SaleNotFoundError):
            await GetSaleUseCase(sale_store=store).execute(404)
