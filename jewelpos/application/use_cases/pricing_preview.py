"""Pricing Preview Use Case: live cart totals without persistence."""

from jewelpos.application.dto.requests import PricingPreviewRequest
from jewelpos.application.dto.responses import (
    PricingBreakdownResponse,
    PricingPreviewResponse,
)
from jewelpos.config import get_settings
from jewelpos.core.entities.pricing import PricingBreakdown, PricingLine
from jewelpos.core.services.pricing_calculator import calculate_pricing


def _breakdown_response(breakdown: PricingBreakdown) -> PricingBreakdownResponse:
    return PricingBreakdownResponse(**breakdown.model_dump())


class PricingPreviewUseCase:
    """Price a cart snapshot the same way checkout will."""

    def __init__(self, money_places: int | None = None):
        self._places = money_places if money_places is not None else get_settings().sales.money_places

    def execute(self, request: PricingPreviewRequest) -> PricingBreakdown:
        """Return the exact breakdown. Raises InvalidInputError on bad input."""
        return calculate_pricing(
            [
                PricingLine(
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    discount_percentage=line.discount_percentage,
                )
                for line in request.items
            ],
            request.discount_percentage,
            request.tax_percentage,
        )

    def to_response(self, breakdown: PricingBreakdown) -> PricingPreviewResponse:
        return PricingPreviewResponse(
            rounded=_breakdown_response(breakdown.rounded(self._places)),
            exact=_breakdown_response(breakdown),
        )
