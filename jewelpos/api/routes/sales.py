"""Checkout and sale document endpoints."""

from fastapi import APIRouter, Depends, status

from jewelpos.api.dependencies import (
    get_checkout_use_case,
    get_pricing_preview_use_case,
    get_sale_use_case,
)
from jewelpos.application.dto.requests import CheckoutRequest, PricingPreviewRequest
from jewelpos.application.dto.responses import (
    ErrorResponse,
    PricingPreviewResponse,
    SaleDocumentResponse,
)
from jewelpos.application.use_cases.checkout import CheckoutUseCase
from jewelpos.application.use_cases.get_sale import GetSaleUseCase
from jewelpos.application.use_cases.pricing_preview import PricingPreviewUseCase

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "/checkout",
    response_model=SaleDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def checkout(
    request: CheckoutRequest,
    use_case: CheckoutUseCase = Depends(get_checkout_use_case),
) -> SaleDocumentResponse:
    """Commit the cart as an invoice or memo and deduct stock."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/pricing-preview",
    response_model=PricingPreviewResponse,
    responses={400: {"model": ErrorResponse}},
)
async def pricing_preview(
    request: PricingPreviewRequest,
    use_case: PricingPreviewUseCase = Depends(get_pricing_preview_use_case),
) -> PricingPreviewResponse:
    """Price a cart without saving anything."""
    return use_case.to_response(use_case.execute(request))


@router.get(
    "/{sale_id}",
    response_model=SaleDocumentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: int,
    use_case: GetSaleUseCase = Depends(get_sale_use_case),
) -> SaleDocumentResponse:
    """Get an invoice or memo with its line items."""
    sale = await use_case.execute(sale_id)
    return use_case.to_response(sale)
