"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from jewelpos.application.dto.requests import (
    CartLineRequest,
    CheckoutRequest,
    ConvertMemoRequest,
    PricingLineRequest,
    PricingPreviewRequest,
    ReturnLineRequest,
    ReturnMemoRequest,
)
from jewelpos.application.dto.responses import (
    ErrorResponse,
    HealthResponse,
    MemoListResponse,
    MemoReturnResponse,
    MemoSummaryResponse,
    OutstandingLineResponse,
    PricingBreakdownResponse,
    PricingPreviewResponse,
    ReturnedLineResponse,
    SaleDocumentResponse,
    SaleLineItemResponse,
)

__all__ = [
    # Requests
    "CartLineRequest",
    "CheckoutRequest",
    "ConvertMemoRequest",
    "PricingLineRequest",
    "PricingPreviewRequest",
    "ReturnLineRequest",
    "ReturnMemoRequest",
    # Responses
    "SaleLineItemResponse",
    "SaleDocumentResponse",
    "PricingBreakdownResponse",
    "PricingPreviewResponse",
    "MemoSummaryResponse",
    "MemoListResponse",
    "ReturnedLineResponse",
    "OutstandingLineResponse",
    "MemoReturnResponse",
    "HealthResponse",
    "ErrorResponse",
]
