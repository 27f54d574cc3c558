"""
Application layer - Use cases and DTOs.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services and stores

Use cases are the only entry point for API handlers and management commands.
"""

from jewelpos.application.dto import (
    CheckoutRequest,
    ConvertMemoRequest,
    ErrorResponse,
    HealthResponse,
    MemoListResponse,
    MemoReturnResponse,
    PricingPreviewRequest,
    PricingPreviewResponse,
    ReturnMemoRequest,
    SaleDocumentResponse,
)
from jewelpos.application.use_cases import (
    CheckoutUseCase,
    ConvertMemoUseCase,
    GetSaleUseCase,
    ListMemosUseCase,
    PricingPreviewUseCase,
    RemindOverdueMemosUseCase,
    ReturnMemoUseCase,
)

__all__ = [
    # Request DTOs
    "CheckoutRequest",
    "PricingPreviewRequest",
    "ConvertMemoRequest",
    "ReturnMemoRequest",
    # Response DTOs
    "SaleDocumentResponse",
    "PricingPreviewResponse",
    "MemoListResponse",
    "MemoReturnResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "CheckoutUseCase",
    "PricingPreviewUseCase",
    "GetSaleUseCase",
    "ConvertMemoUseCase",
    "ReturnMemoUseCase",
    "ListMemosUseCase",
    "RemindOverdueMemosUseCase",
]
