"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.

Money fields are Decimal and serialize as strings, so clients see the
exact persisted values.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class SaleLineItemResponse(BaseModel):
    """Line item on a sale document."""

    id: int | None = Field(default=None, description="Line item ID")
    product_id: str = Field(..., description="Product ID")
    product_name: str = Field(..., description="Product name at sale time")
    sku: str = Field(..., description="SKU at sale time")
    quantity: int = Field(..., description="Units sold")
    unit_price: Decimal = Field(..., description="Unit price")
    discount_percentage: Decimal = Field(..., description="Line discount in percent")
    total_price: Decimal = Field(..., description="Line total after line discount")


class SaleDocumentResponse(BaseModel):
    """Invoice or memo with its line items."""

    id: int = Field(..., description="Sale document ID")
    invoice_number: str = Field(..., description="Human-facing document number")
    document_type: str = Field(..., description="invoice or memo")
    customer_id: str | None = None
    sale_date: datetime
    memo_due_date: date | None = None
    memo_status: str | None = None
    effective_status: str | None = Field(
        default=None, description="Memo status with overdue memos shown as expired"
    )
    urgency: str | None = Field(default=None, description="Overdue, Due Soon or Active")
    converted_from_memo_id: int | None = None
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    tax_percentage: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    payment_method: str
    payment_status: str
    notes: str | None = None
    created_by: str
    commit_status: str
    items: list[SaleLineItemResponse] = Field(default_factory=list)
    created_at: datetime


class PricingBreakdownResponse(BaseModel):
    """Totals for a cart in derivation order."""

    line_totals: list[Decimal] = Field(default_factory=list)
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_percentage: Decimal
    tax_amount: Decimal
    total: Decimal


class PricingPreviewResponse(BaseModel):
    """Rounded totals for display plus the exact values they came from."""

    rounded: PricingBreakdownResponse
    exact: PricingBreakdownResponse


class MemoSummaryResponse(BaseModel):
    """Memo row for the memo list."""

    id: int
    invoice_number: str
    customer_id: str | None = None
    sale_date: datetime
    memo_due_date: date | None = None
    memo_status: str | None = None
    effective_status: str | None = None
    urgency: str | None = None
    days_until_due: int | None = Field(
        default=None, description="Negative when overdue"
    )
    total_amount: Decimal


class MemoListResponse(BaseModel):
    """Filtered memo list."""

    memos: list[MemoSummaryResponse] = Field(default_factory=list)
    total: int = 0
    filter: str | None = None


class ReturnedLineResponse(BaseModel):
    """Stock restored for one product by a return."""

    product_id: str
    quantity: int
    new_stock: int


class OutstandingLineResponse(BaseModel):
    """Units of a product still out with the customer."""

    product_id: str
    quantity: int


class MemoReturnResponse(BaseModel):
    """Outcome of a memo return."""

    memo_id: int
    invoice_number: str
    memo_status: str
    returned: list[ReturnedLineResponse] = Field(default_factory=list)
    outstanding: list[OutstandingLineResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str = Field(default="unknown", description="ok, error or unknown")


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict | None = Field(default=None, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
