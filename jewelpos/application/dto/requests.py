"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from jewelpos.core.entities.notification import NotificationChannel
from jewelpos.core.entities.sale import DocumentType


class CartLineRequest(BaseModel):
    """One cart line at checkout."""

    product_id: str = Field(..., min_length=1, description="Product ID")
    quantity: int = Field(..., gt=0, description="Units to sell")
    unit_price: Decimal | None = Field(
        default=None,
        ge=0,
        description="Unit price override (defaults to the product's current price)",
    )
    discount_percentage: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        description="Line discount in percent",
    )


class CheckoutRequest(BaseModel):
    """Request to commit a cart as an invoice or a memo."""

    items: list[CartLineRequest] = Field(
        default_factory=list, description="Cart lines to commit"
    )
    document_type: DocumentType = Field(
        default=DocumentType.INVOICE,
        description="invoice for a paid sale, memo for goods on approval",
    )
    customer_id: str | None = Field(
        default=None, description="Customer ID (omit for walk-in sales)"
    )
    payment_method: str | None = Field(
        default=None,
        description="Payment method for invoices (defaults to cash)",
        examples=["cash", "card", "upi"],
    )
    discount_percentage: Decimal = Field(
        default=Decimal("0"), ge=0, le=100, description="Document discount in percent"
    )
    tax_percentage: Decimal = Field(
        default=Decimal("0"), ge=0, le=100, description="Tax rate in percent"
    )
    notes: str | None = Field(default=None, description="Free-text notes")
    memo_days: int | None = Field(
        default=None, ge=1, le=365, description="Days until a memo is due"
    )
    memo_due_date: date | None = Field(
        default=None, description="Explicit memo due date (overrides memo_days)"
    )
    notify_channel: NotificationChannel | None = Field(
        default=None, description="Send the customer a receipt on this channel"
    )


class PricingLineRequest(BaseModel):
    """One line of a pricing preview."""

    unit_price: Decimal = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., gt=0, description="Quantity")
    discount_percentage: Decimal = Field(
        default=Decimal("0"), ge=0, le=100, description="Line discount in percent"
    )


class PricingPreviewRequest(BaseModel):
    """Request for live cart totals. Nothing is persisted."""

    items: list[PricingLineRequest] = Field(default_factory=list)
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    tax_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class ConvertMemoRequest(BaseModel):
    """Request to convert a pending memo into a paid invoice."""

    payment_method: str | None = Field(
        default=None, description="How the customer paid (defaults to cash)"
    )


class ReturnLineRequest(BaseModel):
    """Quantity of one product coming back from a memo."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class ReturnMemoRequest(BaseModel):
    """Request to take back goods from an open memo.

    Omitting ``lines`` returns everything still outstanding.
    """

    lines: list[ReturnLineRequest] | None = Field(default=None)
