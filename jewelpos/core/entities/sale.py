"""Sale document (invoice or memo) domain entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from jewelpos.core.entities.pricing import ZERO


class DocumentType(str, Enum):
    """Kinds of sale documents."""

    INVOICE = "invoice"
    MEMO = "memo"


class MemoStatus(str, Enum):
    """Memo lifecycle states. ``expired`` is derived at read time."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PARTIALLY_RETURNED = "partially_returned"
    FULLY_RETURNED = "fully_returned"
    EXPIRED = "expired"


class MemoUrgency(str, Enum):
    """Display urgency of an open memo."""

    OVERDUE = "Overdue"
    DUE_SOON = "Due Soon"
    ACTIVE = "Active"


class PaymentStatus(str, Enum):
    """Payment state of a sale document."""

    PENDING = "pending"
    COMPLETED = "completed"
    PAID = "paid"


class CommitStatus(str, Enum):
    """Progress marker for the multi-step commit of a document."""

    PENDING = "pending"
    COMMITTED = "committed"
    FAILED = "failed"


class SaleLineItem(BaseModel):
    """
    One product line on a sale document.

    Product name, sku and price are snapshots taken at sale time so later
    catalog edits never change historical documents.
    """

    id: int | None = None
    sale_id: int | None = None
    product_id: str
    product_name: str
    sku: str
    quantity: int
    unit_price: Decimal
    discount_percentage: Decimal = ZERO
    total_price: Decimal
    created_at: datetime = Field(default_factory=datetime.utcnow)


class SaleDocument(BaseModel):
    """An invoice or memo header with its line items."""

    id: int | None = None
    invoice_number: str
    document_type: DocumentType
    customer_id: str | None = None
    sale_date: datetime = Field(default_factory=datetime.utcnow)
    memo_due_date: date | None = None
    memo_status: MemoStatus | None = None
    converted_from_memo_id: int | None = None
    subtotal: Decimal = ZERO
    discount_percentage: Decimal = ZERO
    discount_amount: Decimal = ZERO
    tax_percentage: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    payment_method: str = "cash"
    payment_status: PaymentStatus = PaymentStatus.COMPLETED
    notes: str | None = None
    created_by: str
    commit_status: CommitStatus = CommitStatus.PENDING
    items: list[SaleLineItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def check_memo_fields(self) -> "SaleDocument":
        """Memo due date and status exist only on memos."""
        if self.document_type == DocumentType.INVOICE and (
            self.memo_due_date is not None or self.memo_status is not None
        ):
            raise ValueError("memo_due_date and memo_status are only valid on memos")
        return self

    @property
    def is_memo(self) -> bool:
        return self.document_type == DocumentType.MEMO

    @property
    def totals_reconcile(self) -> bool:
        """Header total matches its components."""
        return self.total_amount == self.subtotal - self.discount_amount + self.tax_amount
