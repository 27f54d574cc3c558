"""
Transaction builder.

Assembles persistable sale documents (header plus line items) from
resolved cart lines and a pricing breakdown, and derives an invoice from
a memo. Nothing here touches storage.
"""

import secrets
import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from jewelpos.core.entities.pricing import PricingBreakdown, PricingLine
from jewelpos.core.entities.product import Product
from jewelpos.core.entities.sale import (
    CommitStatus,
    DocumentType,
    MemoStatus,
    PaymentStatus,
    SaleDocument,
    SaleLineItem,
)

MEMO_PAYMENT_METHOD = "pending"


@dataclass(frozen=True)
class ResolvedLine:
    """A cart line joined with the product it refers to."""

    product: Product
    pricing: PricingLine

    @property
    def quantity(self) -> int:
        return self.pricing.quantity


class TransactionBuilder:
    """Builds SaleDocument aggregates with consistent numbering and rounding."""

    def __init__(
        self,
        invoice_prefix: str = "INV",
        memo_prefix: str = "MEM",
        memo_default_days: int = 15,
        default_payment_method: str = "cash",
        money_places: int = 2,
    ):
        self.invoice_prefix = invoice_prefix
        self.memo_prefix = memo_prefix
        self.memo_default_days = memo_default_days
        self.default_payment_method = default_payment_method
        self.money_places = money_places

    def prefix_for(self, document_type: DocumentType) -> str:
        if document_type == DocumentType.MEMO:
            return self.memo_prefix
        return self.invoice_prefix

    def generate_invoice_number(self, document_type: DocumentType) -> str:
        """
        Return ``{PREFIX}-{epoch ms}{suffix}``.

        The random suffix keeps two documents created in the same
        millisecond apart; storage still enforces uniqueness.
        """
        millis = int(time.time() * 1000)
        suffix = secrets.token_hex(2).upper()
        return f"{self.prefix_for(document_type)}-{millis}{suffix}"

    def invoice_number_from_memo(self, memo_number: str) -> str:
        """Swap the memo prefix of a document number for the invoice prefix."""
        if memo_number.startswith(self.memo_prefix):
            return self.invoice_prefix + memo_number[len(self.memo_prefix):]
        return f"{self.invoice_prefix}-{memo_number}"

    def build_line_items(
        self, lines: list[ResolvedLine], breakdown: PricingBreakdown
    ) -> list[SaleLineItem]:
        """
        Snapshot product fields onto line items.

        ``breakdown`` must be the rounded breakdown for exactly these lines.
        """
        if len(lines) != len(breakdown.line_totals):
            raise ValueError("breakdown does not match cart lines")

        return [
            SaleLineItem(
                product_id=line.product.id,
                product_name=line.product.name,
                sku=line.product.sku,
                quantity=line.pricing.quantity,
                unit_price=line.pricing.unit_price,
                discount_percentage=line.pricing.discount_percentage,
                total_price=total,
            )
            for line, total in zip(lines, breakdown.line_totals)
        ]

    def build_document(
        self,
        document_type: DocumentType,
        lines: list[ResolvedLine],
        breakdown: PricingBreakdown,
        created_by: str,
        customer_id: str | None = None,
        payment_method: str | None = None,
        notes: str | None = None,
        memo_days: int | None = None,
        memo_due_date: date | None = None,
        sale_date: datetime | None = None,
    ) -> SaleDocument:
        """Build an unsaved invoice or memo with rounded totals."""
        rounded = breakdown.rounded(self.money_places)
        sale_date = sale_date or datetime.utcnow()

        due_date = None
        memo_status = None
        if document_type == DocumentType.MEMO:
            days = self.memo_default_days if memo_days is None else memo_days
            due_date = memo_due_date or (sale_date.date() + timedelta(days=days))
            memo_status = MemoStatus.PENDING
            payment_status = PaymentStatus.PENDING
            method = MEMO_PAYMENT_METHOD
        else:
            payment_status = PaymentStatus.COMPLETED
            method = payment_method or self.default_payment_method

        return SaleDocument(
            invoice_number=self.generate_invoice_number(document_type),
            document_type=document_type,
            customer_id=customer_id,
            sale_date=sale_date,
            memo_due_date=due_date,
            memo_status=memo_status,
            subtotal=rounded.subtotal,
            discount_percentage=rounded.discount_percentage,
            discount_amount=rounded.discount_amount,
            tax_percentage=rounded.tax_percentage,
            tax_amount=rounded.tax_amount,
            total_amount=rounded.total,
            payment_method=method,
            payment_status=payment_status,
            notes=notes,
            created_by=created_by,
            commit_status=CommitStatus.PENDING,
            items=self.build_line_items(lines, rounded),
        )

    def build_invoice_from_memo(
        self,
        memo: SaleDocument,
        created_by: str,
        payment_method: str | None = None,
    ) -> SaleDocument:
        """
        Derive a paid invoice from a memo.

        Pricing is copied verbatim and every line item is cloned without
        its ids, so the invoice totals equal the memo's exactly.
        """
        items = [
            item.model_copy(update={"id": None, "sale_id": None, "created_at": datetime.utcnow()})
            for item in memo.items
        ]
        return SaleDocument(
            invoice_number=self.invoice_number_from_memo(memo.invoice_number),
            document_type=DocumentType.INVOICE,
            customer_id=memo.customer_id,
            sale_date=datetime.utcnow(),
            converted_from_memo_id=memo.id,
            subtotal=memo.subtotal,
            discount_percentage=memo.discount_percentage,
            discount_amount=memo.discount_amount,
            tax_percentage=memo.tax_percentage,
            tax_amount=memo.tax_amount,
            total_amount=memo.total_amount,
            payment_method=payment_method or self.default_payment_method,
            payment_status=PaymentStatus.PAID,
            notes=f"Converted from memo {memo.invoice_number}",
            created_by=created_by,
            commit_status=CommitStatus.PENDING,
            items=items,
        )
