"""Get Sale Use Case: load one invoice or memo with its line items."""

from datetime import date

from jewelpos.application.dto.responses import SaleDocumentResponse, SaleLineItemResponse
from jewelpos.config import get_logger, get_settings
from jewelpos.core.entities.sale import SaleDocument
from jewelpos.core.exceptions import SaleNotFoundError
from jewelpos.core.interfaces.sale_repository import ISaleRepository
from jewelpos.core.services import memo_lifecycle

logger = get_logger(__name__)


def sale_to_response(
    sale: SaleDocument,
    today: date | None = None,
    due_soon_days: int | None = None,
) -> SaleDocumentResponse:
    """Map a sale document to its API shape, deriving memo urgency."""
    today = today or date.today()
    if due_soon_days is None:
        due_soon_days = get_settings().sales.memo_due_soon_days

    urgency = memo_lifecycle.memo_urgency(sale, today, due_soon_days)
    effective = memo_lifecycle.effective_status(sale, today)

    return SaleDocumentResponse(
        id=sale.id,  # type: ignore[arg-type]
        invoice_number=sale.invoice_number,
        document_type=sale.document_type.value,
        customer_id=sale.customer_id,
        sale_date=sale.sale_date,
        memo_due_date=sale.memo_due_date,
        memo_status=sale.memo_status.value if sale.memo_status else None,
        effective_status=effective.value if effective else None,
        urgency=urgency.value if urgency else None,
        converted_from_memo_id=sale.converted_from_memo_id,
        subtotal=sale.subtotal,
        discount_percentage=sale.discount_percentage,
        discount_amount=sale.discount_amount,
        tax_percentage=sale.tax_percentage,
        tax_amount=sale.tax_amount,
        total_amount=sale.total_amount,
        payment_method=sale.payment_method,
        payment_status=sale.payment_status.value,
        notes=sale.notes,
        created_by=sale.created_by,
        commit_status=sale.commit_status.value,
        items=[
            SaleLineItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                sku=item.sku,
                quantity=item.quantity,
                unit_price=item.unit_price,
                discount_percentage=item.discount_percentage,
                total_price=item.total_price,
            )
            for item in sale.items
        ],
        created_at=sale.created_at,
    )


class GetSaleUseCase:
    """Fetch a sale document by ID."""

    def __init__(self, sale_store: ISaleRepository | None = None):
        self._sale_store = sale_store

    async def _get_sale_store(self) -> ISaleRepository:
        if self._sale_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def execute(self, sale_id: int) -> SaleDocument:
        """
        Raises:
            SaleNotFoundError: no document with this ID
        """
        store = await self._get_sale_store()
        sale = await store.get_by_id(sale_id, with_items=True)
        if sale is None:
            raise SaleNotFoundError(sale_id)
        return sale

    def to_response(self, sale: SaleDocument) -> SaleDocumentResponse:
        return sale_to_response(sale)
