"""
Convert Memo Use Case: turn a pending memo into a paid invoice.

Pricing and line items are copied from the memo as they are; stock is not
touched because it was taken when the memo was created. The invoice
number is derived from the memo number, so a second conversion of the
same memo collides on the unique number, and the memo status moves with a
compare-and-set from ``pending``.
"""

from dataclasses import dataclass

from jewelpos.application.dto.responses import SaleDocumentResponse
from jewelpos.application.use_cases.checkout import builder_from_settings, require_actor
from jewelpos.application.use_cases.get_sale import sale_to_response
from jewelpos.config import Settings, get_logger, get_settings
from jewelpos.core.entities.sale import CommitStatus, MemoStatus, SaleDocument
from jewelpos.core.exceptions import (
    DuplicateInvoiceNumberError,
    InvalidStateError,
    ReconciliationPendingError,
    SaleNotFoundError,
    StorageError,
    StorageFailureError,
)
from jewelpos.core.interfaces.identity import IIdentityProvider
from jewelpos.core.interfaces.sale_repository import ISaleRepository
from jewelpos.core.services import memo_lifecycle

logger = get_logger(__name__)


@dataclass
class ConvertMemoResult:
    """Result of a memo conversion."""

    invoice: SaleDocument
    memo: SaleDocument


class ConvertMemoUseCase:
    """Materialize an invoice from a pending memo."""

    def __init__(
        self,
        sale_store: ISaleRepository | None = None,
        identity: IIdentityProvider | None = None,
        settings: Settings | None = None,
    ):
        self._sale_store = sale_store
        self._identity = identity
        self._settings = settings or get_settings()
        self._builder = builder_from_settings(self._settings)

    async def _get_sale_store(self) -> ISaleRepository:
        if self._sale_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def execute(
        self, memo_id: int, payment_method: str | None = None
    ) -> ConvertMemoResult:
        """
        Convert the memo.

        Raises:
            UnauthenticatedError: no actor
            SaleNotFoundError: memo does not exist
            InvalidStateError: not a committed memo in ``pending`` status
            ReconciliationPendingError: an earlier attempt left an unfinished
                invoice for this memo
            StorageFailureError: a write failed after the invoice header
        """
        actor_id = require_actor(self._identity)
        store = await self._get_sale_store()

        logger.info("convert_memo_started", memo_id=memo_id, actor_id=actor_id)

        memo = await store.get_by_id(memo_id, with_items=True)
        if memo is None:
            raise SaleNotFoundError(memo_id)
        if memo.commit_status != CommitStatus.COMMITTED:
            raise InvalidStateError(memo_id, memo.commit_status.value, "convert")
        memo_lifecycle.validate_transition(memo, MemoStatus.CONFIRMED, "convert")

        invoice = self._builder.build_invoice_from_memo(memo, actor_id, payment_method)
        items = invoice.items

        try:
            invoice_id = await store.create(invoice)
        except DuplicateInvoiceNumberError as e:
            current = await store.get_by_id(memo_id, with_items=False)
            status = current.memo_status if current else None
            if status == MemoStatus.PENDING:
                # Header from an earlier attempt exists but the memo never moved
                logger.error(
                    "memo_conversion_unfinished",
                    memo_id=memo_id,
                    invoice_number=invoice.invoice_number,
                )
                raise ReconciliationPendingError(
                    memo_id, invoice.invoice_number, status.value
                ) from e
            logger.warning(
                "memo_already_converted",
                memo_id=memo_id,
                invoice_number=invoice.invoice_number,
                current=status.value if status else None,
            )
            raise InvalidStateError(
                memo_id, status.value if status else None, "convert"
            ) from e
        invoice.id = invoice_id

        logger.info(
            "commit_point_of_no_return",
            sale_id=invoice_id,
            invoice_number=invoice.invoice_number,
            memo_id=memo_id,
        )

        try:
            invoice.items = await store.add_line_items(invoice_id, items)
        except StorageError as e:
            raise StorageFailureError("line_items", invoice_id, str(e)) from e

        try:
            confirmed = await store.update_memo_status(
                memo_id, MemoStatus.CONFIRMED, expected=MemoStatus.PENDING
            )
        except StorageError as e:
            raise StorageFailureError("memo_status", invoice_id, str(e)) from e

        if not confirmed:
            # A concurrent return moved the memo first
            try:
                await store.update_commit_status(invoice_id, CommitStatus.FAILED)
            except StorageError as e:
                raise StorageFailureError("mark_failed", invoice_id, str(e)) from e
            current = await store.get_by_id(memo_id, with_items=False)
            status = current.memo_status.value if current and current.memo_status else None
            raise InvalidStateError(memo_id, status, "convert")

        try:
            await store.update_commit_status(invoice_id, CommitStatus.COMMITTED)
        except StorageError as e:
            raise StorageFailureError("commit", invoice_id, str(e)) from e
        invoice.commit_status = CommitStatus.COMMITTED
        memo.memo_status = MemoStatus.CONFIRMED

        logger.info(
            "memo_converted",
            memo_id=memo_id,
            invoice_id=invoice_id,
            invoice_number=invoice.invoice_number,
            total=str(invoice.total_amount),
        )
        return ConvertMemoResult(invoice=invoice, memo=memo)

    def to_response(self, result: ConvertMemoResult) -> SaleDocumentResponse:
        """Convert result to API response."""
        return sale_to_response(
            result.invoice, due_soon_days=self._settings.sales.memo_due_soon_days
        )
