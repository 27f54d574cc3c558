"""Abstract interface for sale document storage."""

from abc import ABC, abstractmethod
from datetime import date

from jewelpos.core.entities.inventory import MemoReturnRecord
from jewelpos.core.entities.sale import CommitStatus, MemoStatus, SaleDocument, SaleLineItem


class ISaleRepository(ABC):
    """Interface for invoice and memo persistence."""

    @abstractmethod
    async def create(self, header: SaleDocument) -> int:
        """
        Persist a document header (without items) and return its ID.

        Raises:
            DuplicateInvoiceNumberError: invoice_number is already taken
        """
        pass

    @abstractmethod
    async def add_line_items(
        self, sale_id: int, items: list[SaleLineItem]
    ) -> list[SaleLineItem]:
        """Persist line items for a document, returning them with IDs."""
        pass

    @abstractmethod
    async def get_by_id(
        self, sale_id: int, with_items: bool = True
    ) -> SaleDocument | None:
        """Get a document by ID, optionally with its line items."""
        pass

    @abstractmethod
    async def update_memo_status(
        self,
        sale_id: int,
        status: MemoStatus,
        expected: MemoStatus | None = None,
    ) -> bool:
        """
        Set a memo's status.

        When ``expected`` is given the update only applies if the current
        status still equals it. Returns whether a row was updated.
        """
        pass

    @abstractmethod
    async def record_memo_return(
        self, memo_id: int, quantities: dict[str, int], actor_id: str
    ) -> MemoReturnRecord:
        """
        Apply a memo return as one atomic unit.

        Outstanding quantities are re-derived inside the same write as the
        restock, the ``returned`` log rows and the status move, so concurrent
        returns can never restock more than the memo sold.

        Raises:
            SaleNotFoundError: memo does not exist
            InvalidStateError: memo is not an open, committed memo
            InvalidInputError: a quantity exceeds what is outstanding
            ProductNotFoundError: a returned product no longer exists
        """
        pass

    @abstractmethod
    async def update_commit_status(self, sale_id: int, status: CommitStatus) -> None:
        """Record commit progress for a document."""
        pass

    @abstractmethod
    async def list_memos(
        self,
        statuses: list[MemoStatus] | None = None,
        limit: int = 100,
        offset: int = 0,
        due_from: date | None = None,
        due_until: date | None = None,
    ) -> list[SaleDocument]:
        """
        List committed memos ordered by due date, without items.

        ``due_from`` and ``due_until`` bound the due date inclusively and are
        applied before ``limit``/``offset``.
        """
        pass
