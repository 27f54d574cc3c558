"""
Return Memo Use Case: take goods back from an open memo.

Outstanding quantity per product is what the memo sold minus what earlier
returns already restocked, read from the memo's ``returned`` inventory log
entries. Line items are never modified. The store applies the restock, the
log rows and the status move in one write, re-checking outstanding
quantities inside it.
"""

from dataclasses import dataclass, field

from jewelpos.application.dto.requests import ReturnMemoRequest
from jewelpos.application.dto.responses import (
    MemoReturnResponse,
    OutstandingLineResponse,
    ReturnedLineResponse,
)
from jewelpos.application.use_cases.checkout import StockChange, require_actor
from jewelpos.config import get_logger
from jewelpos.core.entities.inventory import InventoryChangeType
from jewelpos.core.entities.sale import CommitStatus, SaleDocument
from jewelpos.core.exceptions import (
    DatabaseError,
    InvalidInputError,
    InvalidStateError,
    ProductNotFoundError,
    SaleNotFoundError,
    StorageFailureError,
)
from jewelpos.core.interfaces.identity import IIdentityProvider
from jewelpos.core.interfaces.inventory_log_repository import IInventoryLogRepository
from jewelpos.core.interfaces.sale_repository import ISaleRepository
from jewelpos.core.services import memo_lifecycle
from jewelpos.core.services.inventory_guard import aggregate_quantities

logger = get_logger(__name__)


@dataclass
class ReturnMemoResult:
    """Result of a memo return."""

    memo: SaleDocument
    returned: list[StockChange] = field(default_factory=list)
    outstanding: dict[str, int] = field(default_factory=dict)


class ReturnMemoUseCase:
    """Restock returned memo goods and advance the memo status."""

    def __init__(
        self,
        sale_store: ISaleRepository | None = None,
        inventory_log_store: IInventoryLogRepository | None = None,
        identity: IIdentityProvider | None = None,
    ):
        self._sale_store = sale_store
        self._inventory_log_store = inventory_log_store
        self._identity = identity

    async def _get_sale_store(self) -> ISaleRepository:
        if self._sale_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def _get_inventory_log_store(self) -> IInventoryLogRepository:
        if self._inventory_log_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_inventory_log_store

            self._inventory_log_store = await get_inventory_log_store()
        return self._inventory_log_store

    async def outstanding_quantities(self, memo: SaleDocument) -> dict[str, int]:
        """Units per product still with the customer."""
        log_store = await self._get_inventory_log_store()
        sold = aggregate_quantities([(item.product_id, item.quantity) for item in memo.items])

        entries = await log_store.list_by_reference(memo.id)  # type: ignore[arg-type]
        for entry in entries:
            if entry.change_type == InventoryChangeType.RETURNED and entry.product_id in sold:
                sold[entry.product_id] -= entry.quantity_change
        return sold

    async def execute(
        self, memo_id: int, request: ReturnMemoRequest | None = None
    ) -> ReturnMemoResult:
        """
        Process a return.

        Quantities are checked here first for a fast, precise error, then
        re-checked by the store inside the write that restocks them.

        Raises:
            UnauthenticatedError: no actor
            SaleNotFoundError: memo does not exist
            InvalidStateError: memo is not open, or changed concurrently
            InvalidInputError: product not on the memo or quantity too large
            StorageFailureError: the restocking write failed; nothing was applied
        """
        actor_id = require_actor(self._identity)
        sale_store = await self._get_sale_store()

        logger.info("memo_return_started", memo_id=memo_id, actor_id=actor_id)

        memo = await sale_store.get_by_id(memo_id, with_items=True)
        if memo is None:
            raise SaleNotFoundError(memo_id)
        if (
            not memo.is_memo
            or memo.commit_status != CommitStatus.COMMITTED
            or memo.memo_status not in memo_lifecycle.OPEN_STATES
        ):
            current = memo.memo_status.value if memo.memo_status else memo.document_type.value
            raise InvalidStateError(memo_id, current, "return")

        outstanding = await self.outstanding_quantities(memo)
        to_return = self._requested_quantities(request, outstanding)

        remaining = sum(outstanding.values()) - sum(to_return.values())
        memo_lifecycle.validate_transition(
            memo, memo_lifecycle.status_after_return(remaining), "return"
        )

        try:
            record = await sale_store.record_memo_return(memo_id, to_return, actor_id)
        except (DatabaseError, ProductNotFoundError) as e:
            raise StorageFailureError("stock_restore", memo_id, str(e)) from e

        memo.memo_status = record.memo_status
        returned = [
            StockChange(entry.product_id, entry.quantity_change, entry.new_quantity)
            for entry in record.entries
        ]

        logger.info(
            "memo_returned",
            memo_id=memo_id,
            status=record.memo_status.value,
            units=sum(to_return.values()),
            remaining=sum(record.outstanding.values()),
        )
        return ReturnMemoResult(memo=memo, returned=returned, outstanding=record.outstanding)

    @staticmethod
    def _requested_quantities(
        request: ReturnMemoRequest | None, outstanding: dict[str, int]
    ) -> dict[str, int]:
        if request is None or request.lines is None:
            wanted = {pid: qty for pid, qty in outstanding.items() if qty > 0}
        else:
            wanted = aggregate_quantities(
                [(line.product_id, line.quantity) for line in request.lines]
            )
            for product_id, quantity in wanted.items():
                if product_id not in outstanding:
                    raise InvalidInputError(
                        "lines.product_id", "product is not on this memo", product_id
                    )
                if quantity > outstanding[product_id]:
                    raise InvalidInputError(
                        "lines.quantity",
                        f"only {outstanding[product_id]} unit(s) of {product_id} outstanding",
                        quantity,
                    )

        if not wanted:
            raise InvalidInputError("lines", "nothing left to return on this memo")
        return wanted

    def to_response(self, result: ReturnMemoResult) -> MemoReturnResponse:
        """Convert result to API response."""
        return MemoReturnResponse(
            memo_id=result.memo.id,  # type: ignore[arg-type]
            invoice_number=result.memo.invoice_number,
            memo_status=result.memo.memo_status.value,  # type: ignore[union-attr]
            returned=[
                ReturnedLineResponse(
                    product_id=c.product_id,
                    quantity=c.quantity,
                    new_stock=c.new_stock,
                )
                for c in result.returned
            ],
            outstanding=[
                OutstandingLineResponse(product_id=pid, quantity=qty)
                for pid, qty in result.outstanding.items()
            ],
        )
