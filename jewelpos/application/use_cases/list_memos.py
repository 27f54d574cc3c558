"""List Memos Use Case: memo list with read-time urgency."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

from jewelpos.application.dto.responses import MemoListResponse, MemoSummaryResponse
from jewelpos.config import get_logger, get_settings
from jewelpos.core.entities.sale import MemoStatus, SaleDocument
from jewelpos.core.exceptions import InvalidInputError
from jewelpos.core.interfaces.sale_repository import ISaleRepository
from jewelpos.core.services import memo_lifecycle

logger = get_logger(__name__)


class MemoFilter(str, Enum):
    """Memo list filters offered to staff."""

    ALL = "all"
    OPEN = "open"
    PENDING = "pending"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"


@dataclass
class MemoListResult:
    """Memos matching a filter, evaluated on ``today``."""

    memos: list[SaleDocument] = field(default_factory=list)
    today: date = field(default_factory=date.today)
    filter: MemoFilter = MemoFilter.ALL


class ListMemosUseCase:
    """List committed memos, filtered by status or urgency."""

    def __init__(
        self,
        sale_store: ISaleRepository | None = None,
        due_soon_days: int | None = None,
    ):
        self._sale_store = sale_store
        self._due_soon_days = (
            due_soon_days if due_soon_days is not None
            else get_settings().sales.memo_due_soon_days
        )

    async def _get_sale_store(self) -> ISaleRepository:
        if self._sale_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def execute(
        self,
        memo_filter: str | MemoFilter | None = None,
        today: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> MemoListResult:
        """
        Raises:
            InvalidInputError: unknown filter
        """
        try:
            selected = MemoFilter(memo_filter or MemoFilter.ALL)
        except ValueError:
            raise InvalidInputError(
                "filter",
                f"must be one of {', '.join(f.value for f in MemoFilter)}",
                memo_filter,
            ) from None

        today = today or date.today()
        store = await self._get_sale_store()

        statuses: list[MemoStatus] | None = None
        if selected == MemoFilter.PENDING:
            statuses = [MemoStatus.PENDING]
        elif selected in (MemoFilter.OPEN, MemoFilter.OVERDUE, MemoFilter.DUE_SOON):
            statuses = sorted(memo_lifecycle.OPEN_STATES, key=lambda s: s.value)

        # Urgency filters map to an inclusive due-date window applied before paging
        window: dict[str, date] = {}
        if selected == MemoFilter.OVERDUE:
            window["due_until"] = today - timedelta(days=1)
        elif selected == MemoFilter.DUE_SOON:
            window["due_from"] = today
            window["due_until"] = today + timedelta(days=self._due_soon_days)

        memos = await store.list_memos(statuses=statuses, limit=limit, offset=offset, **window)

        logger.info("memos_listed", filter=selected.value, count=len(memos))
        return MemoListResult(memos=memos, today=today, filter=selected)

    def to_response(self, result: MemoListResult) -> MemoListResponse:
        summaries = []
        for memo in result.memos:
            urgency = memo_lifecycle.memo_urgency(memo, result.today, self._due_soon_days)
            effective = memo_lifecycle.effective_status(memo, result.today)
            summaries.append(
                MemoSummaryResponse(
                    id=memo.id,  # type: ignore[arg-type]
                    invoice_number=memo.invoice_number,
                    customer_id=memo.customer_id,
                    sale_date=memo.sale_date,
                    memo_due_date=memo.memo_due_date,
                    memo_status=memo.memo_status.value if memo.memo_status else None,
                    effective_status=effective.value if effective else None,
                    urgency=urgency.value if urgency else None,
                    days_until_due=(
                        (memo.memo_due_date - result.today).days
                        if memo.memo_due_date else None
                    ),
                    total_amount=memo.total_amount,
                )
            )
        return MemoListResponse(
            memos=summaries,
            total=len(summaries),
            filter=result.filter.value,
        )
