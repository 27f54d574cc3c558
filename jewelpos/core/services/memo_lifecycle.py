"""
Memo lifecycle rules.

The only allowed memo status transitions, and the derived urgency and
expiry shown to staff. No storage access.

    pending ──convert──▶ confirmed
       │
       └──return──▶ partially_returned ──return──▶ fully_returned
       └──return (all)──────────────────────────▶ fully_returned

``expired`` is never stored: an open memo past its due date reads as
expired.
"""

from datetime import date, timedelta

from jewelpos.core.entities.sale import MemoStatus, MemoUrgency, SaleDocument
from jewelpos.core.exceptions import InvalidStateError

TERMINAL_STATES = frozenset({
    MemoStatus.CONFIRMED,
    MemoStatus.FULLY_RETURNED,
})

OPEN_STATES = frozenset({
    MemoStatus.PENDING,
    MemoStatus.PARTIALLY_RETURNED,
})

ALLOWED_TRANSITIONS: dict[MemoStatus, frozenset[MemoStatus]] = {
    MemoStatus.PENDING: frozenset({
        MemoStatus.CONFIRMED,
        MemoStatus.PARTIALLY_RETURNED,
        MemoStatus.FULLY_RETURNED,
    }),
    MemoStatus.PARTIALLY_RETURNED: frozenset({
        MemoStatus.PARTIALLY_RETURNED,
        MemoStatus.FULLY_RETURNED,
    }),
}


def can_transition(from_status: MemoStatus | None, to_status: MemoStatus) -> bool:
    if from_status is None or from_status in TERMINAL_STATES:
        return False
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def validate_transition(memo: SaleDocument, target: MemoStatus, operation: str) -> None:
    """Raise InvalidStateError unless ``memo`` may move to ``target``."""
    if not memo.is_memo or not can_transition(memo.memo_status, target):
        current = memo.memo_status.value if memo.memo_status else memo.document_type.value
        raise InvalidStateError(memo.id or memo.invoice_number, current, operation)


def is_overdue(memo: SaleDocument, today: date) -> bool:
    """Open memo whose due date has passed. Confirmed memos are never overdue."""
    if memo.memo_status not in OPEN_STATES or memo.memo_due_date is None:
        return False
    return today > memo.memo_due_date


def memo_urgency(
    memo: SaleDocument, today: date, due_soon_days: int = 3
) -> MemoUrgency | None:
    """
    Classify an open memo as Overdue, Due Soon or Active.

    Terminal memos have no urgency.
    """
    if memo.memo_status not in OPEN_STATES or memo.memo_due_date is None:
        return None
    if today > memo.memo_due_date:
        return MemoUrgency.OVERDUE
    if memo.memo_due_date <= today + timedelta(days=due_soon_days):
        return MemoUrgency.DUE_SOON
    return MemoUrgency.ACTIVE


def effective_status(memo: SaleDocument, today: date) -> MemoStatus | None:
    """Stored status, or ``expired`` for an open memo past its due date."""
    if is_overdue(memo, today):
        return MemoStatus.EXPIRED
    return memo.memo_status


def status_after_return(outstanding_after: int) -> MemoStatus:
    """Status a memo takes once a return leaves ``outstanding_after`` units out."""
    if outstanding_after <= 0:
        return MemoStatus.FULLY_RETURNED
    return MemoStatus.PARTIALLY_RETURNED
