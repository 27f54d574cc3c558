"""
Remind Overdue Memos Use Case.

Periodic job: finds open memos past their due date and sends each
customer a reminder. Delivery is best-effort and never changes memo
status; overdue memos stay open until converted or returned.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta

from jewelpos.application.use_cases.notify import recipient_for, send_best_effort
from jewelpos.config import Settings, get_logger, get_settings
from jewelpos.core.entities.notification import NotificationChannel
from jewelpos.core.entities.sale import SaleDocument
from jewelpos.core.interfaces.customer_repository import ICustomerRepository
from jewelpos.core.interfaces.notification import INotificationDispatcher
from jewelpos.core.interfaces.sale_repository import ISaleRepository
from jewelpos.core.services import memo_lifecycle, notification_messages

logger = get_logger(__name__)

REMINDER_PAGE_SIZE = 200


@dataclass
class ReminderRunResult:
    """Result of an overdue memo sweep."""

    total_overdue: int = 0
    reminders_sent: int = 0
    skipped_no_contact: int = 0
    failed: int = 0
    reminded_memo_ids: list[int] = field(default_factory=list)


class RemindOverdueMemosUseCase:
    """Send reminders for overdue memos."""

    def __init__(
        self,
        sale_store: ISaleRepository | None = None,
        customer_store: ICustomerRepository | None = None,
        notifier: INotificationDispatcher | None = None,
        settings: Settings | None = None,
    ):
        self._sale_store = sale_store
        self._customer_store = customer_store
        self._notifier = notifier
        self._settings = settings or get_settings()

    async def _get_sale_store(self) -> ISaleRepository:
        if self._sale_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_sale_store
            self._sale_store = await get_sale_store()
        return self._sale_store

    async def _get_customer_store(self) -> ICustomerRepository:
        if self._customer_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_customer_store
            self._customer_store = await get_customer_store()
        return self._customer_store

    def _get_notifier(self) -> INotificationDispatcher:
        if self._notifier is None:
            from jewelpos.infrastructure.notifications import get_notification_dispatcher
            self._notifier = get_notification_dispatcher()
        return self._notifier

    async def execute(
        self,
        today: date | None = None,
        channel: NotificationChannel = NotificationChannel.WHATSAPP,
    ) -> ReminderRunResult:
        """
        Remind every customer holding an overdue memo.

        Args:
            today: Evaluation date (defaults to today)
            channel: Delivery channel for the reminders

        Returns:
            ReminderRunResult with counts and reminded memo IDs.
        """
        today = today or date.today()
        sale_store = await self._get_sale_store()
        customer_store = await self._get_customer_store()
        notify = self._settings.notifications

        overdue = await self._overdue_memos(sale_store, today)
        result = ReminderRunResult(total_overdue=len(overdue))

        if not notify.enabled:
            logger.info("memo_reminders_disabled", total_overdue=result.total_overdue)
            return result

        dispatcher = self._get_notifier()

        for memo in overdue:
            if not memo.customer_id:
                result.skipped_no_contact += 1
                continue

            customer = await customer_store.get_by_id(memo.customer_id)
            recipient = recipient_for(customer, channel) if customer else None
            if not recipient:
                result.skipped_no_contact += 1
                continue

            payload = notification_messages.memo_reminder(
                memo,
                customer,
                today,
                shop_name=notify.shop_name,
                currency_symbol=notify.currency_symbol,
            )
            if await send_best_effort(dispatcher, channel, recipient, payload):
                result.reminders_sent += 1
                result.reminded_memo_ids.append(memo.id)  # type: ignore[arg-type]
            else:
                result.failed += 1

        logger.info(
            "memo_reminders_complete",
            total_overdue=result.total_overdue,
            reminders_sent=result.reminders_sent,
            skipped_no_contact=result.skipped_no_contact,
            failed=result.failed,
        )
        return result

    @staticmethod
    async def _overdue_memos(sale_store: ISaleRepository, today: date) -> list[SaleDocument]:
        """Every open memo due before ``today``, fetched page by page."""
        statuses = sorted(memo_lifecycle.OPEN_STATES, key=lambda s: s.value)
        memos: list[SaleDocument] = []
        while True:
            page = await sale_store.list_memos(
                statuses=statuses,
                due_until=today - timedelta(days=1),
                limit=REMINDER_PAGE_SIZE,
                offset=len(memos),
            )
            memos.extend(page)
            if len(page) < REMINDER_PAGE_SIZE:
                return memos
