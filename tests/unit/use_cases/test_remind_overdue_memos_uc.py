"""Tests for RemindOverdueMemosUseCase."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from jewelpos.application.use_cases import remind_overdue_memos
from jewelpos.application.use_cases.remind_overdue_memos import RemindOverdueMemosUseCase
from jewelpos.core.entities import MemoStatus, NotificationChannel, NotificationKind
from jewelpos.core.exceptions import NotificationDeliveryError


@pytest.fixture
def mock_sale_store(make_memo):
    overdue = make_memo(memo_id=1, due=date(2024, 3, 1))
    walk_in = make_memo(memo_id=2, due=date(2024, 3, 2))
    walk_in.customer_id = None
    no_phone = make_memo(memo_id=3, due=date(2024, 3, 3))
    no_phone.customer_id = "c-2"

    store = AsyncMock()
    store.list_memos.return_value = [overdue, walk_in, no_phone]
    return store


@pytest.fixture
def mock_customer_store(make_customer):
    customers = {"c-1": make_customer("c-1"), "c-2": make_customer("c-2", phone="")}
    store = AsyncMock()
    store.get_by_id.side_effect = lambda cid: customers.get(cid)
    return store


@pytest.fixture
def mock_notifier():
    return AsyncMock()


@pytest.fixture
def use_case(mock_sale_store, mock_customer_store, mock_notifier, settings):
    return RemindOverdueMemosUseCase(
        sale_store=mock_sale_store,
        customer_store=mock_customer_store,
        notifier=mock_notifier,
        settings=settings,
    )


class TestRemindOverdueMemos:
    async def test_reminds_overdue_customers(self, use_case, mock_notifier, mock_sale_store, today):
        result = await use_case.execute(today=today)

        assert result.total_overdue == 3
        assert result.reminders_sent == 1
        assert result.skipped_no_contact == 2
        assert result.failed == 0
        assert result.reminded_memo_ids == [1]

        channel, recipient, payload = mock_notifier.send.await_args.args
        assert channel == NotificationChannel.WHATSAPP
        assert recipient == "+919999999999"
        assert payload.kind == NotificationKind.MEMO_REMINDER
        assert payload.data["days_overdue"] == 9

        statuses = mock_sale_store.list_memos.await_args.kwargs["statuses"]
        assert statuses == [MemoStatus.PARTIALLY_RETURNED, MemoStatus.PENDING]
        assert mock_sale_store.list_memos.await_args.kwargs["due_until"] == date(2024, 3, 9)

    async def test_email_channel_uses_email(self, use_case, mock_notifier, today):
        result = await use_case.execute(today=today, channel=NotificationChannel.EMAIL)

        assert mock_notifier.send.await_args.args[1] == "asha@example.com"
        assert result.reminders_sent == 1
        # c-2 has an email address but the walk-in memo still has nobody to remind
        assert result.skipped_no_contact == 1

    async def test_delivery_failure_counted(self, use_case, mock_notifier, today):
        mock_notifier.send.side_effect = NotificationDeliveryError("whatsapp", "+91", "timeout")

        result = await use_case.execute(today=today)

        assert result.failed == 1
        assert result.reminders_sent == 0
        assert result.reminded_memo_ids == []

    async def test_disabled_sends_nothing(self, use_case, mock_notifier, settings, today):
        settings.notifications.enabled = False

        result = await use_case.execute(today=today)

        assert result.total_overdue == 3
        assert result.reminders_sent == 0
        mock_notifier.send.assert_not_awaited()

    async def test_nothing_overdue(self, use_case, mock_sale_store, mock_notifier):
        mock_sale_store.list_memos.return_value = []

        result = await use_case.execute(today=date(2024, 2, 1))

        assert result.total_overdue == 0
        mock_notifier.send.assert_not_awaited()

    async def test_pages_through_every_overdue_memo(
        self, use_case, mock_sale_store, make_memo, monkeypatch, today
    ):
        monkeypatch.setattr(remind_overdue_memos, "REMINDER_PAGE_SIZE", 2)
        pages = [
            [make_memo(memo_id=n, due=date(2024, 3, n)) for n in (1, 2)],
            [make_memo(memo_id=n, due=date(2024, 3, n)) for n in (3, 4)],
            [make_memo(memo_id=5, due=date(2024, 3, 5))],
        ]
        mock_sale_store.list_memos.side_effect = pages

        result = await use_case.execute(today=today)

        assert result.total_overdue == 5
        assert result.reminders_sent == 5
        offsets = [call.kwargs["offset"] for call in mock_sale_store.list_memos.await_args_list]
        assert offsets == [0, 2, 4]
