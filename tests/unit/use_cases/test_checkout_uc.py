"""Tests for CheckoutUseCase."""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from jewelpos.application.dto.requests import CartLineRequest, CheckoutRequest
from jewelpos.application.use_cases.checkout import CheckoutUseCase
from jewelpos.core.entities import (
    CommitStatus,
    DocumentType,
    InventoryChangeType,
    MemoStatus,
    NotificationChannel,
    NotificationKind,
    PaymentStatus,
)
from jewelpos.core.exceptions import (
    CustomerNotFoundError,
    DatabaseError,
    DuplicateInvoiceNumberError,
    EmptyCartError,
    InsufficientStockError,
    MissingCustomerError,
    NotificationDeliveryError,
    ProductNotFoundError,
    StorageFailureError,
    UnauthenticatedError,
)
from jewelpos.infrastructure.identity import RequestIdentityProvider, SystemIdentityProvider


@pytest.fixture
def products(make_product):
    return {
        "p-ring": make_product("p-ring", stock=5, price="100", min_stock=1),
        "p-chain": make_product("p-chain", stock=3, price="250", min_stock=0),
    }


@pytest.fixture
def mock_product_store(products):
    store = AsyncMock()
    store.get_by_id.side_effect = lambda pid: products.get(pid)
    store.decrement_stock.side_effect = (
        lambda pid, qty, allow_negative=False: products[pid].stock_quantity - qty
    )
    return store


@pytest.fixture
def mock_customer_store(make_customer):
    store = AsyncMock()
    customers = {"c-1": make_customer("c-1")}
    store.get_by_id.side_effect = lambda cid: customers.get(cid)
    return store


@pytest.fixture
def mock_sale_store():
    store = AsyncMock()
    store.create.return_value = 1
    store.add_line_items.side_effect = lambda sale_id, items: items
    return store


@pytest.fixture
def mock_log_store():
    store = AsyncMock()
    store.append.side_effect = lambda entry: entry
    return store


@pytest.fixture
def mock_notifier():
    return AsyncMock()


def _use_case(
    settings,
    product_store,
    customer_store,
    sale_store,
    log_store,
    notifier,
    actor: str | None = "staff-1",
) -> CheckoutUseCase:
    return CheckoutUseCase(
        product_store=product_store,
        customer_store=customer_store,
        sale_store=sale_store,
        inventory_log_store=log_store,
        notifier=notifier,
        identity=RequestIdentityProvider(actor),
        settings=settings,
    )


@pytest.fixture
def use_case(
    settings, mock_product_store, mock_customer_store, mock_sale_store, mock_log_store, mock_notifier
):
    return _use_case(
        settings, mock_product_store, mock_customer_store, mock_sale_store, mock_log_store, mock_notifier
    )


def _cart(*lines: tuple[str, int], **kwargs) -> CheckoutRequest:
    return CheckoutRequest(
        items=[CartLineRequest(product_id=pid, quantity=qty) for pid, qty in lines],
        **kwargs,
    )


class TestCheckoutInvoice:
    async def test_commits_invoice(self, use_case, mock_sale_store, mock_product_store):
        request = CheckoutRequest(
            items=[CartLineRequest(product_id="p-ring", quantity=2, discount_percentage=Decimal("10"))],
            discount_percentage=Decimal("5"),
            tax_percentage=Decimal("3"),
        )
        result = await use_case.execute(request)

        sale = result.sale
        assert sale.id == 1
        assert sale.document_type == DocumentType.INVOICE
        assert sale.subtotal == Decimal("180.00")
        assert sale.discount_amount == Decimal("9.00")
        assert sale.tax_amount == Decimal("5.13")
        assert sale.total_amount == Decimal("176.13")
        assert sale.payment_status == PaymentStatus.COMPLETED
        assert sale.created_by == "staff-1"
        assert sale.commit_status == CommitStatus.COMMITTED

        mock_product_store.decrement_stock.assert_awaited_once_with("p-ring", 2, allow_negative=False)
        mock_sale_store.update_commit_status.assert_awaited_once_with(1, CommitStatus.COMMITTED)

    async def test_writes_sold_log_entries(self, use_case, mock_log_store):
        await use_case.execute(_cart(("p-ring", 2)))

        entry = mock_log_store.append.await_args.args[0]
        assert entry.change_type == InventoryChangeType.SOLD
        assert entry.quantity_change == -2
        assert entry.previous_quantity == 5
        assert entry.new_quantity == 3
        assert entry.reference_id == 1
        assert entry.created_by == "staff-1"

    async def test_unit_price_defaults_to_product_price(self, use_case):
        result = await use_case.execute(_cart(("p-chain", 1)))
        assert result.sale.items[0].unit_price == Decimal("250")
        assert result.sale.total_amount == Decimal("250.00")

    async def test_unit_price_override(self, use_case):
        request = CheckoutRequest(
            items=[CartLineRequest(product_id="p-chain", quantity=1, unit_price=Decimal("199.99"))]
        )
        result = await use_case.execute(request)
        assert result.sale.total_amount == Decimal("199.99")

    async def test_repeated_product_decremented_once(self, use_case, mock_product_store):
        result = await use_case.execute(_cart(("p-ring", 1), ("p-ring", 2)))

        mock_product_store.decrement_stock.assert_awaited_once_with("p-ring", 3, allow_negative=False)
        assert len(result.sale.items) == 2
        assert result.stock_changes[0].new_stock == 2


class TestCheckoutMemo:
    async def test_commits_memo(self, use_case):
        result = await use_case.execute(
            _cart(("p-ring", 1), document_type=DocumentType.MEMO, customer_id="c-1", memo_days=7)
        )
        sale = result.sale
        assert sale.document_type == DocumentType.MEMO
        assert sale.invoice_number.startswith("MEM-")
        assert sale.memo_status == MemoStatus.PENDING
        assert sale.payment_method == "pending"
        assert sale.payment_status == PaymentStatus.PENDING
        assert sale.memo_due_date == sale.sale_date.date() + timedelta(days=7)

    async def test_memo_requires_customer(self, use_case, mock_sale_store):
        with pytest.raises(MissingCustomerError):
            await use_case.execute(_cart(("p-ring", 1), document_type=DocumentType.MEMO))
        mock_sale_store.create.assert_not_awaited()

    async def test_memo_customer_policy_can_be_relaxed(self, use_case, settings):
        settings.sales.require_customer_for_memo = False
        result = await use_case.execute(_cart(("p-ring", 1), document_type=DocumentType.MEMO))
        assert result.sale.customer_id is None


class TestCheckoutPreconditions:
    async def test_unauthenticated(
        self, settings, mock_product_store, mock_customer_store, mock_sale_store, mock_log_store, mock_notifier
    ):
        use_case = _use_case(
            settings, mock_product_store, mock_customer_store, mock_sale_store,
            mock_log_store, mock_notifier, actor="  ",
        )
        with pytest.raises(UnauthenticatedError):
            await use_case.execute(_cart(("p-ring", 1)))
        mock_product_store.get_by_id.assert_not_awaited()

    async def test_empty_cart(self, use_case, mock_sale_store):
        with pytest.raises(EmptyCartError):
            await use_case.execute(CheckoutRequest())
        mock_sale_store.create.assert_not_awaited()

    async def test_unknown_customer(self, use_case, mock_sale_store):
        with pytest.raises(CustomerNotFoundError):
            await use_case.execute(_cart(("p-ring", 1), customer_id="nobody"))
        mock_sale_store.create.assert_not_awaited()

    async def test_unknown_product(self, use_case, mock_sale_store):
        with pytest.raises(ProductNotFoundError):
            await use_case.execute(_cart(("p-missing", 1)))
        mock_sale_store.create.assert_not_awaited()

    async def test_insufficient_stock_writes_nothing(
        self, use_case, mock_sale_store, mock_product_store, mock_log_store
    ):
        with pytest.raises(InsufficientStockError) as exc_info:
            await use_case.execute(_cart(("p-chain", 2), ("p-chain", 2)))

        assert exc_info.value.requested == 4
        assert exc_info.value.available == 3
        mock_sale_store.create.assert_not_awaited()
        mock_product_store.decrement_stock.assert_not_awaited()
        mock_log_store.append.assert_not_awaited()

    async def test_negative_stock_policy(self, use_case, settings, mock_product_store):
        settings.inventory.allow_negative_stock = True
        result = await use_case.execute(_cart(("p-chain", 4)))
        assert result.stock_changes[0].new_stock == -1
        mock_product_store.decrement_stock.assert_awaited_once_with("p-chain", 4, allow_negative=True)


class TestCheckoutCommitFailures:
    async def test_lost_stock_race_restores_and_marks_failed(
        self, use_case, mock_product_store, mock_sale_store, mock_log_store
    ):
        mock_product_store.decrement_stock.side_effect = [
            3,
            InsufficientStockError("p-chain", requested=1, available=0),
        ]

        with pytest.raises(InsufficientStockError):
            await use_case.execute(_cart(("p-ring", 2), ("p-chain", 1)))

        mock_product_store.increment_stock.assert_awaited_once_with("p-ring", 2)
        mock_sale_store.update_commit_status.assert_awaited_once_with(1, CommitStatus.FAILED)
        mock_log_store.append.assert_not_awaited()

    async def test_line_item_failure_leaves_header_pending(self, use_case, mock_sale_store):
        mock_sale_store.add_line_items.side_effect = DatabaseError("add_line_items", "disk full")

        with pytest.raises(StorageFailureError) as exc_info:
            await use_case.execute(_cart(("p-ring", 1)))

        assert exc_info.value.step == "line_items"
        assert exc_info.value.sale_id == 1
        mock_sale_store.update_commit_status.assert_not_awaited()

    async def test_log_failure_reported(self, use_case, mock_log_store):
        mock_log_store.append.side_effect = DatabaseError("append_inventory_log", "locked")

        with pytest.raises(StorageFailureError) as exc_info:
            await use_case.execute(_cart(("p-ring", 1)))
        assert exc_info.value.step == "inventory_log"

    async def test_invoice_number_collision_retried(self, use_case, mock_sale_store):
        mock_sale_store.create.side_effect = [DuplicateInvoiceNumberError("INV-1"), 7]

        result = await use_case.execute(_cart(("p-ring", 1)))

        assert result.sale.id == 7
        assert mock_sale_store.create.await_count == 2

    async def test_invoice_number_collisions_exhausted(self, use_case, mock_sale_store):
        mock_sale_store.create.side_effect = DuplicateInvoiceNumberError("INV-1")

        with pytest.raises(DuplicateInvoiceNumberError):
            await use_case.execute(_cart(("p-ring", 1)))
        assert mock_sale_store.create.await_count == 3


class TestCheckoutNotifications:
    async def test_receipt_sent_to_customer(self, use_case, mock_notifier):
        result = await use_case.execute(
            _cart(("p-ring", 1), customer_id="c-1", notify_channel=NotificationChannel.WHATSAPP)
        )

        channel, recipient, payload = mock_notifier.send.await_args_list[0].args
        assert channel == NotificationChannel.WHATSAPP
        assert recipient == "+919999999999"
        assert payload.kind == NotificationKind.SALE_RECEIPT
        assert result.notifications_sent >= 1

    async def test_notification_failure_does_not_fail_checkout(
        self, use_case, mock_notifier, mock_sale_store
    ):
        mock_notifier.send.side_effect = NotificationDeliveryError("sms", "+91", "gateway down")

        result = await use_case.execute(
            _cart(("p-ring", 1), customer_id="c-1", notify_channel=NotificationChannel.SMS)
        )

        assert result.sale.commit_status == CommitStatus.COMMITTED
        assert result.notifications_sent == 0
        mock_sale_store.update_commit_status.assert_awaited_once_with(1, CommitStatus.COMMITTED)

    async def test_low_stock_alert_to_admins(self, use_case, mock_notifier):
        result = await use_case.execute(_cart(("p-ring", 4)))

        assert result.low_stock_product_ids == ["p-ring"]
        channel, recipient, payload = mock_notifier.send.await_args.args
        assert channel == NotificationChannel.SMS
        assert recipient == "+910000000001"
        assert payload.kind == NotificationKind.LOW_STOCK_ALERT

    async def test_no_alert_above_minimum(self, use_case, mock_notifier):
        result = await use_case.execute(_cart(("p-ring", 1)))
        assert result.low_stock_product_ids == []
        mock_notifier.send.assert_not_awaited()

    async def test_disabled_notifications(self, use_case, settings, mock_notifier):
        settings.notifications.enabled = False
        await use_case.execute(
            _cart(("p-ring", 4), customer_id="c-1", notify_channel=NotificationChannel.SMS)
        )
        mock_notifier.send.assert_not_awaited()


class TestCheckoutResponse:
    async def test_to_response(self, use_case):
        result = await use_case.execute(_cart(("p-ring", 1)))
        response = use_case.to_response(result)
        assert response.id == 1
        assert response.commit_status == "committed"
        assert response.items[0].product_id == "p-ring"
        assert response.urgency is None


def test_system_identity_default():
    assert SystemIdentityProvider().current_actor_id() == "system"
