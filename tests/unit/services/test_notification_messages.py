"""Tests for notification message rendering."""

from datetime import date
from decimal import Decimal

from jewelpos.core.entities import NotificationKind
from jewelpos.core.services import notification_messages


class TestSaleReceipt:
    def test_memo_receipt(self, make_memo, make_customer):
        payload = notification_messages.sale_receipt(make_memo(), make_customer(), shop_name="Shop")

        assert payload.kind == NotificationKind.SALE_RECEIPT
        assert payload.reference == "MEM-1700000000000AB12"
        assert "*Shop - Memo*" in payload.message
        assert "Dear Asha Rao" in payload.message
        assert "₹176.13" in payload.message
        assert "*Return By:* 2024-03-16" in payload.message
        assert payload.data["total_amount"] == "176.13"


class TestLowStockAlert:
    def test_alert(self, make_product):
        product = make_product(min_stock=2)
        payload = notification_messages.low_stock_alert(product, 1)
        assert payload.kind == NotificationKind.LOW_STOCK_ALERT
        assert "Current Stock: 1 units" in payload.message
        assert "Minimum Level: 2 units" in payload.message
        assert payload.data["product_id"] == product.id


class TestMemoReminder:
    def test_days_overdue(self, make_memo, make_customer):
        payload = notification_messages.memo_reminder(
            make_memo(due=date(2024, 3, 1)), make_customer(), today=date(2024, 3, 10)
        )
        assert payload.kind == NotificationKind.MEMO_REMINDER
        assert payload.data["days_overdue"] == 9
        assert "(9 days ago)" in payload.message


def test_format_amount_groups_thousands():
    assert notification_messages.format_amount(Decimal("125000.5"), "Rs ") == "Rs 125,000.50"
