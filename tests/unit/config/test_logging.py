"""Tests for structlog processors."""

from decimal import Decimal

from jewelpos.config import get_settings, reset_settings
from jewelpos.config.logging import add_shop_context, stringify_money


class TestShopContext:
    def test_stamps_shop_and_service(self, monkeypatch):
        monkeypatch.setenv("NOTIFY_SHOP_NAME", "Rao Jewellers")
        reset_settings()
        event = add_shop_context(None, "info", {"event": "sale_committed"})

        settings = get_settings()
        assert event["shop"] == "Rao Jewellers"
        assert event["service"] == f"{settings.app_name}/{settings.app_version}"
        assert event["environment"] == settings.environment

    def test_explicit_shop_kept(self):
        event = add_shop_context(None, "info", {"event": "x", "shop": "branch-2"})
        assert event["shop"] == "branch-2"


class TestStringifyMoney:
    def test_decimal_amounts_become_strings(self):
        event = stringify_money(
            None, "info", {"total": Decimal("176.13"), "subtotal": Decimal("180.00")}
        )
        assert event == {"total": "176.13", "subtotal": "180.00"}

    def test_other_fields_untouched(self):
        event = stringify_money(None, "info", {"units": 3, "amount": None, "total": "1.00"})
        assert event == {"units": 3, "amount": None, "total": "1.00"}
