"""API tests for checkout and sale endpoints."""

from decimal import Decimal
from unittest.mock import AsyncMock

from jewelpos.api.dependencies import get_checkout_use_case
from jewelpos.core.exceptions import StorageFailureError


def _cart(*lines, **extra) -> dict:
    return {
        "items": [{"product_id": pid, "quantity": qty} for pid, qty in lines],
        **extra,
    }


class TestCheckout:
    async def test_invoice_created(self, shop, client, staff):
        response = await client.post(
            "/api/sales/checkout",
            json=_cart(("p-ring", 2), tax_percentage="3"),
            headers=staff,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["document_type"] == "invoice"
        assert data["invoice_number"].startswith("INV-")
        assert Decimal(data["total_amount"]) == Decimal("206.00")
        assert data["commit_status"] == "committed"
        assert data["created_by"] == "staff-1"
        assert len(data["items"]) == 1

    async def test_memo_created(self, shop, client, staff):
        response = await client.post(
            "/api/sales/checkout",
            json=_cart(("p-chain", 1), document_type="memo", customer_id="c-1", memo_days=7),
            headers=staff,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["memo_status"] == "pending"
        assert data["urgency"] == "Active"

    async def test_requires_actor(self, shop, client):
        response = await client.post("/api/sales/checkout", json=_cart(("p-ring", 1)))

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHENTICATED"

    async def test_insufficient_stock(self, shop, client, staff):
        response = await client.post(
            "/api/sales/checkout", json=_cart(("p-chain", 4)), headers=staff
        )

        assert response.status_code == 409
        data = response.json()
        assert data["error_code"] == "INSUFFICIENT_STOCK"
        assert data["details"]["available"] == 3
        assert data["hint"]

    async def test_empty_cart(self, shop, client, staff):
        response = await client.post("/api/sales/checkout", json={"items": []}, headers=staff)

        assert response.status_code == 400
        assert response.json()["error_code"] == "EMPTY_CART"

    async def test_memo_without_customer(self, shop, client, staff):
        response = await client.post(
            "/api/sales/checkout",
            json=_cart(("p-ring", 1), document_type="memo"),
            headers=staff,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "MISSING_CUSTOMER"

    async def test_body_validation(self, client, staff):
        response = await client.post(
            "/api/sales/checkout", json=_cart(("p-ring", 0)), headers=staff
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_storage_failure_maps_to_500(self, app, client, staff):
        use_case = AsyncMock()
        use_case.execute.side_effect = StorageFailureError("inventory_log", 7, "disk I/O error")
        app.dependency_overrides[get_checkout_use_case] = lambda: use_case

        response = await client.post(
            "/api/sales/checkout", json=_cart(("p-ring", 1)), headers=staff
        )

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "STORAGE_FAILURE"
        assert data["details"]["sale_id"] == 7


class TestPricingPreview:
    async def test_preview(self, client):
        response = await client.post(
            "/api/sales/pricing-preview",
            json={
                "items": [{"unit_price": "33.335", "quantity": 1}],
                "tax_percentage": "0",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["rounded"]["total"]) == Decimal("33.34")
        assert Decimal(data["exact"]["total"]) == Decimal("33.335")

    async def test_bad_percentage(self, client):
        response = await client.post(
            "/api/sales/pricing-preview",
            json={"items": [], "discount_percentage": "101"},
        )
        assert response.status_code == 400


class TestGetSale:
    async def test_get(self, shop, client, staff):
        created = await client.post(
            "/api/sales/checkout", json=_cart(("p-ring", 1)), headers=staff
        )
        sale_id = created.json()["id"]

        response = await client.get(f"/api/sales/{sale_id}")

        assert response.status_code == 200
        assert response.json()["invoice_number"] == created.json()["invoice_number"]

    async def test_not_found(self, migrated_db, client):
        response = await client.get("/api/sales/999")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SALE_NOT_FOUND"
