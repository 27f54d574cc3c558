"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from jewelpos.config import Settings, reset_settings
from jewelpos.core.entities import (
    CommitStatus,
    Customer,
    DocumentType,
    MemoStatus,
    PaymentStatus,
    Product,
    SaleDocument,
    SaleLineItem,
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point storage at a per-test directory and drop cached singletons."""
    import jewelpos.infrastructure.storage.sqlite.connection as conn_module
    from jewelpos.infrastructure.notifications import reset_notification_dispatcher

    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    reset_notification_dispatcher()
    conn_module._pool = None
    yield
    conn_module._pool = None
    reset_notification_dispatcher()
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    """Settings with one admin recipient for low stock alerts."""
    s = Settings()
    s.notifications.admin_recipients = ["+910000000001"]
    return s


@pytest.fixture
async def migrated_db() -> AsyncGenerator[Path, None]:
    """Fresh database with all migrations applied; pool closed afterwards."""
    from jewelpos.config import get_settings
    from jewelpos.infrastructure.storage.sqlite import close_pool
    from jewelpos.infrastructure.storage.sqlite.migrations import initialize_database

    db_path = get_settings().storage.db_path
    results = await initialize_database(db_path, create_backup_before=False)
    assert all(r.success for r in results)
    try:
        yield db_path
    finally:
        await close_pool()


def _product(
    product_id: str = "p-ring",
    stock: int = 5,
    price: str = "100",
    min_stock: int = 1,
) -> Product:
    return Product(
        id=product_id,
        sku=f"SKU-{product_id.upper()}",
        name=f"Gold {product_id.split('-')[-1]}",
        category="rings",
        price=Decimal(price),
        stock_quantity=stock,
        min_stock_level=min_stock,
    )


def _customer(customer_id: str = "c-1", phone: str = "+919999999999") -> Customer:
    return Customer(
        id=customer_id,
        full_name="Asha Rao",
        phone=phone,
        email="asha@example.com",
    )


def _memo(
    memo_id: int = 10,
    status: MemoStatus = MemoStatus.PENDING,
    due: date | None = None,
    items: list[tuple[str, int]] | None = None,
    commit_status: CommitStatus = CommitStatus.COMMITTED,
) -> SaleDocument:
    """Committed memo with 100.00 lines, 5% discount and 3% tax."""
    lines = items or [("p-ring", 2)]
    sale_items = [
        SaleLineItem(
            id=index + 1,
            sale_id=memo_id,
            product_id=product_id,
            product_name=f"Gold {product_id}",
            sku=f"SKU-{product_id.upper()}",
            quantity=quantity,
            unit_price=Decimal("100"),
            discount_percentage=Decimal("10"),
            total_price=Decimal("90.00") * quantity,
        )
        for index, (product_id, quantity) in enumerate(lines)
    ]
    return SaleDocument(
        id=memo_id,
        invoice_number="MEM-1700000000000AB12",
        document_type=DocumentType.MEMO,
        customer_id="c-1",
        sale_date=datetime(2024, 3, 1, 10, 0),
        memo_due_date=due or date(2024, 3, 16),
        memo_status=status,
        subtotal=Decimal("180.00"),
        discount_percentage=Decimal("5"),
        discount_amount=Decimal("9.00"),
        tax_percentage=Decimal("3"),
        tax_amount=Decimal("5.13"),
        total_amount=Decimal("176.13"),
        payment_method="pending",
        payment_status=PaymentStatus.PENDING,
        created_by="staff-1",
        commit_status=commit_status,
        items=sale_items,
    )


@pytest.fixture
def today() -> date:
    return date(2024, 3, 10)


@pytest.fixture
def make_product():
    """Factory for catalog products."""
    return _product


@pytest.fixture
def make_customer():
    """Factory for customers."""
    return _customer


@pytest.fixture
def make_memo():
    """Factory for committed memos."""
    return _memo
