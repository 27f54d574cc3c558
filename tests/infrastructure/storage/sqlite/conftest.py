"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from jewelpos.infrastructure.storage.sqlite import (
    SQLiteCustomerStore,
    SQLiteInventoryLogStore,
    SQLiteProductStore,
    SQLiteSaleStore,
)


@pytest.fixture
def product_store() -> SQLiteProductStore:
    return SQLiteProductStore()


@pytest.fixture
def customer_store() -> SQLiteCustomerStore:
    return SQLiteCustomerStore()


@pytest.fixture
def sale_store() -> SQLiteSaleStore:
    return SQLiteSaleStore()


@pytest.fixture
def log_store() -> SQLiteInventoryLogStore:
    return SQLiteInventoryLogStore()


@pytest.fixture
async def seeded_db(
    migrated_db: Path,
    product_store: SQLiteProductStore,
    customer_store: SQLiteCustomerStore,
    make_product,
    make_customer,
) -> AsyncGenerator[Path, None]:
    """Migrated database with two products and one customer."""
    await product_store.create(make_product("p-ring", stock=5))
    await product_store.create(make_product("p-chain", stock=3, price="250"))
    await customer_store.create(make_customer("c-1"))
    yield migrated_db
