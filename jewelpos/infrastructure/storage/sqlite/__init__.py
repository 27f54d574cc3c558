"""SQLite storage implementations."""

from jewelpos.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from jewelpos.infrastructure.storage.sqlite.customer_store import SQLiteCustomerStore
from jewelpos.infrastructure.storage.sqlite.inventory_log_store import (
    SQLiteInventoryLogStore,
)
from jewelpos.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from jewelpos.infrastructure.storage.sqlite.sale_store import SQLiteSaleStore

# Singleton instances
_product_store: SQLiteProductStore | None = None
_customer_store: SQLiteCustomerStore | None = None
_sale_store: SQLiteSaleStore | None = None
_inventory_log_store: SQLiteInventoryLogStore | None = None


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


async def get_customer_store() -> SQLiteCustomerStore:
    """Get singleton customer store instance."""
    global _customer_store
    if _customer_store is None:
        _customer_store = SQLiteCustomerStore()
    return _customer_store


async def get_sale_store() -> SQLiteSaleStore:
    """Get singleton sale store instance."""
    global _sale_store
    if _sale_store is None:
        _sale_store = SQLiteSaleStore()
    return _sale_store


async def get_inventory_log_store() -> SQLiteInventoryLogStore:
    """Get singleton inventory log store instance."""
    global _inventory_log_store
    if _inventory_log_store is None:
        _inventory_log_store = SQLiteInventoryLogStore()
    return _inventory_log_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteProductStore",
    "SQLiteCustomerStore",
    "SQLiteSaleStore",
    "SQLiteInventoryLogStore",
    # Factory functions
    "get_product_store",
    "get_customer_store",
    "get_sale_store",
    "get_inventory_log_store",
]
