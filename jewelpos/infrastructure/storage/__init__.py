"""Storage infrastructure implementations."""

from jewelpos.infrastructure.storage.sqlite import (
    SQLiteCustomerStore,
    SQLiteInventoryLogStore,
    SQLiteProductStore,
    SQLiteSaleStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteProductStore",
    "SQLiteCustomerStore",
    "SQLiteSaleStore",
    "SQLiteInventoryLogStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
