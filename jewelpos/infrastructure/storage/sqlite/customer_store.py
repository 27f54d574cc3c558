"""SQLite implementation of customer storage."""

from datetime import datetime

import aiosqlite

from jewelpos.config import get_logger
from jewelpos.core.entities.customer import Customer
from jewelpos.core.interfaces.customer_repository import ICustomerRepository
from jewelpos.infrastructure.storage.sqlite.connection import (
    database_errors,
    get_connection,
    get_transaction,
    parse_datetime,
)

logger = get_logger(__name__)


class SQLiteCustomerStore(ICustomerRepository):
    """SQLite implementation of customer lookup."""

    async def create(self, customer: Customer) -> Customer:
        """Create a new customer."""
        customer.created_at = datetime.utcnow()
        with database_errors("create_customer"):
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO customers (
                        id, full_name, phone, email, address, loyalty_points, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        customer.id,
                        customer.full_name,
                        customer.phone,
                        customer.email,
                        customer.address,
                        customer.loyalty_points,
                        customer.created_at.isoformat(),
                    ),
                )
        logger.info("customer_created", customer_id=customer.id)
        return customer

    async def get_by_id(self, customer_id: str) -> Customer | None:
        """Get customer by ID."""
        with database_errors("get_customer"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM customers WHERE id = ?", (customer_id,)
                )
                row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_customer(row)

    @staticmethod
    def _row_to_customer(row: aiosqlite.Row) -> Customer:
        return Customer(
            id=row["id"],
            full_name=row["full_name"],
            phone=row["phone"] or "",
            email=row["email"],
            address=row["address"],
            loyalty_points=row["loyalty_points"],
            created_at=parse_datetime(row["created_at"]),
        )
