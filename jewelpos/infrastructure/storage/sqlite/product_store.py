"""SQLite implementation of product storage."""

from datetime import datetime
from decimal import Decimal

import aiosqlite

from jewelpos.config import get_logger
from jewelpos.core.entities.product import Product
from jewelpos.core.exceptions import InsufficientStockError, ProductNotFoundError
from jewelpos.core.interfaces.product_repository import IProductRepository
from jewelpos.infrastructure.storage.sqlite.connection import (
    database_errors,
    get_connection,
    get_transaction,
    parse_datetime,
)

logger = get_logger(__name__)


class SQLiteProductStore(IProductRepository):
    """SQLite implementation of product persistence."""

    async def create(self, product: Product) -> Product:
        """Create a new product."""
        now = datetime.utcnow()
        product.created_at = now
        product.updated_at = now
        with database_errors("create_product"):
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO products (
                        id, sku, name, category, price,
                        stock_quantity, min_stock_level, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        product.id,
                        product.sku,
                        product.name,
                        product.category,
                        str(product.price),
                        product.stock_quantity,
                        product.min_stock_level,
                        product.created_at.isoformat(),
                        product.updated_at.isoformat(),
                    ),
                )
        logger.info("product_created", product_id=product.id, sku=product.sku)
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID."""
        with database_errors("get_product"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM products WHERE id = ?", (product_id,)
                )
                row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_product(row)

    async def decrement_stock(
        self, product_id: str, quantity: int, allow_negative: bool = False
    ) -> int:
        """
        Subtract stock in one conditional UPDATE.

        When the guard clause rejects the row, a follow-up read tells a
        missing product apart from a short one.
        """
        sql = (
            "UPDATE products SET stock_quantity = stock_quantity - ?, updated_at = ? "
            "WHERE id = ?"
        )
        params: tuple = (quantity, datetime.utcnow().isoformat(), product_id)
        if not allow_negative:
            sql += " AND stock_quantity >= ?"
            params += (quantity,)
        sql += " RETURNING stock_quantity"

        with database_errors("decrement_stock"):
            async with get_transaction() as conn:
                cursor = await conn.execute(sql, params)
                row = await cursor.fetchone()
                await cursor.close()

                if row is None:
                    cursor = await conn.execute(
                        "SELECT stock_quantity FROM products WHERE id = ?",
                        (product_id,),
                    )
                    current = await cursor.fetchone()
                    if current is None:
                        raise ProductNotFoundError(product_id)
                    raise InsufficientStockError(
                        product_id=product_id,
                        requested=quantity,
                        available=current["stock_quantity"],
                    )

        new_stock = row["stock_quantity"]
        logger.info(
            "stock_decremented",
            product_id=product_id,
            quantity=quantity,
            new_stock=new_stock,
        )
        return new_stock

    async def increment_stock(self, product_id: str, quantity: int) -> int:
        """Add stock back in one UPDATE."""
        with database_errors("increment_stock"):
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE products
                    SET stock_quantity = stock_quantity + ?, updated_at = ?
                    WHERE id = ?
                    RETURNING stock_quantity
                    """,
                    (quantity, datetime.utcnow().isoformat(), product_id),
                )
                row = await cursor.fetchone()
                await cursor.close()
                if row is None:
                    raise ProductNotFoundError(product_id)

        new_stock = row["stock_quantity"]
        logger.info(
            "stock_incremented",
            product_id=product_id,
            quantity=quantity,
            new_stock=new_stock,
        )
        return new_stock

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            sku=row["sku"],
            name=row["name"],
            category=row["category"],
            price=Decimal(row["price"]),
            stock_quantity=row["stock_quantity"],
            min_stock_level=row["min_stock_level"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
