"""SQLite implementation of invoice and memo storage."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from jewelpos.config import get_logger
from jewelpos.core.entities.inventory import (
    InventoryChangeType,
    InventoryLogEntry,
    MemoReturnRecord,
)
from jewelpos.core.entities.sale import (
    CommitStatus,
    DocumentType,
    MemoStatus,
    PaymentStatus,
    SaleDocument,
    SaleLineItem,
)
from jewelpos.core.exceptions import (
    DuplicateInvoiceNumberError,
    InvalidInputError,
    InvalidStateError,
    ProductNotFoundError,
    SaleNotFoundError,
)
from jewelpos.core.interfaces.sale_repository import ISaleRepository
from jewelpos.core.services import memo_lifecycle
from jewelpos.infrastructure.storage.sqlite.connection import (
    database_errors,
    get_connection,
    get_transaction,
    parse_date,
    parse_datetime,
)

logger = get_logger(__name__)


class SQLiteSaleStore(ISaleRepository):
    """SQLite implementation of sale document storage."""

    async def create(self, header: SaleDocument) -> int:
        """Insert the header row only; items go through add_line_items."""
        now = datetime.utcnow()
        header.created_at = now
        header.updated_at = now
        with database_errors("create_sale"):
            try:
                async with get_transaction() as conn:
                    cursor = await conn.execute(
                        """
                        INSERT INTO sales (
                            invoice_number, document_type, customer_id, sale_date,
                            memo_due_date, memo_status, converted_from_memo_id,
                            subtotal, discount_percentage, discount_amount,
                            tax_percentage, tax_amount, total_amount,
                            payment_method, payment_status, notes, created_by,
                            commit_status, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            header.invoice_number,
                            header.document_type.value,
                            header.customer_id,
                            header.sale_date.isoformat(),
                            header.memo_due_date.isoformat() if header.memo_due_date else None,
                            header.memo_status.value if header.memo_status else None,
                            header.converted_from_memo_id,
                            str(header.subtotal),
                            str(header.discount_percentage),
                            str(header.discount_amount),
                            str(header.tax_percentage),
                            str(header.tax_amount),
                            str(header.total_amount),
                            header.payment_method,
                            header.payment_status.value,
                            header.notes,
                            header.created_by,
                            header.commit_status.value,
                            header.created_at.isoformat(),
                            header.updated_at.isoformat(),
                        ),
                    )
                    sale_id = cursor.lastrowid
            except aiosqlite.IntegrityError as e:
                if "sales.invoice_number" in str(e):
                    raise DuplicateInvoiceNumberError(header.invoice_number) from e
                raise

        header.id = sale_id
        logger.info(
            "sale_header_created",
            sale_id=sale_id,
            invoice_number=header.invoice_number,
            document_type=header.document_type.value,
        )
        return sale_id

    async def add_line_items(
        self, sale_id: int, items: list[SaleLineItem]
    ) -> list[SaleLineItem]:
        """Insert all items for one document in a single transaction."""
        now = datetime.utcnow()
        with database_errors("add_line_items"):
            async with get_transaction() as conn:
                for item in items:
                    item.sale_id = sale_id
                    item.created_at = now
                    cursor = await conn.execute(
                        """
                        INSERT INTO sale_items (
                            sale_id, product_id, product_name, sku, quantity,
                            unit_price, discount_percentage, total_price, created_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            sale_id,
                            item.product_id,
                            item.product_name,
                            item.sku,
                            item.quantity,
                            str(item.unit_price),
                            str(item.discount_percentage),
                            str(item.total_price),
                            item.created_at.isoformat(),
                        ),
                    )
                    item.id = cursor.lastrowid

        logger.info("sale_items_created", sale_id=sale_id, items=len(items))
        return items

    async def get_by_id(
        self, sale_id: int, with_items: bool = True
    ) -> SaleDocument | None:
        """Get a document, with its items unless told otherwise."""
        with database_errors("get_sale"):
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM sales WHERE id = ?", (sale_id,))
                row = await cursor.fetchone()
                if row is None:
                    return None

                items: list[SaleLineItem] = []
                if with_items:
                    cursor = await conn.execute(
                        "SELECT * FROM sale_items WHERE sale_id = ? ORDER BY id",
                        (sale_id,),
                    )
                    items = [self._row_to_item(r) for r in await cursor.fetchall()]

        sale = self._row_to_sale(row)
        sale.items = items
        return sale

    async def update_memo_status(
        self,
        sale_id: int,
        status: MemoStatus,
        expected: MemoStatus | None = None,
    ) -> bool:
        """Set memo status, optionally only when it still equals ``expected``."""
        sql = (
            "UPDATE sales SET memo_status = ?, updated_at = ? "
            "WHERE id = ? AND document_type = 'memo'"
        )
        params: tuple = (status.value, datetime.utcnow().isoformat(), sale_id)
        if expected is not None:
            sql += " AND memo_status = ?"
            params += (expected.value,)

        with database_errors("update_memo_status"):
            async with get_transaction() as conn:
                cursor = await conn.execute(sql, params)
                updated = cursor.rowcount > 0

        logger.info(
            "memo_status_updated" if updated else "memo_status_unchanged",
            sale_id=sale_id,
            status=status.value,
            expected=expected.value if expected else None,
        )
        return updated

    async def update_commit_status(self, sale_id: int, status: CommitStatus) -> None:
        """Record commit progress."""
        with database_errors("update_commit_status"):
            async with get_transaction() as conn:
                await conn.execute(
                    "UPDATE sales SET commit_status = ?, updated_at = ? WHERE id = ?",
                    (status.value, datetime.utcnow().isoformat(), sale_id),
                )
        logger.debug("commit_status_updated", sale_id=sale_id, status=status.value)

    async def list_memos(
        self,
        statuses: list[MemoStatus] | None = None,
        limit: int = 100,
        offset: int = 0,
        due_from: date | None = None,
        due_until: date | None = None,
    ) -> list[SaleDocument]:
        """List committed memos, earliest due date first."""
        sql = "SELECT * FROM sales WHERE document_type = 'memo' AND commit_status = 'committed'"
        params: list = []
        if statuses:
            placeholders = ", ".join("?" for _ in statuses)
            sql += f" AND memo_status IN ({placeholders})"
            params.extend(s.value for s in statuses)
        # ISO dates compare correctly as text
        if due_from is not None:
            sql += " AND memo_due_date >= ?"
            params.append(due_from.isoformat())
        if due_until is not None:
            sql += " AND memo_due_date <= ?"
            params.append(due_until.isoformat())
        sql += " ORDER BY memo_due_date, id LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with database_errors("list_memos"):
            async with get_connection() as conn:
                cursor = await conn.execute(sql, params)
                rows = await cursor.fetchall()
        return [self._row_to_sale(row) for row in rows]

    async def record_memo_return(
        self, memo_id: int, quantities: dict[str, int], actor_id: str
    ) -> MemoReturnRecord:
        """
        Restock, log and move the memo status in one transaction.

        The opening UPDATE takes SQLite's write lock, so the outstanding
        quantities read afterwards cannot change until commit. Any raise
        rolls the whole return back.
        """
        now = datetime.utcnow()
        entries: list[InventoryLogEntry] = []

        with database_errors("record_memo_return"):
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE sales SET updated_at = ?
                    WHERE id = ? AND document_type = 'memo'
                      AND commit_status = 'committed'
                      AND memo_status IN (?, ?)
                    RETURNING memo_status
                    """,
                    (
                        now.isoformat(),
                        memo_id,
                        MemoStatus.PENDING.value,
                        MemoStatus.PARTIALLY_RETURNED.value,
                    ),
                )
                locked = await cursor.fetchone()
                await cursor.close()
                if locked is None:
                    cursor = await conn.execute(
                        "SELECT memo_status, document_type FROM sales WHERE id = ?",
                        (memo_id,),
                    )
                    current = await cursor.fetchone()
                    if current is None:
                        raise SaleNotFoundError(memo_id)
                    raise InvalidStateError(
                        memo_id, current["memo_status"] or current["document_type"], "return"
                    )

                outstanding = await self._outstanding(conn, memo_id)
                for product_id, quantity in quantities.items():
                    available = outstanding.get(product_id, 0)
                    if quantity > available:
                        raise InvalidInputError(
                            "lines.quantity",
                            f"only {available} unit(s) of {product_id} outstanding",
                            quantity,
                        )

                for product_id, quantity in quantities.items():
                    cursor = await conn.execute(
                        """
                        UPDATE products
                        SET stock_quantity = stock_quantity + ?, updated_at = ?
                        WHERE id = ?
                        RETURNING stock_quantity
                        """,
                        (quantity, now.isoformat(), product_id),
                    )
                    stock = await cursor.fetchone()
                    await cursor.close()
                    if stock is None:
                        raise ProductNotFoundError(product_id)

                    entry = InventoryLogEntry(
                        product_id=product_id,
                        change_type=InventoryChangeType.RETURNED,
                        quantity_change=quantity,
                        previous_quantity=stock["stock_quantity"] - quantity,
                        new_quantity=stock["stock_quantity"],
                        reference_id=memo_id,
                        created_by=actor_id,
                        created_at=now,
                    )
                    cursor = await conn.execute(
                        """
                        INSERT INTO inventory_logs (
                            product_id, change_type, quantity_change,
                            previous_quantity, new_quantity, reference_id,
                            created_by, created_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            entry.product_id,
                            entry.change_type.value,
                            entry.quantity_change,
                            entry.previous_quantity,
                            entry.new_quantity,
                            entry.reference_id,
                            entry.created_by,
                            entry.created_at.isoformat(),
                        ),
                    )
                    entry.id = cursor.lastrowid
                    entries.append(entry)
                    outstanding[product_id] -= quantity

                status = memo_lifecycle.status_after_return(sum(outstanding.values()))
                await conn.execute(
                    "UPDATE sales SET memo_status = ? WHERE id = ?",
                    (status.value, memo_id),
                )

        logger.info(
            "memo_return_recorded",
            memo_id=memo_id,
            status=status.value,
            units=sum(quantities.values()),
        )
        return MemoReturnRecord(
            memo_id=memo_id,
            memo_status=status,
            entries=entries,
            outstanding={pid: qty for pid, qty in outstanding.items() if qty > 0},
        )

    @staticmethod
    async def _outstanding(conn: aiosqlite.Connection, memo_id: int) -> dict[str, int]:
        """Units sold on the memo minus units already returned, per product."""
        cursor = await conn.execute(
            """
            SELECT product_id, SUM(quantity) AS quantity
            FROM sale_items WHERE sale_id = ?
            GROUP BY product_id
            """,
            (memo_id,),
        )
        outstanding = {row["product_id"]: row["quantity"] for row in await cursor.fetchall()}

        cursor = await conn.execute(
            """
            SELECT product_id, SUM(quantity_change) AS quantity
            FROM inventory_logs
            WHERE reference_id = ? AND change_type = ?
            GROUP BY product_id
            """,
            (memo_id, InventoryChangeType.RETURNED.value),
        )
        for row in await cursor.fetchall():
            if row["product_id"] in outstanding:
                outstanding[row["product_id"]] -= row["quantity"]
        return outstanding

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row) -> SaleDocument:
        return SaleDocument(
            id=row["id"],
            invoice_number=row["invoice_number"],
            document_type=DocumentType(row["document_type"]),
            customer_id=row["customer_id"],
            sale_date=parse_datetime(row["sale_date"]),
            memo_due_date=parse_date(row["memo_due_date"]),
            memo_status=MemoStatus(row["memo_status"]) if row["memo_status"] else None,
            converted_from_memo_id=row["converted_from_memo_id"],
            subtotal=Decimal(row["subtotal"]),
            discount_percentage=Decimal(row["discount_percentage"]),
            discount_amount=Decimal(row["discount_amount"]),
            tax_percentage=Decimal(row["tax_percentage"]),
            tax_amount=Decimal(row["tax_amount"]),
            total_amount=Decimal(row["total_amount"]),
            payment_method=row["payment_method"],
            payment_status=PaymentStatus(row["payment_status"]),
            notes=row["notes"],
            created_by=row["created_by"],
            commit_status=CommitStatus(row["commit_status"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> SaleLineItem:
        return SaleLineItem(
            id=row["id"],
            sale_id=row["sale_id"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            sku=row["sku"],
            quantity=row["quantity"],
            unit_price=Decimal(row["unit_price"]),
            discount_percentage=Decimal(row["discount_percentage"]),
            total_price=Decimal(row["total_price"]),
            created_at=parse_datetime(row["created_at"]),
        )
