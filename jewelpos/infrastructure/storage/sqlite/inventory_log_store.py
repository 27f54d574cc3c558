"""SQLite implementation of the inventory audit trail."""

import aiosqlite

from jewelpos.config import get_logger
from jewelpos.core.entities.inventory import InventoryChangeType, InventoryLogEntry
from jewelpos.core.interfaces.inventory_log_repository import IInventoryLogRepository
from jewelpos.infrastructure.storage.sqlite.connection import (
    database_errors,
    get_connection,
    get_transaction,
    parse_datetime,
)

logger = get_logger(__name__)


class SQLiteInventoryLogStore(IInventoryLogRepository):
    """Append-only inventory log. ``sold`` rows are unique per (sale, product)."""

    async def append(self, entry: InventoryLogEntry) -> InventoryLogEntry:
        """Append an entry; re-appending the same sold entry is a no-op."""
        with database_errors("append_inventory_log"):
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT OR IGNORE INTO inventory_logs (
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
                if cursor.rowcount == 0:
                    cursor = await conn.execute(
                        """
                        SELECT * FROM inventory_logs
                        WHERE reference_id = ? AND product_id = ? AND change_type = ?
                        """,
                        (entry.reference_id, entry.product_id, entry.change_type.value),
                    )
                    existing = await cursor.fetchone()
                    logger.info(
                        "inventory_log_already_recorded",
                        product_id=entry.product_id,
                        reference_id=entry.reference_id,
                    )
                    return self._row_to_entry(existing)
                entry.id = cursor.lastrowid

        logger.info(
            "inventory_log_appended",
            log_id=entry.id,
            product_id=entry.product_id,
            change_type=entry.change_type.value,
            quantity_change=entry.quantity_change,
        )
        return entry

    async def list_by_reference(self, reference_id: int) -> list[InventoryLogEntry]:
        """All entries for a sale document, oldest first."""
        with database_errors("list_inventory_logs"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM inventory_logs WHERE reference_id = ? ORDER BY id",
                    (reference_id,),
                )
                rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> InventoryLogEntry:
        return InventoryLogEntry(
            id=row["id"],
            product_id=row["product_id"],
            change_type=InventoryChangeType(row["change_type"]),
            quantity_change=row["quantity_change"],
            previous_quantity=row["previous_quantity"],
            new_quantity=row["new_quantity"],
            reference_id=row["reference_id"],
            created_by=row["created_by"],
            created_at=parse_datetime(row["created_at"]),
        )
