"""Tests for SQLite inventory log store."""

from jewelpos.core.entities import InventoryChangeType, InventoryLogEntry


def _entry(sale_id: int, change_type: InventoryChangeType, quantity: int) -> InventoryLogEntry:
    return InventoryLogEntry(
        product_id="p-ring",
        change_type=change_type,
        quantity_change=quantity,
        previous_quantity=5,
        new_quantity=5 + quantity,
        reference_id=sale_id,
        created_by="staff-1",
    )


class TestInventoryLogStore:
    async def test_append_and_list(self, seeded_db, sale_store, log_store, make_memo):
        sale_id = await sale_store.create(make_memo())

        stored = await log_store.append(_entry(sale_id, InventoryChangeType.SOLD, -2))
        entries = await log_store.list_by_reference(sale_id)

        assert stored.id is not None
        assert [(e.change_type, e.quantity_change) for e in entries] == [
            (InventoryChangeType.SOLD, -2)
        ]

    async def test_sold_entry_is_idempotent(self, seeded_db, sale_store, log_store, make_memo):
        sale_id = await sale_store.create(make_memo())

        first = await log_store.append(_entry(sale_id, InventoryChangeType.SOLD, -2))
        second = await log_store.append(_entry(sale_id, InventoryChangeType.SOLD, -2))

        assert second.id == first.id
        assert len(await log_store.list_by_reference(sale_id)) == 1

    async def test_returns_accumulate(self, seeded_db, sale_store, log_store, make_memo):
        sale_id = await sale_store.create(make_memo())

        await log_store.append(_entry(sale_id, InventoryChangeType.RETURNED, 1))
        await log_store.append(_entry(sale_id, InventoryChangeType.RETURNED, 1))

        entries = await log_store.list_by_reference(sale_id)
        assert [e.quantity_change for e in entries] == [1, 1]

    async def test_unknown_reference(self, seeded_db, log_store):
        assert await log_store.list_by_reference(999) == []
