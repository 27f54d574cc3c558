"""Inventory audit trail entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from jewelpos.core.entities.sale import MemoStatus


class InventoryChangeType(str, Enum):
    """Reasons a product's stock changed."""

    SOLD = "sold"
    RETURNED = "returned"
    RESTOCKED = "restocked"


class InventoryLogEntry(BaseModel):
    """Append-only record of one stock change."""

    id: int | None = None
    product_id: str
    change_type: InventoryChangeType
    quantity_change: int  # signed: negative for sold
    previous_quantity: int
    new_quantity: int
    reference_id: int | None = None  # sale document id
    created_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class MemoReturnRecord(BaseModel):
    """What one memo return wrote: the new status, its log rows and what is still out."""

    memo_id: int
    memo_status: MemoStatus
    entries: list[InventoryLogEntry] = Field(default_factory=list)
    outstanding: dict[str, int] = Field(default_factory=dict)
