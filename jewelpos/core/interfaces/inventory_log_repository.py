"""Abstract interface for the inventory audit trail."""

from abc import ABC, abstractmethod

from jewelpos.core.entities.inventory import InventoryLogEntry


class IInventoryLogRepository(ABC):
    """Interface for append-only inventory log persistence."""

    @abstractmethod
    async def append(self, entry: InventoryLogEntry) -> InventoryLogEntry:
        """Append a log entry."""
        pass

    @abstractmethod
    async def list_by_reference(self, reference_id: int) -> list[InventoryLogEntry]:
        """Get all entries referencing a sale document, oldest first."""
        pass
