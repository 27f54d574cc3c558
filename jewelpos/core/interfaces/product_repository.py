"""Abstract interface for product storage."""

from abc import ABC, abstractmethod

from jewelpos.core.entities.product import Product


class IProductRepository(ABC):
    """Interface for product persistence and stock mutation."""

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """Create a new product."""
        pass

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def decrement_stock(
        self, product_id: str, quantity: int, allow_negative: bool = False
    ) -> int:
        """
        Atomically subtract quantity from stock and return the new level.

        The admissibility check and the write are one statement, so two
        concurrent callers can never both take the last unit.

        Raises:
            InsufficientStockError: stock is below quantity and
                allow_negative is False
            ProductNotFoundError: product does not exist
        """
        pass

    @abstractmethod
    async def increment_stock(self, product_id: str, quantity: int) -> int:
        """Atomically add quantity to stock and return the new level."""
        pass
