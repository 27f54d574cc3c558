"""Abstract interface for customer storage."""

from abc import ABC, abstractmethod

from jewelpos.core.entities.customer import Customer


class ICustomerRepository(ABC):
    """Interface for customer lookup."""

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        """Create a new customer."""
        pass

    @abstractmethod
    async def get_by_id(self, customer_id: str) -> Customer | None:
        """Get customer by ID."""
        pass
