"""Core interfaces (ports) for dependency injection."""

from jewelpos.core.interfaces.customer_repository import ICustomerRepository
from jewelpos.core.interfaces.identity import IIdentityProvider
from jewelpos.core.interfaces.inventory_log_repository import IInventoryLogRepository
from jewelpos.core.interfaces.notification import INotificationDispatcher
from jewelpos.core.interfaces.product_repository import IProductRepository
from jewelpos.core.interfaces.sale_repository import ISaleRepository

__all__ = [
    # Storage interfaces
    "IProductRepository",
    "ICustomerRepository",
    "ISaleRepository",
    "IInventoryLogRepository",
    # Collaborator interfaces
    "INotificationDispatcher",
    "IIdentityProvider",
]
