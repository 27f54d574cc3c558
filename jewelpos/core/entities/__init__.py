"""Core domain entities."""

from jewelpos.core.entities.customer import Customer
from jewelpos.core.entities.inventory import (
    InventoryChangeType,
    InventoryLogEntry,
    MemoReturnRecord,
)
from jewelpos.core.entities.notification import (
    NotificationChannel,
    NotificationKind,
    NotificationPayload,
)
from jewelpos.core.entities.pricing import (
    PricingBreakdown,
    PricingLine,
    quantize_money,
)
from jewelpos.core.entities.product import Product
from jewelpos.core.entities.sale import (
    CommitStatus,
    DocumentType,
    MemoStatus,
    MemoUrgency,
    PaymentStatus,
    SaleDocument,
    SaleLineItem,
)

__all__ = [
    # Catalog entities
    "Product",
    "Customer",
    # Sale entities
    "SaleDocument",
    "SaleLineItem",
    "DocumentType",
    "MemoStatus",
    "MemoUrgency",
    "PaymentStatus",
    "CommitStatus",
    # Pricing entities
    "PricingLine",
    "PricingBreakdown",
    "quantize_money",
    # Inventory entities
    "InventoryLogEntry",
    "InventoryChangeType",
    "MemoReturnRecord",
    # Notification entities
    "NotificationChannel",
    "NotificationKind",
    "NotificationPayload",
]
