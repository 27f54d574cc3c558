"""Outbound notification entities."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class NotificationChannel(str, Enum):
    """Delivery channels supported by the dispatcher."""

    SMS = "sms"
    WHATSAPP = "whatsapp"
    EMAIL = "email"


class NotificationKind(str, Enum):
    """What a notification is about."""

    SALE_RECEIPT = "sale_receipt"
    LOW_STOCK_ALERT = "low_stock_alert"
    MEMO_REMINDER = "memo_reminder"


class NotificationPayload(BaseModel):
    """Message body plus the context it was rendered from."""

    kind: NotificationKind
    message: str
    reference: str | None = None  # invoice number, product sku, ...
    data: dict[str, Any] = Field(default_factory=dict)
