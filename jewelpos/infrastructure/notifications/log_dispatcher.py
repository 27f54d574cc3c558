"""
Notification dispatcher that records messages in ``notification_logs``.

Used when no delivery gateway is configured: staff can read queued
receipts and alerts from the table and send them by hand.
"""

from datetime import datetime

from jewelpos.config import get_logger
from jewelpos.core.entities.notification import NotificationChannel, NotificationPayload
from jewelpos.core.interfaces.notification import INotificationDispatcher
from jewelpos.infrastructure.storage.sqlite.connection import (
    database_errors,
    get_transaction,
)

logger = get_logger(__name__)


async def record_notification(
    channel: NotificationChannel,
    recipient: str,
    payload: NotificationPayload,
    status: str = "sent",
    error: str | None = None,
) -> int:
    """Insert one notification_logs row and return its id."""
    with database_errors("record_notification"):
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO notification_logs (
                    channel, recipient, kind, message, reference, status, error, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    channel.value,
                    recipient,
                    payload.kind.value,
                    payload.message,
                    payload.reference,
                    status,
                    error,
                    datetime.utcnow().isoformat(),
                ),
            )
            return cursor.lastrowid


class LogNotificationDispatcher(INotificationDispatcher):
    """Queues notifications in the database instead of sending them."""

    async def send(
        self,
        channel: NotificationChannel,
        recipient: str,
        payload: NotificationPayload,
    ) -> None:
        log_id = await record_notification(channel, recipient, payload, status="queued")
        logger.info(
            "notification_queued",
            log_id=log_id,
            channel=channel.value,
            recipient=recipient,
            kind=payload.kind.value,
            reference=payload.reference,
        )
