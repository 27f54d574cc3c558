"""
Notification dispatchers.

Picks the webhook dispatcher when a gateway URL is configured, otherwise
queues messages in the database.
"""

from jewelpos.config import get_logger, get_settings
from jewelpos.core.interfaces.notification import INotificationDispatcher
from jewelpos.infrastructure.notifications.log_dispatcher import (
    LogNotificationDispatcher,
    record_notification,
)
from jewelpos.infrastructure.notifications.webhook import WebhookNotificationDispatcher

logger = get_logger(__name__)

_dispatcher: INotificationDispatcher | None = None


def get_notification_dispatcher() -> INotificationDispatcher:
    """Get singleton dispatcher for the configured delivery mode."""
    global _dispatcher
    if _dispatcher is None:
        settings = get_settings()
        if settings.notifications.webhook_url:
            _dispatcher = WebhookNotificationDispatcher()
        else:
            _dispatcher = LogNotificationDispatcher()
        logger.info("notification_dispatcher_selected", dispatcher=type(_dispatcher).__name__)
    return _dispatcher


def reset_notification_dispatcher() -> None:
    """Reset dispatcher (for testing)."""
    global _dispatcher
    _dispatcher = None


__all__ = [
    "LogNotificationDispatcher",
    "WebhookNotificationDispatcher",
    "record_notification",
    "get_notification_dispatcher",
    "reset_notification_dispatcher",
]
