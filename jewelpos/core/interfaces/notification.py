"""Abstract interface for outbound notifications."""

from abc import ABC, abstractmethod

from jewelpos.core.entities.notification import NotificationChannel, NotificationPayload


class INotificationDispatcher(ABC):
    """Sends SMS, WhatsApp and email messages."""

    @abstractmethod
    async def send(
        self,
        channel: NotificationChannel,
        recipient: str,
        payload: NotificationPayload,
    ) -> None:
        """Send one notification. Implementations may raise on failure."""
        pass
