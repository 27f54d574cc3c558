"""Best-effort notification delivery shared by the sale use cases."""

from jewelpos.config import get_logger
from jewelpos.core.entities.customer import Customer
from jewelpos.core.entities.notification import NotificationChannel, NotificationPayload
from jewelpos.core.interfaces.notification import INotificationDispatcher

logger = get_logger(__name__)


def recipient_for(customer: Customer, channel: NotificationChannel) -> str | None:
    """Contact address of a customer on a channel, if they have one."""
    if channel == NotificationChannel.EMAIL:
        return customer.email or None
    return customer.phone or None


async def send_best_effort(
    dispatcher: INotificationDispatcher,
    channel: NotificationChannel,
    recipient: str,
    payload: NotificationPayload,
) -> bool:
    """
    Send one notification, logging instead of raising on failure.

    Notifications never affect the outcome of the operation that
    triggered them.
    """
    try:
        await dispatcher.send(channel, recipient, payload)
        return True
    except Exception as e:
        logger.warning(
            "notification_failed",
            channel=channel.value,
            recipient=recipient,
            kind=payload.kind.value,
            reference=payload.reference,
            error=str(e),
        )
        return False
