"""
Webhook notification dispatcher.

POSTs each notification as JSON to an SMS/WhatsApp/email gateway and
records the outcome in ``notification_logs``. Transport errors are retried
with exponential backoff; HTTP error replies are not.
"""

import time

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from jewelpos.config import get_logger, get_settings
from jewelpos.core.entities.notification import NotificationChannel, NotificationPayload
from jewelpos.core.exceptions import ConfigurationError, NotificationDeliveryError
from jewelpos.core.interfaces.notification import INotificationDispatcher
from jewelpos.infrastructure.notifications.log_dispatcher import record_notification

logger = get_logger(__name__)


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "notification_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


class WebhookNotificationDispatcher(INotificationDispatcher):
    """Delivers notifications through an HTTP gateway."""

    def __init__(
        self,
        url: str | None = None,
        timeout: int | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.url = url or settings.notifications.webhook_url
        if not self.url or not self.url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Notification webhook URL must be http(s): {self.url!r}")
        self.timeout = timeout or settings.notifications.timeout
        self.max_retries = max_retries or settings.notifications.max_retries
        self.shop_name = settings.notifications.shop_name
        self._transport = transport

    async def _post(self, body: dict) -> httpx.Response:
        @retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=_log_retry,
            reraise=True,
        )
        async def _do_post() -> httpx.Response:
            async with httpx.AsyncClient(
                timeout=self.timeout + 5, transport=self._transport
            ) as client:
                return await client.post(self.url, json=body, timeout=self.timeout)

        return await _do_post()

    async def send(
        self,
        channel: NotificationChannel,
        recipient: str,
        payload: NotificationPayload,
    ) -> None:
        """
        Send one notification.

        Raises:
            NotificationDeliveryError: gateway unreachable or non-2xx reply
        """
        body = {
            "channel": channel.value,
            "to": recipient,
            "kind": payload.kind.value,
            "message": payload.message,
            "reference": payload.reference,
            "sender": self.shop_name,
            "data": payload.data,
        }

        start_time = time.time()
        try:
            response = await self._post(body)
        except httpx.HTTPError as e:
            await record_notification(channel, recipient, payload, status="failed", error=str(e))
            raise NotificationDeliveryError(channel.value, recipient, str(e)) from e

        if response.status_code >= 300:
            reason = f"HTTP {response.status_code}: {response.text[:200]}"
            await record_notification(channel, recipient, payload, status="failed", error=reason)
            raise NotificationDeliveryError(channel.value, recipient, reason)

        await record_notification(channel, recipient, payload, status="sent")
        logger.info(
            "notification_sent",
            channel=channel.value,
            recipient=recipient,
            kind=payload.kind.value,
            elapsed_ms=int((time.time() - start_time) * 1000),
        )
