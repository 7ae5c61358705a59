"""Notification service adapter."""

import httpx
import logfire

from barter.adapter.error import ProviderError
from barter.domain.service.notification import Notification, NotificationPublisher


class HttpNotificationPublisher(NotificationPublisher):
    """Posts notifications as JSON events to the notification service."""

    def __init__(self, url: str, timeout_seconds: float = 3.0) -> None:
        """Initialize publisher.

        Args:
            url: Event intake URL of the notification service
            timeout_seconds: Per-request timeout
        """
        self.url = url
        self.timeout_seconds = timeout_seconds

    async def publish(self, notification: Notification) -> None:
        """Publish a notification.

        Raises:
            ProviderError: If the notification service rejects or cannot
                receive the event
        """
        event = notification.model_dump(mode="json")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.url, json=event, timeout=self.timeout_seconds
                )

                if response.status_code >= 300:
                    logfire.error(
                        "Notification service rejected event",
                        status_code=response.status_code,
                        error=response.text,
                        notification_type=notification.type.value,
                    )
                    raise ProviderError(
                        "notification service", f"HTTP {response.status_code}"
                    )

        except httpx.HTTPError as e:
            logfire.error("Notification service HTTP error", error=str(e))
            raise ProviderError("notification service", str(e)) from e

        logfire.info(
            "Notification published",
            notification_type=notification.type.value,
            subject_id=str(notification.subject_id),
        )


class RecordingNotificationPublisher(NotificationPublisher):
    """Keeps published notifications in memory for development and testing."""

    def __init__(self) -> None:
        self.published: list[Notification] = []
        self.fail_with: Exception | None = None

    async def publish(self, notification: Notification) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.published.append(notification)
