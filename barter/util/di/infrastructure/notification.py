"""Notification infrastructure providers."""

from dishka import Scope, provide

from barter.adapter.notification import HttpNotificationPublisher
from barter.config import Settings
from barter.domain.service import NotificationPublisher
from barter.util.di.base import ProviderBase


class NotificationProvider(ProviderBase):
    """Notification component base."""

    __mock_component__ = "notification"


class ProdNotificationProvider(NotificationProvider):
    """Production notification provider posting to the notification service."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notification_publisher(self, settings: Settings) -> NotificationPublisher:
        """Provide HTTP notification publisher."""
        return HttpNotificationPublisher(
            url=settings.services.notification_url,
            timeout_seconds=settings.services.timeout_seconds,
        )
