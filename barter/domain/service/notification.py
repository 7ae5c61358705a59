"""Outbound notification port."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

import logfire
from pydantic import Field

from barter.domain.value.common import ValueObject


class NotificationType(str, Enum):
    """Signals published for downstream delivery."""

    REQUEST_CREATED = "match_request.created"
    REQUEST_ACCEPTED = "match_request.accepted"
    REQUEST_REJECTED = "match_request.rejected"
    SESSION_COMPLETED = "match.session_completed"
    MATCH_COMPLETED = "match.completed"
    MATCH_DISSOLVED = "match.dissolved"


class Notification(ValueObject):
    """A fire-and-forget signal for the notification service."""

    type: NotificationType
    recipient_ids: list[UUID]
    subject_id: UUID  # Request or match the signal is about
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=datetime.now)


class NotificationPublisher:
    """Publishes notifications for downstream delivery.

    Publishing happens after the state change has been committed; callers
    treat any failure as non-fatal.
    """

    async def publish(self, notification: Notification) -> None:
        """Publish a notification.

        Args:
            notification: Notification to publish
        """
        raise NotImplementedError


async def publish_best_effort(
    publisher: NotificationPublisher, notification: Notification
) -> bool:
    """Publish a notification without letting failures escape.

    The negotiation state change has already been committed when this runs,
    so a failed publish is logged and reported, never raised.

    Args:
        publisher: Notification publisher
        notification: Notification to publish

    Returns:
        True if the notification was handed off, False otherwise
    """
    try:
        await publisher.publish(notification)
    except Exception as e:
        logfire.warn(
            "Notification publish failed",
            notification_type=notification.type.value,
            subject_id=str(notification.subject_id),
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    return True
