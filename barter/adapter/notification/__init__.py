"""Notification service adapter."""

from .client import HttpNotificationPublisher, RecordingNotificationPublisher

__all__ = ["HttpNotificationPublisher", "RecordingNotificationPublisher"]
