"""Domain services."""

from .base import Service
from .cascade_service import CascadeResult, CascadeService
from .directory import UNKNOWN_SKILL, UNKNOWN_USER, Directory
from .match_service import MatchService, MatchStatistics
from .negotiation_service import NegotiationService
from .notification import (
    Notification,
    NotificationPublisher,
    NotificationType,
    publish_best_effort,
)

__all__ = [
    "UNKNOWN_SKILL",
    "UNKNOWN_USER",
    "CascadeResult",
    "CascadeService",
    "Directory",
    "MatchService",
    "MatchStatistics",
    "NegotiationService",
    "Notification",
    "NotificationPublisher",
    "NotificationType",
    "Service",
    "publish_best_effort",
]
