"""Domain layer DI providers."""

from datetime import datetime, timezone
from functools import partial

from dishka import Scope, provide

from barter.config import NegotiationSettings
from barter.domain.repository import UnitOfWork
from barter.domain.service import (
    CascadeService,
    Directory,
    MatchService,
    NegotiationService,
    NotificationPublisher,
)
from barter.util.di.base import ProviderBase

utc_now = partial(datetime.now, timezone.utc)


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with the unit of work.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_negotiation_service(
        self,
        uow: UnitOfWork,
        settings: NegotiationSettings,
        notification_publisher: NotificationPublisher,
        directory: Directory,
    ) -> NegotiationService:
        """Provide negotiation domain service."""
        return NegotiationService(
            uow=uow,
            settings=settings,
            notification_publisher=notification_publisher,
            directory=directory,
            clock=utc_now,
        )

    @provide
    def get_match_service(
        self, uow: UnitOfWork, notification_publisher: NotificationPublisher
    ) -> MatchService:
        """Provide match lifecycle domain service."""
        return MatchService(
            uow=uow, notification_publisher=notification_publisher, clock=utc_now
        )

    @provide
    def get_cascade_service(self, uow: UnitOfWork) -> CascadeService:
        """Provide cascade domain service."""
        return CascadeService(uow=uow, clock=utc_now)
