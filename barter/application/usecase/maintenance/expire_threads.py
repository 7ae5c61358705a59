"""Expire stale threads use case."""

from datetime import datetime
from typing import Optional

import logfire
from pydantic import BaseModel

from barter.domain.service import NegotiationService


class ExpireThreadsRequest(BaseModel):
    """Expire stale threads request."""

    now: Optional[datetime] = None  # Reference time, defaults to the clock


class ExpireThreadsResponse(BaseModel):
    """Expire stale threads response."""

    expired_count: int


class ExpireThreadsUseCase:
    """Use case for the periodic inactivity sweep."""

    def __init__(self, negotiation_service: NegotiationService) -> None:
        """Initialize expire threads use case.

        Args:
            negotiation_service: Negotiation domain service
        """
        self.negotiation_service = negotiation_service

    async def execute(self, request: ExpireThreadsRequest) -> ExpireThreadsResponse:
        """Execute the sweep. Safe to run repeatedly."""
        with logfire.span("expire_threads.execute"):
            count = await self.negotiation_service.expire_stale_threads(request.now)
            return ExpireThreadsResponse(expired_count=count)
