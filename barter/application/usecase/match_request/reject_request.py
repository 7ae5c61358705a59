"""Reject match request use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import NegotiationService
from barter.domain.value import MatchRequestId, UserId

from .view import MatchRequestView


class RejectRequestRequest(BaseModel):
    """Reject match request request."""

    request_id: str
    actor_id: str
    reason: Optional[str] = None


class RejectRequestResponse(BaseModel):
    """Reject match request response."""

    request: MatchRequestView


class RejectRequestUseCase:
    """Use case for rejecting a proposal."""

    def __init__(self, negotiation_service: NegotiationService) -> None:
        """Initialize reject use case.

        Args:
            negotiation_service: Negotiation domain service
        """
        self.negotiation_service = negotiation_service

    async def execute(self, request: RejectRequestRequest) -> RejectRequestResponse:
        """Execute reject flow."""
        rejected = await retry_on_conflict(
            lambda: self.negotiation_service.reject(
                request_id=MatchRequestId(UUID(request.request_id)),
                actor_id=UserId(UUID(request.actor_id)),
                reason=request.reason,
            )
        )
        return RejectRequestResponse(request=MatchRequestView.from_domain(rejected))
