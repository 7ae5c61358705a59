"""List match requests use case."""

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from barter.domain.service import NegotiationService
from barter.domain.value import MatchRequestStatus, UserId

from .view import MatchRequestView


class RequestDirection(str, Enum):
    """Which side of the request the user is on."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


class ListRequestsRequest(BaseModel):
    """List match requests request."""

    user_id: str
    direction: RequestDirection
    status: Optional[MatchRequestStatus] = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListRequestsResponse(BaseModel):
    """List match requests response."""

    requests: list[MatchRequestView]
    limit: int
    offset: int


class ListRequestsUseCase:
    """Use case for a user's incoming or outgoing proposals."""

    def __init__(self, negotiation_service: NegotiationService) -> None:
        """Initialize list requests use case.

        Args:
            negotiation_service: Negotiation domain service
        """
        self.negotiation_service = negotiation_service

    async def execute(self, request: ListRequestsRequest) -> ListRequestsResponse:
        """Execute list requests flow (newest first)."""
        user_id = UserId(UUID(request.user_id))
        if request.direction == RequestDirection.INCOMING:
            found = await self.negotiation_service.list_incoming(
                user_id, request.status, request.limit, request.offset
            )
        else:
            found = await self.negotiation_service.list_outgoing(
                user_id, request.status, request.limit, request.offset
            )
        return ListRequestsResponse(
            requests=[MatchRequestView.from_domain(r) for r in found],
            limit=request.limit,
            offset=request.offset,
        )
