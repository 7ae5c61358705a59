"""Accept match request use case."""

from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.application.usecase.match.view import MatchView
from barter.domain.service import NegotiationService
from barter.domain.value import MatchRequestId, UserId


class AcceptRequestRequest(BaseModel):
    """Accept match request request."""

    request_id: str
    actor_id: str


class AcceptRequestResponse(BaseModel):
    """Accept match request response."""

    match: MatchView


class AcceptRequestUseCase:
    """Use case for accepting a proposal, which creates the match."""

    def __init__(self, negotiation_service: NegotiationService) -> None:
        """Initialize accept use case.

        Args:
            negotiation_service: Negotiation domain service
        """
        self.negotiation_service = negotiation_service

    async def execute(self, request: AcceptRequestRequest) -> AcceptRequestResponse:
        """Execute accept flow.

        A concurrent acceptance in the same thread makes the first attempt
        fail; the retry then reports the thread as closed.

        Raises:
            NotFoundError: If the proposal does not exist
            NotAuthorizedError: If the actor is not the proposal's target
            ThreadClosedError: If another proposal in the thread was accepted
            RequestNotPendingError: If the proposal is no longer open
        """
        details = await retry_on_conflict(
            lambda: self.negotiation_service.accept(
                request_id=MatchRequestId(UUID(request.request_id)),
                actor_id=UserId(UUID(request.actor_id)),
            )
        )
        return AcceptRequestResponse(match=MatchView.from_domain(details))
