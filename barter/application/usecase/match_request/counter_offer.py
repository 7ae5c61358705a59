"""Counter-offer use case."""

from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import NegotiationService
from barter.domain.value import MatchRequestId, UserId

from .view import MatchRequestView, TermsInput


class CounterOfferRequest(BaseModel):
    """Counter-offer request."""

    request_id: str  # The proposal being answered
    actor_id: str
    terms: TermsInput = TermsInput()
    message: str


class CounterOfferResponse(BaseModel):
    """Counter-offer response."""

    request: MatchRequestView


class CounterOfferUseCase:
    """Use case for answering a proposal with revised terms."""

    def __init__(self, negotiation_service: NegotiationService) -> None:
        """Initialize counter-offer use case.

        Args:
            negotiation_service: Negotiation domain service
        """
        self.negotiation_service = negotiation_service

    async def execute(self, request: CounterOfferRequest) -> CounterOfferResponse:
        """Execute counter-offer flow.

        Raises:
            NotFoundError: If the proposal does not exist
            NotAuthorizedError: If the actor is not the proposal's target
            RequestNotPendingError: If the proposal is not the open proposal
            RoundLimitExceededError: If the thread has used all of its rounds
        """
        terms = request.terms.to_domain()
        counter = await retry_on_conflict(
            lambda: self.negotiation_service.counter_offer(
                request_id=MatchRequestId(UUID(request.request_id)),
                actor_id=UserId(UUID(request.actor_id)),
                revised_terms=terms,
                message=request.message,
            )
        )
        return CounterOfferResponse(request=MatchRequestView.from_domain(counter))
