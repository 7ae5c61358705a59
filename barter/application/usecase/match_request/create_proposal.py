"""Create proposal use case."""

from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import NegotiationService
from barter.domain.value import SkillId, UserId

from .view import MatchRequestView, TermsInput


class CreateProposalRequest(BaseModel):
    """Create proposal request."""

    requester_id: str  # User ID of the acting user
    target_user_id: str
    skill_id: str
    terms: TermsInput = TermsInput()
    message: str


class CreateProposalResponse(BaseModel):
    """Create proposal response."""

    request: MatchRequestView


class CreateProposalUseCase:
    """Use case for opening or continuing a negotiation with a proposal."""

    def __init__(self, negotiation_service: NegotiationService) -> None:
        """Initialize create proposal use case.

        Args:
            negotiation_service: Negotiation domain service
        """
        self.negotiation_service = negotiation_service

    async def execute(self, request: CreateProposalRequest) -> CreateProposalResponse:
        """Execute create proposal flow.

        Args:
            request: Create proposal request

        Returns:
            The created match request

        Raises:
            ValidationError: If the message or terms are invalid
            ThreadClosedError: If the negotiation for this pair and skill is over
            ProposalAlreadyOpenError: If the requester already has an open proposal
            RoundLimitExceededError: If the thread has used all of its rounds
        """
        terms = request.terms.to_domain()
        created = await retry_on_conflict(
            lambda: self.negotiation_service.create_proposal(
                requester_id=UserId(UUID(request.requester_id)),
                target_user_id=UserId(UUID(request.target_user_id)),
                skill_id=SkillId(UUID(request.skill_id)),
                terms=terms,
                message=request.message,
            )
        )
        return CreateProposalResponse(request=MatchRequestView.from_domain(created))
