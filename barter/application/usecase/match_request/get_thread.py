"""Get negotiation thread use case."""

from uuid import UUID

from pydantic import BaseModel

from barter.config import NegotiationSettings
from barter.domain.service import NegotiationService
from barter.domain.value import ThreadId, UserId

from .view import MatchRequestView, ThreadView


class GetThreadRequest(BaseModel):
    """Get thread request."""

    thread_id: str
    actor_id: str


class GetThreadResponse(BaseModel):
    """Get thread response."""

    thread: ThreadView
    requests: list[MatchRequestView]  # Round order


class GetThreadUseCase:
    """Use case for reading a negotiation with its full history."""

    def __init__(
        self, negotiation_service: NegotiationService, settings: NegotiationSettings
    ) -> None:
        """Initialize get thread use case.

        Args:
            negotiation_service: Negotiation domain service
            settings: Negotiation settings
        """
        self.negotiation_service = negotiation_service
        self.settings = settings

    async def execute(self, request: GetThreadRequest) -> GetThreadResponse:
        """Execute get thread flow.

        Raises:
            NotFoundError: If the thread does not exist
            NotAuthorizedError: If the actor is not a participant
        """
        thread, requests = await self.negotiation_service.get_thread(
            ThreadId(UUID(request.thread_id)), UserId(UUID(request.actor_id))
        )
        return GetThreadResponse(
            thread=ThreadView.from_domain(thread, self.settings.max_rounds),
            requests=[MatchRequestView.from_domain(r) for r in requests],
        )
