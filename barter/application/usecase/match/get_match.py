"""Get match use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.domain.error import NotAuthorizedError
from barter.domain.service import MatchService
from barter.domain.value import MatchId, UserId

from .view import MatchView


class GetMatchRequest(BaseModel):
    """Get match request."""

    match_id: str
    actor_id: Optional[str] = None  # When set, must be a party to the match


class GetMatchResponse(BaseModel):
    """Get match response."""

    match: MatchView


class GetMatchUseCase:
    """Use case for reading a match with its agreed terms."""

    def __init__(self, match_service: MatchService) -> None:
        """Initialize get match use case.

        Args:
            match_service: Match domain service
        """
        self.match_service = match_service

    async def execute(self, request: GetMatchRequest) -> GetMatchResponse:
        """Execute get match flow."""
        details = await self.match_service.get_match_details(
            MatchId(UUID(request.match_id))
        )
        if request.actor_id and details.party_of(UserId(UUID(request.actor_id))) is None:
            raise NotAuthorizedError(
                "match", request.match_id, request.actor_id, "view"
            )
        return GetMatchResponse(match=MatchView.from_domain(details))
