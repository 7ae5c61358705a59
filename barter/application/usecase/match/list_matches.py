"""List user matches use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.domain.service import MatchService
from barter.domain.value import MatchStatus, UserId

from .view import MatchView


class ListMatchesRequest(BaseModel):
    """List matches request."""

    user_id: str
    status: Optional[MatchStatus] = None


class ListMatchesResponse(BaseModel):
    """List matches response."""

    matches: list[MatchView]


class ListMatchesUseCase:
    """Use case for listing the matches a user is a party to."""

    def __init__(self, match_service: MatchService) -> None:
        """Initialize list matches use case.

        Args:
            match_service: Match domain service
        """
        self.match_service = match_service

    async def execute(self, request: ListMatchesRequest) -> ListMatchesResponse:
        """Execute list matches flow (newest first)."""
        found = await self.match_service.list_user_matches(
            UserId(UUID(request.user_id)), request.status
        )
        return ListMatchesResponse(matches=[MatchView.from_domain(d) for d in found])
