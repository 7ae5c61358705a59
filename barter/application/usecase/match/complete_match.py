"""Complete match use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import MatchService
from barter.domain.value import MatchId, UserId

from .view import MatchView


class CompleteMatchRequest(BaseModel):
    """Complete match request."""

    match_id: str
    actor_id: Optional[str] = None
    notes: Optional[str] = None


class CompleteMatchResponse(BaseModel):
    """Complete match response."""

    match: MatchView


class CompleteMatchUseCase:
    """Use case for completing a match ahead of its session plan."""

    def __init__(self, match_service: MatchService) -> None:
        """Initialize complete match use case.

        Args:
            match_service: Match domain service
        """
        self.match_service = match_service

    async def execute(self, request: CompleteMatchRequest) -> CompleteMatchResponse:
        """Execute complete match flow."""
        details = await retry_on_conflict(
            lambda: self.match_service.complete(
                MatchId(UUID(request.match_id)),
                actor_id=UserId(UUID(request.actor_id)) if request.actor_id else None,
                notes=request.notes,
            )
        )
        return CompleteMatchResponse(match=MatchView.from_domain(details))
