"""Dissolve match use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import MatchService
from barter.domain.value import MatchId, UserId

from .view import MatchView


class DissolveMatchRequest(BaseModel):
    """Dissolve match request."""

    match_id: str
    actor_id: Optional[str] = None
    reason: Optional[str] = None


class DissolveMatchResponse(BaseModel):
    """Dissolve match response."""

    match: MatchView


class DissolveMatchUseCase:
    """Use case for dissolving an active match."""

    def __init__(self, match_service: MatchService) -> None:
        """Initialize dissolve match use case.

        Args:
            match_service: Match domain service
        """
        self.match_service = match_service

    async def execute(self, request: DissolveMatchRequest) -> DissolveMatchResponse:
        """Execute dissolve flow.

        Raises:
            NotFoundError: If the match does not exist
            MatchNotActiveError: If the match is completed or already dissolved
        """
        details = await retry_on_conflict(
            lambda: self.match_service.dissolve(
                MatchId(UUID(request.match_id)),
                actor_id=UserId(UUID(request.actor_id)) if request.actor_id else None,
                reason=request.reason,
            )
        )
        return DissolveMatchResponse(match=MatchView.from_domain(details))
