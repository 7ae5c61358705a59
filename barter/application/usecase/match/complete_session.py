"""Complete session use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import MatchService
from barter.domain.value import MatchId, UserId

from .view import MatchView


class CompleteSessionRequest(BaseModel):
    """Complete session request."""

    match_id: str
    actor_id: Optional[str] = None
    next_session_date: Optional[datetime] = None


class CompleteSessionResponse(BaseModel):
    """Complete session response."""

    match: MatchView


class CompleteSessionUseCase:
    """Use case for recording a completed session."""

    def __init__(self, match_service: MatchService) -> None:
        """Initialize complete session use case.

        Args:
            match_service: Match domain service
        """
        self.match_service = match_service

    async def execute(self, request: CompleteSessionRequest) -> CompleteSessionResponse:
        """Execute complete session flow.

        Raises:
            NotFoundError: If the match does not exist
            MatchAlreadyCompletedError: If the match is already completed
            MatchNotActiveError: If the match was dissolved
        """
        details = await retry_on_conflict(
            lambda: self.match_service.complete_session(
                MatchId(UUID(request.match_id)),
                actor_id=UserId(UUID(request.actor_id)) if request.actor_id else None,
                next_session_date=request.next_session_date,
            )
        )
        return CompleteSessionResponse(match=MatchView.from_domain(details))
