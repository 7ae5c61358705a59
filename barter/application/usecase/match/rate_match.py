"""Rate match use case."""

from functools import partial
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import MatchService
from barter.domain.value import MatchId, MatchParty, UserId

from .view import MatchView


class RateMatchRequest(BaseModel):
    """Rate match request.

    Without an explicit party the actor's own side is rated.
    """

    match_id: str
    actor_id: str
    rating: int
    party: Optional[MatchParty] = None


class RateMatchResponse(BaseModel):
    """Rate match response."""

    match: MatchView


class RateMatchUseCase:
    """Use case for rating a match by one of its parties."""

    def __init__(self, match_service: MatchService) -> None:
        """Initialize rate match use case.

        Args:
            match_service: Match domain service
        """
        self.match_service = match_service

    async def execute(self, request: RateMatchRequest) -> RateMatchResponse:
        """Execute rate flow.

        Raises:
            NotFoundError: If the match does not exist
            NotAuthorizedError: If the actor is not the rating party
            InvalidRatingError: If the rating is outside 1-5
            MatchNotActiveError: If the match is no longer accepted
        """
        match_id = MatchId(UUID(request.match_id))
        actor_id = UserId(UUID(request.actor_id))

        if request.party == MatchParty.OFFERING:
            operation = partial(
                self.match_service.rate_by_offering,
                match_id,
                request.rating,
                actor_id=actor_id,
            )
        elif request.party == MatchParty.REQUESTING:
            operation = partial(
                self.match_service.rate_by_requesting,
                match_id,
                request.rating,
                actor_id=actor_id,
            )
        else:
            operation = partial(
                self.match_service.rate, match_id, actor_id, request.rating
            )

        details = await retry_on_conflict(operation)
        return RateMatchResponse(match=MatchView.from_domain(details))
