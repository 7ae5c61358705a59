"""Match statistics use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from barter.domain.service import MatchService
from barter.domain.value import UserId

from .view import MatchStatisticsView


class GetStatisticsRequest(BaseModel):
    """Match statistics request."""

    user_id: Optional[str] = None  # All matches when omitted


class GetStatisticsResponse(BaseModel):
    """Match statistics response."""

    statistics: MatchStatisticsView


class GetStatisticsUseCase:
    """Use case for match statistics."""

    def __init__(self, match_service: MatchService) -> None:
        self.match_service = match_service

    async def execute(self, request: GetStatisticsRequest) -> GetStatisticsResponse:
        user_id = UserId(UUID(request.user_id)) if request.user_id else None
        stats = await self.match_service.get_statistics(user_id)
        return GetStatisticsResponse(statistics=MatchStatisticsView.from_domain(stats))
