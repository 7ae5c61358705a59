"""Handle deletion event use case."""

import logfire
from pydantic import BaseModel

from barter.application.usecase.base import retry_on_conflict
from barter.domain.service import CascadeResult, CascadeService
from barter.domain.value import MatchId, SkillId, UserId

from .events import DeletionEvent, MatchDeleted, SkillDeleted, UserDeleted


class HandleDeletionRequest(BaseModel):
    """Handle deletion event request."""

    event: DeletionEvent


class HandleDeletionResponse(BaseModel):
    """Handle deletion event response."""

    event_id: str
    requests_deleted: int
    matches_deleted: int
    threads_deleted: int


class HandleDeletionUseCase:
    """Use case for applying a deletion event to negotiation data.

    Events may be delivered more than once; a repeat reports zero rows.
    """

    def __init__(self, cascade_service: CascadeService) -> None:
        """Initialize handle deletion use case.

        Args:
            cascade_service: Cascade domain service
        """
        self.cascade_service = cascade_service

    async def execute(self, request: HandleDeletionRequest) -> HandleDeletionResponse:
        """Dispatch the event to its cascade."""
        event = request.event
        with logfire.span(
            "handle_deletion.execute", event_type=event.type, event_id=str(event.event_id)
        ):
            result: CascadeResult
            if isinstance(event, UserDeleted):
                result = await retry_on_conflict(
                    lambda: self.cascade_service.on_user_deleted(UserId(event.user_id))
                )
            elif isinstance(event, SkillDeleted):
                result = await retry_on_conflict(
                    lambda: self.cascade_service.on_skill_deleted(SkillId(event.skill_id))
                )
            elif isinstance(event, MatchDeleted):
                result = await retry_on_conflict(
                    lambda: self.cascade_service.on_match_deleted(MatchId(event.match_id))
                )
            else:
                raise TypeError(f"Unsupported event: {type(event).__name__}")

            return HandleDeletionResponse(
                event_id=str(event.event_id), **result.model_dump()
            )
