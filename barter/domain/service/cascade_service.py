"""Cascade consistency for deletions owned by other services."""

from datetime import datetime
from typing import Callable

import logfire

from barter.domain.repository import UnitOfWork
from barter.domain.value import MatchId, SkillId, UserId
from barter.domain.value.common import ValueObject

from .base import Service


class CascadeResult(ValueObject):
    """Rows removed by one cascade. All zero when the event was already applied."""

    requests_deleted: int = 0
    matches_deleted: int = 0
    threads_deleted: int = 0

    @property
    def total(self) -> int:
        return self.requests_deleted + self.matches_deleted + self.threads_deleted


class CascadeService(Service):
    """Removes negotiation data that references deleted users, skills or matches.

    Removal is a soft delete: rows get a deleted_at timestamp and disappear
    from every repository query. Handlers are idempotent, a re-delivered
    event finds nothing left to remove.
    """

    def __init__(
        self, uow: UnitOfWork, clock: Callable[[], datetime] = datetime.now
    ) -> None:
        """Initialize cascade service.

        Args:
            uow: Unit of work over the matchmaking repositories
            clock: Source of the current time
        """
        self.uow = uow
        self.clock = clock

    async def on_user_deleted(self, user_id: UserId) -> CascadeResult:
        """Remove every request, match and thread the user takes part in."""
        with logfire.span("cascade_service.on_user_deleted", user_id=str(user_id)):
            async with self.uow:
                now = self.clock()
                requests = await self.uow.requests.find_by_user(user_id)
                threads = await self.uow.threads.find_by_participant(user_id)
                result = await self._remove(requests, threads, now)
                await self.uow.commit()

            logfire.info("User data removed", user_id=str(user_id), **result.model_dump())
            return result

    async def on_skill_deleted(self, skill_id: SkillId) -> CascadeResult:
        """Remove every request, match and thread referencing the skill.

        A request references a skill as its primary skill or as the skill
        offered in exchange.
        """
        with logfire.span("cascade_service.on_skill_deleted", skill_id=str(skill_id)):
            async with self.uow:
                now = self.clock()
                requests = await self.uow.requests.find_by_skill(skill_id)
                threads = await self.uow.threads.find_by_skill(skill_id)
                result = await self._remove(requests, threads, now)
                await self.uow.commit()

            logfire.info(
                "Skill data removed", skill_id=str(skill_id), **result.model_dump()
            )
            return result

    async def on_match_deleted(self, match_id: MatchId) -> CascadeResult:
        """Remove the match itself.

        The accepted request and its thread stay as negotiation history.
        """
        with logfire.span("cascade_service.on_match_deleted", match_id=str(match_id)):
            async with self.uow:
                deleted = await self.uow.matches.soft_delete([match_id], self.clock())
                await self.uow.commit()

            result = CascadeResult(matches_deleted=deleted)
            logfire.info("Match removed", match_id=str(match_id), **result.model_dump())
            return result

    async def _remove(self, requests, threads, now: datetime) -> CascadeResult:
        request_ids = [r.id for r in requests]
        matches = (
            await self.uow.matches.find_by_accepted_requests(request_ids)
            if request_ids
            else []
        )
        return CascadeResult(
            matches_deleted=await self.uow.matches.soft_delete(
                [m.id for m in matches], now
            ),
            requests_deleted=await self.uow.requests.soft_delete(request_ids, now),
            threads_deleted=await self.uow.threads.soft_delete(
                [t.id for t in threads], now
            ),
        )
