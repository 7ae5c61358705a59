"""PostgreSQL implementation of MatchRequest repository."""

from datetime import datetime
from typing import List, Optional

import logfire
from sqlalchemy import desc, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barter.domain.error import ConcurrentModificationError
from barter.domain.model import MatchRequest
from barter.domain.repository.match_request import MatchRequestRepository
from barter.domain.value import (
    MatchRequestId,
    MatchRequestStatus,
    SkillId,
    ThreadId,
    UserId,
)
from barter.persistence.mappers import match_request_to_dict, row_to_match_request
from barter.persistence.tables import match_requests_table as requests


class PostgresMatchRequestRepository(MatchRequestRepository):
    """PostgreSQL implementation of MatchRequestRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch(self, stmt) -> List[MatchRequest]:
        result = await self.session.execute(stmt)
        return [row_to_match_request(dict(row)) for row in result.mappings().all()]

    async def find_by_id(self, request_id: MatchRequestId) -> Optional[MatchRequest]:
        """Find a request by ID."""
        found = await self._fetch(
            select(requests).where(
                requests.c.id == request_id, requests.c.deleted_at.is_(None)
            )
        )
        return found[0] if found else None

    async def find_by_thread(self, thread_id: ThreadId) -> List[MatchRequest]:
        """Find a thread's requests in round order."""
        return await self._fetch(
            select(requests)
            .where(requests.c.thread_id == thread_id, requests.c.deleted_at.is_(None))
            .order_by(requests.c.round_number)
        )

    async def find_incoming(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[MatchRequest]:
        """Find requests addressed to a user, newest first."""
        stmt = select(requests).where(
            requests.c.target_user_id == user_id, requests.c.deleted_at.is_(None)
        )
        if status is not None:
            stmt = stmt.where(requests.c.status == status.value)
        return await self._fetch(
            stmt.order_by(desc(requests.c.created_at)).limit(limit).offset(offset)
        )

    async def find_outgoing(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[MatchRequest]:
        """Find requests sent by a user, newest first."""
        stmt = select(requests).where(
            requests.c.requester_id == user_id, requests.c.deleted_at.is_(None)
        )
        if status is not None:
            stmt = stmt.where(requests.c.status == status.value)
        return await self._fetch(
            stmt.order_by(desc(requests.c.created_at)).limit(limit).offset(offset)
        )

    async def find_by_user(self, user_id: UserId) -> List[MatchRequest]:
        """Find every live request the user sent or received."""
        return await self._fetch(
            select(requests)
            .where(
                or_(
                    requests.c.requester_id == user_id,
                    requests.c.target_user_id == user_id,
                ),
                requests.c.deleted_at.is_(None),
            )
            .order_by(desc(requests.c.created_at))
        )

    async def find_by_skill(self, skill_id: SkillId) -> List[MatchRequest]:
        """Find every live request naming the skill as primary or exchange skill."""
        return await self._fetch(
            select(requests).where(
                or_(
                    requests.c.skill_id == skill_id,
                    requests.c.exchange_skill_id == skill_id,
                ),
                requests.c.deleted_at.is_(None),
            )
        )

    async def find_lapsed(self, now: datetime) -> List[MatchRequest]:
        """Find pending requests whose expiry has passed."""
        return await self._fetch(
            select(requests)
            .where(
                requests.c.status == MatchRequestStatus.PENDING.value,
                requests.c.expires_at <= now,
                requests.c.deleted_at.is_(None),
            )
            .order_by(requests.c.expires_at)
        )

    async def save(self, request: MatchRequest) -> MatchRequest:
        """Save a request (create or update)."""
        with logfire.span(
            "match_request_repository.save",
            request_id=str(request.id),
            status=request.status.value,
        ):
            values = match_request_to_dict(request)
            try:
                result = await self.session.execute(
                    update(requests)
                    .where(requests.c.id == request.id)
                    .values(**values)
                )
                if result.rowcount == 0:
                    await self.session.execute(insert(requests).values(**values))
                await self.session.flush()
            except IntegrityError as e:
                # A second accepted request in the same thread
                logfire.warn(
                    "Match request uniqueness conflict",
                    request_id=str(request.id),
                    error=str(e),
                )
                raise ConcurrentModificationError(
                    "Match request", str(request.id)
                ) from e
            return request

    async def soft_delete(
        self, request_ids: List[MatchRequestId], deleted_at: datetime
    ) -> int:
        """Mark live requests as deleted."""
        if not request_ids:
            return 0
        result = await self.session.execute(
            update(requests)
            .where(requests.c.id.in_(request_ids), requests.c.deleted_at.is_(None))
            .values(deleted_at=deleted_at, updated_at=deleted_at)
        )
        await self.session.flush()
        return result.rowcount
