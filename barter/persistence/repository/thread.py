"""PostgreSQL implementation of NegotiationThread repository."""

from datetime import datetime
from typing import List, Optional

import logfire
from sqlalchemy import and_, desc, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barter.domain.error import ConcurrentModificationError
from barter.domain.model import NegotiationThread
from barter.domain.repository.thread import NegotiationThreadRepository
from barter.domain.value import SkillId, ThreadId, ThreadStatus, UserId
from barter.persistence.mappers import row_to_thread, thread_to_dict
from barter.persistence.tables import negotiation_threads_table as threads


class PostgresNegotiationThreadRepository(NegotiationThreadRepository):
    """PostgreSQL implementation of NegotiationThreadRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, thread_id: ThreadId) -> Optional[NegotiationThread]:
        """Find a thread by ID."""
        stmt = select(threads).where(
            threads.c.id == thread_id, threads.c.deleted_at.is_(None)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_thread(dict(row)) if row else None

    async def find_latest_for_pair(
        self, first: UserId, second: UserId, skill_id: SkillId
    ) -> Optional[NegotiationThread]:
        """Find the newest thread for an unordered pair and skill."""
        participant_a, participant_b = NegotiationThread.sorted_pair(first, second)
        stmt = (
            select(threads)
            .where(
                threads.c.participant_a_id == participant_a,
                threads.c.participant_b_id == participant_b,
                threads.c.skill_id == skill_id,
                threads.c.deleted_at.is_(None),
            )
            .order_by(desc(threads.c.created_at))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_thread(dict(row)) if row else None

    async def find_stale_active(self, inactive_since: datetime) -> List[NegotiationThread]:
        """Find active threads with no activity since the cutoff."""
        stmt = (
            select(threads)
            .where(
                threads.c.status == ThreadStatus.ACTIVE.value,
                threads.c.last_activity_at < inactive_since,
                threads.c.deleted_at.is_(None),
            )
            .order_by(threads.c.last_activity_at)
            # Rows already locked by a live negotiation are picked up next sweep
            .with_for_update(skip_locked=True)
        )
        result = await self.session.execute(stmt)
        return [row_to_thread(dict(row)) for row in result.mappings().all()]

    async def find_by_participant(self, user_id: UserId) -> List[NegotiationThread]:
        """Find every live thread the user takes part in."""
        stmt = select(threads).where(
            or_(
                threads.c.participant_a_id == user_id,
                threads.c.participant_b_id == user_id,
            ),
            threads.c.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        return [row_to_thread(dict(row)) for row in result.mappings().all()]

    async def find_by_skill(self, skill_id: SkillId) -> List[NegotiationThread]:
        """Find every live thread negotiating the skill."""
        stmt = select(threads).where(
            threads.c.skill_id == skill_id, threads.c.deleted_at.is_(None)
        )
        result = await self.session.execute(stmt)
        return [row_to_thread(dict(row)) for row in result.mappings().all()]

    async def save(self, thread: NegotiationThread) -> NegotiationThread:
        """Save a thread, checking and bumping its version."""
        with logfire.span(
            "thread_repository.save",
            thread_id=str(thread.id),
            status=thread.status.value,
            version=thread.version,
        ):
            values = thread_to_dict(thread)
            values["version"] = thread.version + 1

            try:
                result = await self.session.execute(
                    update(threads)
                    .where(
                        and_(
                            threads.c.id == thread.id,
                            threads.c.version == thread.version,
                            threads.c.deleted_at.is_(None),
                        )
                    )
                    .values(**values)
                )
                if result.rowcount == 0:
                    existing = await self.session.execute(
                        select(threads.c.id).where(threads.c.id == thread.id)
                    )
                    if existing.first() is not None:
                        logfire.warn(
                            "Thread version conflict",
                            thread_id=str(thread.id),
                            version=thread.version,
                        )
                        raise ConcurrentModificationError(
                            "Negotiation thread", str(thread.id)
                        )
                    await self.session.execute(insert(threads).values(**values))
                await self.session.flush()
            except IntegrityError as e:
                # Another transaction opened the same pair/skill thread first
                logfire.warn(
                    "Thread uniqueness conflict", thread_id=str(thread.id), error=str(e)
                )
                raise ConcurrentModificationError(
                    "Negotiation thread", str(thread.id)
                ) from e

            return thread.model_copy(update={"version": values["version"]})

    async def soft_delete(self, thread_ids: List[ThreadId], deleted_at: datetime) -> int:
        """Mark live threads as deleted."""
        if not thread_ids:
            return 0
        result = await self.session.execute(
            update(threads)
            .where(threads.c.id.in_(thread_ids), threads.c.deleted_at.is_(None))
            .values(deleted_at=deleted_at, updated_at=deleted_at)
        )
        await self.session.flush()
        return result.rowcount
