"""In-memory negotiation thread repository for testing."""

from datetime import datetime
from typing import Optional

from barter.domain.error import ConcurrentModificationError
from barter.domain.model import NegotiationThread
from barter.domain.repository.thread import NegotiationThreadRepository
from barter.domain.value import SkillId, ThreadId, ThreadStatus, UserId


class InMemoryNegotiationThreadRepository(NegotiationThreadRepository):
    """In-memory implementation of NegotiationThreadRepository for testing."""

    def __init__(self, threads: Optional[dict[ThreadId, NegotiationThread]] = None) -> None:
        self._threads: dict[ThreadId, NegotiationThread] = threads if threads is not None else {}
        self.touched: set[ThreadId] = set()

    def _live(self) -> list[NegotiationThread]:
        return [t for t in self._threads.values() if t.deleted_at is None]

    async def find_by_id(self, thread_id: ThreadId) -> Optional[NegotiationThread]:
        """Find a thread by ID."""
        thread = self._threads.get(thread_id)
        return thread if thread and thread.deleted_at is None else None

    async def find_latest_for_pair(
        self, first: UserId, second: UserId, skill_id: SkillId
    ) -> Optional[NegotiationThread]:
        """Find the newest thread for an unordered pair and skill."""
        pair = NegotiationThread.sorted_pair(first, second)
        candidates = [
            t for t in self._live() if t.participant_ids == pair and t.skill_id == skill_id
        ]
        return max(candidates, key=lambda t: t.created_at, default=None)

    async def find_stale_active(self, inactive_since: datetime) -> list[NegotiationThread]:
        """Find active threads with no activity since the cutoff."""
        stale = [
            t
            for t in self._live()
            if t.status == ThreadStatus.ACTIVE and t.last_activity_at < inactive_since
        ]
        return sorted(stale, key=lambda t: t.last_activity_at)

    async def find_by_participant(self, user_id: UserId) -> list[NegotiationThread]:
        """Find every live thread the user takes part in."""
        return [t for t in self._live() if t.has_participant(user_id)]

    async def find_by_skill(self, skill_id: SkillId) -> list[NegotiationThread]:
        """Find every live thread negotiating the skill."""
        return [t for t in self._live() if t.skill_id == skill_id]

    async def save(self, thread: NegotiationThread) -> NegotiationThread:
        """Save a thread, checking and bumping its version.

        Raises:
            ConcurrentModificationError: If the stored version differs
        """
        current = self._threads.get(thread.id)
        if current is not None and (
            current.version != thread.version or current.deleted_at is not None
        ):
            raise ConcurrentModificationError("Negotiation thread", str(thread.id))

        saved = thread.model_copy(update={"version": thread.version + 1})
        self._threads[thread.id] = saved
        self.touched.add(thread.id)
        return saved

    async def soft_delete(self, thread_ids: list[ThreadId], deleted_at: datetime) -> int:
        """Mark live threads as deleted."""
        deleted = 0
        for thread_id in thread_ids:
            thread = await self.find_by_id(thread_id)
            if thread:
                self._threads[thread_id] = thread.model_copy(
                    update={"deleted_at": deleted_at, "updated_at": deleted_at}
                )
                self.touched.add(thread_id)
                deleted += 1
        return deleted
