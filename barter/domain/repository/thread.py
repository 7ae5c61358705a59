"""Negotiation thread repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from barter.domain.model.thread import NegotiationThread
from barter.domain.value import SkillId, ThreadId, UserId


class NegotiationThreadRepository(ABC):
    """Repository for NegotiationThread entity.

    Defines the contract for thread persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, thread_id: ThreadId) -> Optional[NegotiationThread]:
        """Find a thread by ID.

        Args:
            thread_id: The thread's unique identifier

        Returns:
            The thread if found and not deleted, None otherwise
        """
        pass

    @abstractmethod
    async def find_latest_for_pair(
        self, first_user_id: UserId, second_user_id: UserId, skill_id: SkillId
    ) -> Optional[NegotiationThread]:
        """Find the most recent thread between two users over a skill.

        The pair is unordered: either participant may be passed first.

        Args:
            first_user_id: One participant
            second_user_id: The other participant
            skill_id: Skill under negotiation

        Returns:
            The newest thread if any, None otherwise
        """
        pass

    @abstractmethod
    async def find_stale_active(self, inactive_since: datetime) -> list[NegotiationThread]:
        """Find active threads with no activity since the given time.

        Args:
            inactive_since: Threads whose last activity is older are stale

        Returns:
            List of stale active threads
        """
        pass

    @abstractmethod
    async def find_by_participant(self, user_id: UserId) -> list[NegotiationThread]:
        """Find every thread a user participates in."""
        pass

    @abstractmethod
    async def find_by_skill(self, skill_id: SkillId) -> list[NegotiationThread]:
        """Find every thread negotiating a skill."""
        pass

    @abstractmethod
    async def save(self, thread: NegotiationThread) -> NegotiationThread:
        """Save a thread (create or update) with an optimistic version check.

        The thread's version must equal the stored version; the saved copy
        carries the incremented version.

        Args:
            thread: The thread to save

        Returns:
            The saved thread with its new version

        Raises:
            ConcurrentModificationError: If the stored version differs
        """
        pass

    @abstractmethod
    async def soft_delete(self, thread_ids: list[ThreadId], deleted_at: datetime) -> int:
        """Mark threads as deleted.

        Args:
            thread_ids: Threads to delete
            deleted_at: Deletion timestamp

        Returns:
            Number of threads that were not already deleted
        """
        pass
