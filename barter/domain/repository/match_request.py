"""Match request repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from barter.domain.model.match_request import MatchRequest
from barter.domain.value import (
    MatchRequestId,
    MatchRequestStatus,
    SkillId,
    ThreadId,
    UserId,
)


class MatchRequestRepository(ABC):
    """Repository for MatchRequest entity.

    Defines the contract for match request persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, request_id: MatchRequestId) -> Optional[MatchRequest]:
        """Find a match request by ID.

        Args:
            request_id: The request's unique identifier

        Returns:
            The request if found and not deleted, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_thread(self, thread_id: ThreadId) -> list[MatchRequest]:
        """Find all requests in a thread ordered by round number.

        Args:
            thread_id: The thread ID

        Returns:
            Requests in negotiation order
        """
        pass

    @abstractmethod
    async def find_incoming(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MatchRequest]:
        """Find requests addressed to a user, newest first.

        Args:
            user_id: Target user
            status: Optional status filter
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of requests
        """
        pass

    @abstractmethod
    async def find_outgoing(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MatchRequest]:
        """Find requests sent by a user, newest first.

        Args:
            user_id: Requesting user
            status: Optional status filter
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of requests
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: UserId) -> list[MatchRequest]:
        """Find every request where the user is requester or target."""
        pass

    @abstractmethod
    async def find_by_skill(self, skill_id: SkillId) -> list[MatchRequest]:
        """Find every request referencing a skill as primary or exchange skill."""
        pass

    @abstractmethod
    async def find_lapsed(self, now: datetime) -> list[MatchRequest]:
        """Find pending requests whose expiry has passed.

        Args:
            now: Reference time

        Returns:
            Pending requests with expires_at at or before now
        """
        pass

    @abstractmethod
    async def save(self, request: MatchRequest) -> MatchRequest:
        """Save a match request (create or update).

        Args:
            request: The request to save

        Returns:
            The saved request
        """
        pass

    @abstractmethod
    async def soft_delete(
        self, request_ids: list[MatchRequestId], deleted_at: datetime
    ) -> int:
        """Mark requests as deleted.

        Args:
            request_ids: Requests to delete
            deleted_at: Deletion timestamp

        Returns:
            Number of requests that were not already deleted
        """
        pass
