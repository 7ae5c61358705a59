"""Match repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from barter.domain.model.match import Match
from barter.domain.value import MatchId, MatchRequestId, MatchStatus


class MatchRepository(ABC):
    """Repository for Match entity.

    Defines the contract for match persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, match_id: MatchId) -> Optional[Match]:
        """Find a match by ID.

        Args:
            match_id: The match's unique identifier

        Returns:
            The match if found and not deleted, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_accepted_requests(
        self,
        request_ids: list[MatchRequestId],
        status: Optional[MatchStatus] = None,
    ) -> list[Match]:
        """Find matches created from any of the given requests (batch query).

        Args:
            request_ids: Accepted request IDs
            status: Optional status filter

        Returns:
            List of matches, newest first
        """
        pass

    @abstractmethod
    async def find_all(self, status: Optional[MatchStatus] = None) -> list[Match]:
        """Find every live match, optionally filtered by status."""
        pass

    @abstractmethod
    async def save(self, match: Match) -> Match:
        """Save a match (create or update) with an optimistic version check.

        Args:
            match: The match to save

        Returns:
            The saved match with its new version

        Raises:
            ConcurrentModificationError: If the stored version differs or a
                match already exists for the accepted request
        """
        pass

    @abstractmethod
    async def soft_delete(self, match_ids: list[MatchId], deleted_at: datetime) -> int:
        """Mark matches as deleted.

        Args:
            match_ids: Matches to delete
            deleted_at: Deletion timestamp

        Returns:
            Number of matches that were not already deleted
        """
        pass
