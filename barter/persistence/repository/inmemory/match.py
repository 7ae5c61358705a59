"""In-memory match repository for testing."""

from datetime import datetime
from typing import Optional

from barter.domain.error import ConcurrentModificationError
from barter.domain.model import Match
from barter.domain.repository.match import MatchRepository
from barter.domain.value import MatchId, MatchRequestId, MatchStatus


class InMemoryMatchRepository(MatchRepository):
    """In-memory implementation of MatchRepository for testing."""

    def __init__(self, matches: Optional[dict[MatchId, Match]] = None) -> None:
        self._matches: dict[MatchId, Match] = matches if matches is not None else {}
        self.touched: set[MatchId] = set()

    def _live(self) -> list[Match]:
        return [m for m in self._matches.values() if m.deleted_at is None]

    async def find_by_id(self, match_id: MatchId) -> Optional[Match]:
        """Find a match by ID."""
        match = self._matches.get(match_id)
        return match if match and match.deleted_at is None else None

    async def find_by_accepted_requests(
        self,
        request_ids: list[MatchRequestId],
        status: Optional[MatchStatus] = None,
    ) -> list[Match]:
        """Find matches created from any of the given requests."""
        wanted = set(request_ids)
        found = [
            m
            for m in self._live()
            if m.accepted_request_id in wanted and (status is None or m.status == status)
        ]
        return sorted(found, key=lambda m: m.accepted_at, reverse=True)

    async def find_all(self, status: Optional[MatchStatus] = None) -> list[Match]:
        """Find every live match."""
        found = [m for m in self._live() if status is None or m.status == status]
        return sorted(found, key=lambda m: m.accepted_at, reverse=True)

    async def save(self, match: Match) -> Match:
        """Save a match, checking and bumping its version.

        Raises:
            ConcurrentModificationError: If the stored version differs or
                another match already uses the accepted request
        """
        current = self._matches.get(match.id)
        if current is None:
            if any(
                m.accepted_request_id == match.accepted_request_id
                for m in self._matches.values()
            ):
                raise ConcurrentModificationError("Match", str(match.id))
        elif current.version != match.version or current.deleted_at is not None:
            raise ConcurrentModificationError("Match", str(match.id))

        saved = match.model_copy(update={"version": match.version + 1})
        self._matches[match.id] = saved
        self.touched.add(match.id)
        return saved

    async def soft_delete(self, match_ids: list[MatchId], deleted_at: datetime) -> int:
        """Mark live matches as deleted."""
        deleted = 0
        for match_id in match_ids:
            match = await self.find_by_id(match_id)
            if match:
                self._matches[match_id] = match.model_copy(
                    update={"deleted_at": deleted_at, "updated_at": deleted_at}
                )
                self.touched.add(match_id)
                deleted += 1
        return deleted
