"""In-memory match request repository for testing."""

from datetime import datetime
from typing import Optional

from barter.domain.model import MatchRequest
from barter.domain.repository.match_request import MatchRequestRepository
from barter.domain.value import (
    MatchRequestId,
    MatchRequestStatus,
    SkillId,
    ThreadId,
    UserId,
)


class InMemoryMatchRequestRepository(MatchRequestRepository):
    """In-memory implementation of MatchRequestRepository for testing."""

    def __init__(
        self, requests: Optional[dict[MatchRequestId, MatchRequest]] = None
    ) -> None:
        self._requests: dict[MatchRequestId, MatchRequest] = (
            requests if requests is not None else {}
        )
        self.touched: set[MatchRequestId] = set()

    def _live(self) -> list[MatchRequest]:
        return [r for r in self._requests.values() if r.deleted_at is None]

    @staticmethod
    def _page(
        requests: list[MatchRequest],
        status: Optional[MatchRequestStatus],
        limit: int,
        offset: int,
    ) -> list[MatchRequest]:
        if status is not None:
            requests = [r for r in requests if r.status == status]
        requests.sort(key=lambda r: r.created_at, reverse=True)
        return requests[offset : offset + limit]

    async def find_by_id(self, request_id: MatchRequestId) -> Optional[MatchRequest]:
        """Find a request by ID."""
        request = self._requests.get(request_id)
        return request if request and request.deleted_at is None else None

    async def find_by_thread(self, thread_id: ThreadId) -> list[MatchRequest]:
        """Find a thread's requests in round order."""
        return sorted(
            (r for r in self._live() if r.thread_id == thread_id),
            key=lambda r: r.round_number,
        )

    async def find_incoming(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MatchRequest]:
        """Find requests addressed to a user, newest first."""
        return self._page(
            [r for r in self._live() if r.target_user_id == user_id], status, limit, offset
        )

    async def find_outgoing(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MatchRequest]:
        """Find requests sent by a user, newest first."""
        return self._page(
            [r for r in self._live() if r.requester_id == user_id], status, limit, offset
        )

    async def find_by_user(self, user_id: UserId) -> list[MatchRequest]:
        """Find every live request the user sent or received."""
        return [r for r in self._live() if r.involves_user(user_id)]

    async def find_by_skill(self, skill_id: SkillId) -> list[MatchRequest]:
        """Find every live request naming the skill."""
        return [r for r in self._live() if r.references_skill(skill_id)]

    async def find_lapsed(self, now: datetime) -> list[MatchRequest]:
        """Find pending requests whose expiry has passed."""
        return sorted(
            (
                r
                for r in self._live()
                if r.is_pending and r.expires_at is not None and r.expires_at <= now
            ),
            key=lambda r: r.expires_at,
        )

    async def save(self, request: MatchRequest) -> MatchRequest:
        """Save a request (create or update)."""
        self._requests[request.id] = request
        self.touched.add(request.id)
        return request

    async def soft_delete(
        self, request_ids: list[MatchRequestId], deleted_at: datetime
    ) -> int:
        """Mark live requests as deleted."""
        deleted = 0
        for request_id in request_ids:
            request = await self.find_by_id(request_id)
            if request:
                self._requests[request_id] = request.model_copy(
                    update={"deleted_at": deleted_at, "updated_at": deleted_at}
                )
                self.touched.add(request_id)
                deleted += 1
        return deleted
