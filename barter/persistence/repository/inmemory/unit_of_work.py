"""In-memory Unit of Work for testing."""

from typing import Any

from barter.domain.error import ConcurrentModificationError
from barter.domain.model import Match, MatchRequest, NegotiationThread
from barter.domain.repository import UnitOfWork
from barter.domain.value import (
    MatchId,
    MatchRequestId,
    MatchRequestStatus,
    ThreadId,
    ThreadStatus,
)

from .match import InMemoryMatchRepository
from .match_request import InMemoryMatchRequestRepository
from .thread import InMemoryNegotiationThreadRepository


class InMemoryStore:
    """Committed state shared by every in-memory unit of work."""

    def __init__(self) -> None:
        self.threads: dict[ThreadId, NegotiationThread] = {}
        self.requests: dict[MatchRequestId, MatchRequest] = {}
        self.matches: dict[MatchId, Match] = {}


class InMemoryUnitOfWork(UnitOfWork):
    """Unit of Work over an InMemoryStore.

    Each unit of work works on a private copy of the store. On commit every
    touched row must still be the row read at begin, otherwise another unit
    of work committed first and ConcurrentModificationError is raised. The
    uniqueness rules of the database schema are checked on the merged state.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self._reset()

    def _reset(self) -> None:
        self._snapshot = {
            "threads": dict(self.store.threads),
            "requests": dict(self.store.requests),
            "matches": dict(self.store.matches),
        }
        self.threads = InMemoryNegotiationThreadRepository(dict(self._snapshot["threads"]))
        self.requests = InMemoryMatchRequestRepository(dict(self._snapshot["requests"]))
        self.matches = InMemoryMatchRepository(dict(self._snapshot["matches"]))

    async def begin(self) -> None:
        self._reset()

    async def _commit(self) -> None:
        changes = {
            "threads": (self.threads.touched, self.threads._threads),
            "requests": (self.requests.touched, self.requests._requests),
            "matches": (self.matches.touched, self.matches._matches),
        }

        for name, (touched, _) in changes.items():
            committed: dict[Any, Any] = getattr(self.store, name)
            for key in touched:
                if committed.get(key) is not self._snapshot[name].get(key):
                    raise ConcurrentModificationError(name, str(key))

        merged = {
            name: {**getattr(self.store, name), **{k: rows[k] for k in touched}}
            for name, (touched, rows) in changes.items()
        }
        self._check_unique(merged)

        for name, (touched, rows) in changes.items():
            committed = getattr(self.store, name)
            for key in touched:
                committed[key] = rows[key]
        self._reset()

    async def rollback(self) -> None:
        self._reset()

    @staticmethod
    def _check_unique(merged: dict[str, dict]) -> None:
        """Enforce the partial unique indexes of the relational schema."""
        accepted_threads: set[ThreadId] = set()
        for request in merged["requests"].values():
            if request.status == MatchRequestStatus.ACCEPTED:
                if request.thread_id in accepted_threads:
                    raise ConcurrentModificationError("Match request", str(request.id))
                accepted_threads.add(request.thread_id)

        active_pairs: set[tuple] = set()
        for thread in merged["threads"].values():
            if thread.status == ThreadStatus.ACTIVE and thread.deleted_at is None:
                key = (*thread.participant_ids, thread.skill_id)
                if key in active_pairs:
                    raise ConcurrentModificationError("Negotiation thread", str(thread.id))
                active_pairs.add(key)

        accepted_requests: set[MatchRequestId] = set()
        for match in merged["matches"].values():
            if match.accepted_request_id in accepted_requests:
                raise ConcurrentModificationError("Match", str(match.id))
            accepted_requests.add(match.accepted_request_id)
