"""Unit of Work interface.

One negotiation or lifecycle operation runs inside exactly one unit of
work: every guard is checked against data read through it and every write
goes out in a single commit.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional

from barter.domain.repository.match import MatchRepository
from barter.domain.repository.match_request import MatchRequestRepository
from barter.domain.repository.thread import NegotiationThreadRepository


class UnitOfWork(ABC):
    """Transactional boundary over the matchmaking repositories.

    Usage:
        async with uow:
            thread = await uow.threads.find_by_id(thread_id)
            ...
            await uow.commit()

    Leaving the block without commit() rolls back, including when the
    surrounding task is cancelled.
    """

    threads: NegotiationThreadRepository
    requests: MatchRequestRepository
    matches: MatchRepository

    async def __aenter__(self) -> "UnitOfWork":
        self._committed = False
        await self.begin()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self._committed:
            await self.rollback()

    async def commit(self) -> None:
        """Commit all writes made through this unit of work.

        Raises:
            ConcurrentModificationError: If a concurrent transaction won
        """
        await self._commit()
        self._committed = True

    @abstractmethod
    async def begin(self) -> None:
        """Start a new transaction."""
        pass

    @abstractmethod
    async def _commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard all uncommitted writes."""
        pass
