"""PostgreSQL Unit of Work."""

import logfire
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barter.domain.error import ConcurrentModificationError
from barter.domain.repository import UnitOfWork
from barter.persistence.repository import (
    PostgresMatchRepository,
    PostgresMatchRequestRepository,
    PostgresNegotiationThreadRepository,
)


class PostgresUnitOfWork(UnitOfWork):
    """Unit of Work backed by one SQLAlchemy async session.

    The session begins its transaction lazily on the first statement, so
    one session serves several consecutive units of work.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize unit of work.

        Args:
            session: SQLAlchemy async session shared by the repositories
        """
        self.session = session
        self.threads = PostgresNegotiationThreadRepository(session)
        self.requests = PostgresMatchRequestRepository(session)
        self.matches = PostgresMatchRepository(session)

    async def begin(self) -> None:
        if self.session.in_transaction():
            # Leftover reads from a previous unit of work
            await self.session.rollback()

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logfire.warn("Commit rejected by a uniqueness constraint", error=str(e))
            raise ConcurrentModificationError("Transaction", "commit") from e

    async def rollback(self) -> None:
        await self.session.rollback()
