"""PostgreSQL implementation of Match repository."""

from datetime import datetime
from typing import List, Optional

import logfire
from sqlalchemy import desc, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barter.domain.error import ConcurrentModificationError
from barter.domain.model import Match
from barter.domain.repository.match import MatchRepository
from barter.domain.value import MatchId, MatchRequestId, MatchStatus
from barter.persistence.mappers import match_to_dict, row_to_match
from barter.persistence.tables import matches_table as matches


class PostgresMatchRepository(MatchRepository):
    """PostgreSQL implementation of MatchRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch(self, stmt) -> List[Match]:
        result = await self.session.execute(stmt)
        return [row_to_match(dict(row)) for row in result.mappings().all()]

    async def find_by_id(self, match_id: MatchId) -> Optional[Match]:
        """Find a match by ID."""
        found = await self._fetch(
            select(matches).where(
                matches.c.id == match_id, matches.c.deleted_at.is_(None)
            )
        )
        return found[0] if found else None

    async def find_by_accepted_requests(
        self,
        request_ids: List[MatchRequestId],
        status: Optional[MatchStatus] = None,
    ) -> List[Match]:
        """Find matches created from any of the given requests."""
        if not request_ids:
            return []
        stmt = select(matches).where(
            matches.c.accepted_request_id.in_(request_ids),
            matches.c.deleted_at.is_(None),
        )
        if status is not None:
            stmt = stmt.where(matches.c.status == status.value)
        return await self._fetch(stmt.order_by(desc(matches.c.accepted_at)))

    async def find_all(self, status: Optional[MatchStatus] = None) -> List[Match]:
        """Find every live match."""
        stmt = select(matches).where(matches.c.deleted_at.is_(None))
        if status is not None:
            stmt = stmt.where(matches.c.status == status.value)
        return await self._fetch(stmt.order_by(desc(matches.c.accepted_at)))

    async def save(self, match: Match) -> Match:
        """Save a match, checking and bumping its version."""
        with logfire.span(
            "match_repository.save",
            match_id=str(match.id),
            status=match.status.value,
            version=match.version,
        ):
            values = match_to_dict(match)
            values["version"] = match.version + 1

            try:
                result = await self.session.execute(
                    update(matches)
                    .where(
                        matches.c.id == match.id,
                        matches.c.version == match.version,
                        matches.c.deleted_at.is_(None),
                    )
                    .values(**values)
                )
                if result.rowcount == 0:
                    existing = await self.session.execute(
                        select(matches.c.id).where(matches.c.id == match.id)
                    )
                    if existing.first() is not None:
                        logfire.warn(
                            "Match version conflict",
                            match_id=str(match.id),
                            version=match.version,
                        )
                        raise ConcurrentModificationError("Match", str(match.id))
                    await self.session.execute(insert(matches).values(**values))
                await self.session.flush()
            except IntegrityError as e:
                # A match already exists for the accepted request
                logfire.warn(
                    "Match uniqueness conflict", match_id=str(match.id), error=str(e)
                )
                raise ConcurrentModificationError("Match", str(match.id)) from e

            return match.model_copy(update={"version": values["version"]})

    async def soft_delete(self, match_ids: List[MatchId], deleted_at: datetime) -> int:
        """Mark live matches as deleted."""
        if not match_ids:
            return 0
        result = await self.session.execute(
            update(matches)
            .where(matches.c.id.in_(match_ids), matches.c.deleted_at.is_(None))
            .values(deleted_at=deleted_at, updated_at=deleted_at)
        )
        await self.session.flush()
        return result.rowcount
