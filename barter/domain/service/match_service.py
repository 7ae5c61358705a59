"""Match lifecycle domain service."""

from datetime import datetime
from typing import Callable, Optional

import logfire

from barter.domain.error import (
    InvalidRatingError,
    MatchAlreadyCompletedError,
    MatchNotActiveError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from barter.domain.model import Match, MatchDetails
from barter.domain.repository import UnitOfWork
from barter.domain.value import (
    MatchId,
    MatchParty,
    MatchRequestStatus,
    MatchStatus,
    UserId,
)
from barter.domain.value.common import ValueObject

from .base import Service
from .notification import (
    Notification,
    NotificationPublisher,
    NotificationType,
    publish_best_effort,
)

MIN_RATING = 1
MAX_RATING = 5


class MatchStatistics(ValueObject):
    """Aggregate counts over a set of matches."""

    total: int = 0
    active: int = 0
    completed: int = 0
    dissolved: int = 0
    completion_rate: float = 0.0  # completed / (completed + dissolved)
    average_rating: Optional[float] = None
    ratings_count: int = 0


class MatchService(Service):
    """Domain service for the post-agreement match lifecycle.

    Only ACCEPTED matches take writes. COMPLETED and DISSOLVED are terminal.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notification_publisher: NotificationPublisher,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize match service.

        Args:
            uow: Unit of work over the matchmaking repositories
            notification_publisher: Outbound notification port
            clock: Source of the current time
        """
        self.uow = uow
        self.notification_publisher = notification_publisher
        self.clock = clock

    async def complete_session(
        self,
        match_id: MatchId,
        actor_id: Optional[UserId] = None,
        next_session_date: Optional[datetime] = None,
    ) -> MatchDetails:
        """Record one completed session.

        The match completes once the planned number of sessions is reached.

        Args:
            match_id: Match ID
            actor_id: Party recording the session, if known
            next_session_date: When the next session is scheduled

        Returns:
            Updated match details

        Raises:
            NotFoundError: If the match does not exist
            NotAuthorizedError: If the actor is not a party to the match
            MatchAlreadyCompletedError: If the match is already completed
            MatchNotActiveError: If the match was dissolved
        """
        with logfire.span("match_service.complete_session", match_id=str(match_id)):
            async with self.uow:
                now = self.clock()
                details = await self._load(match_id, actor_id, "update")
                match = details.match
                self._check_progress_allowed(match)

                sessions = match.completed_sessions + 1
                if sessions >= details.total_sessions_planned:
                    match = match.transition_to(
                        MatchStatus.COMPLETED,
                        now,
                        completed_sessions=details.total_sessions_planned,
                        next_session_date=None,
                    )
                else:
                    match = match.model_copy(
                        update={
                            "completed_sessions": sessions,
                            "next_session_date": next_session_date,
                            "updated_at": now,
                        }
                    )
                match = await self.uow.matches.save(match)
                await self.uow.commit()

            details = MatchDetails(match=match, request=details.request)
            logfire.info(
                "Session completed",
                match_id=str(match_id),
                completed_sessions=match.completed_sessions,
                total_sessions=details.total_sessions_planned,
            )
            await self._notify(
                NotificationType.SESSION_COMPLETED,
                details,
                completed_sessions=match.completed_sessions,
                total_sessions=details.total_sessions_planned,
            )
            if match.status == MatchStatus.COMPLETED:
                await self._notify(NotificationType.MATCH_COMPLETED, details)
            return details

    async def complete(
        self,
        match_id: MatchId,
        actor_id: Optional[UserId] = None,
        notes: Optional[str] = None,
    ) -> MatchDetails:
        """Complete a match ahead of its session plan.

        Raises:
            NotFoundError: If the match does not exist
            NotAuthorizedError: If the actor is not a party to the match
            MatchAlreadyCompletedError: If the match is already completed
            MatchNotActiveError: If the match was dissolved
        """
        with logfire.span("match_service.complete", match_id=str(match_id)):
            if notes is not None and len(notes) > 1000:
                raise ValidationError("Completion notes must be at most 1000 characters")

            async with self.uow:
                now = self.clock()
                details = await self._load(match_id, actor_id, "complete")
                self._check_progress_allowed(details.match)
                match = await self.uow.matches.save(
                    details.match.transition_to(
                        MatchStatus.COMPLETED, now, completion_notes=notes
                    )
                )
                await self.uow.commit()

            details = MatchDetails(match=match, request=details.request)
            logfire.info("Match completed", match_id=str(match_id))
            await self._notify(NotificationType.MATCH_COMPLETED, details)
            return details

    async def dissolve(
        self,
        match_id: MatchId,
        actor_id: Optional[UserId] = None,
        reason: Optional[str] = None,
    ) -> MatchDetails:
        """Dissolve an active match.

        Raises:
            NotFoundError: If the match does not exist
            NotAuthorizedError: If the actor is not a party to the match
            MatchNotActiveError: If the match is completed or already dissolved
        """
        with logfire.span("match_service.dissolve", match_id=str(match_id)):
            if reason is not None and len(reason) > 500:
                raise ValidationError("Dissolution reason must be at most 500 characters")

            async with self.uow:
                now = self.clock()
                details = await self._load(match_id, actor_id, "dissolve")
                if not details.match.is_active:
                    raise MatchNotActiveError(str(match_id), details.status.value)
                match = await self.uow.matches.save(
                    details.match.transition_to(
                        MatchStatus.DISSOLVED, now, dissolution_reason=reason
                    )
                )
                await self.uow.commit()

            details = MatchDetails(match=match, request=details.request)
            logfire.info("Match dissolved", match_id=str(match_id))
            await self._notify(NotificationType.MATCH_DISSOLVED, details, reason=reason)
            return details

    async def rate_by_offering(
        self, match_id: MatchId, rating: int, actor_id: Optional[UserId] = None
    ) -> MatchDetails:
        """Record the offering party's rating."""
        return await self._rate(match_id, MatchParty.OFFERING, rating, actor_id)

    async def rate_by_requesting(
        self, match_id: MatchId, rating: int, actor_id: Optional[UserId] = None
    ) -> MatchDetails:
        """Record the requesting party's rating."""
        return await self._rate(match_id, MatchParty.REQUESTING, rating, actor_id)

    async def rate(self, match_id: MatchId, actor_id: UserId, rating: int) -> MatchDetails:
        """Record a rating on behalf of whichever party the actor is.

        Raises:
            NotFoundError: If the match does not exist
            NotAuthorizedError: If the actor is not a party to the match
            InvalidRatingError: If the rating is outside 1-5
            MatchNotActiveError: If the match is no longer accepted
        """
        async with self.uow:
            details = await self._load(match_id, actor_id, "rate")
        party = details.party_of(actor_id)
        return await self._rate(match_id, party, rating, actor_id)

    async def get_match_details(self, match_id: MatchId) -> MatchDetails:
        """Get a match with its agreed terms.

        Raises:
            NotFoundError: If the match does not exist
        """
        async with self.uow:
            return await self._load(match_id)

    async def list_user_matches(
        self, user_id: UserId, status: Optional[MatchStatus] = None
    ) -> list[MatchDetails]:
        """List matches the user is a party to, newest first."""
        async with self.uow:
            accepted = {
                r.id: r
                for r in await self.uow.requests.find_by_user(user_id)
                if r.status == MatchRequestStatus.ACCEPTED
            }
            if not accepted:
                return []
            matches = await self.uow.matches.find_by_accepted_requests(
                list(accepted), status
            )
            return [
                MatchDetails(match=m, request=accepted[m.accepted_request_id])
                for m in matches
            ]

    async def get_statistics(self, user_id: Optional[UserId] = None) -> MatchStatistics:
        """Summarize matches for one user, or for every user when omitted.

        For a user, the average covers ratings that user received from the
        other party. Without a user it covers every rating given.
        """
        if user_id is not None:
            details = await self.list_user_matches(user_id)
            matches = [d.match for d in details]
            ratings = [
                d.match.rating_by_requesting
                if d.party_of(user_id) == MatchParty.OFFERING
                else d.match.rating_by_offering
                for d in details
            ]
        else:
            async with self.uow:
                matches = await self.uow.matches.find_all()
            ratings = [m.rating_by_offering for m in matches] + [
                m.rating_by_requesting for m in matches
            ]

        given = [r for r in ratings if r is not None]
        counts = {status: 0 for status in MatchStatus}
        for match in matches:
            counts[match.status] += 1
        finished = counts[MatchStatus.COMPLETED] + counts[MatchStatus.DISSOLVED]

        return MatchStatistics(
            total=len(matches),
            active=counts[MatchStatus.ACCEPTED],
            completed=counts[MatchStatus.COMPLETED],
            dissolved=counts[MatchStatus.DISSOLVED],
            completion_rate=counts[MatchStatus.COMPLETED] / finished if finished else 0.0,
            average_rating=round(sum(given) / len(given), 2) if given else None,
            ratings_count=len(given),
        )

    async def _rate(
        self,
        match_id: MatchId,
        party: Optional[MatchParty],
        rating: int,
        actor_id: Optional[UserId],
    ) -> MatchDetails:
        with logfire.span(
            "match_service.rate", match_id=str(match_id), party=party and party.value
        ):
            if not MIN_RATING <= rating <= MAX_RATING:
                raise InvalidRatingError(rating)

            async with self.uow:
                details = await self._load(match_id, actor_id, "rate")
                if actor_id is not None and details.party_of(actor_id) != party:
                    raise NotAuthorizedError(
                        "match", str(match_id), str(actor_id), f"rate as {party.value}"
                    )
                if not details.match.is_active:
                    raise MatchNotActiveError(str(match_id), details.status.value)

                field = (
                    "rating_by_offering"
                    if party == MatchParty.OFFERING
                    else "rating_by_requesting"
                )
                match = await self.uow.matches.save(
                    details.match.model_copy(
                        update={field: rating, "updated_at": self.clock()}
                    )
                )
                await self.uow.commit()

            logfire.info(
                "Match rated", match_id=str(match_id), party=party.value, rating=rating
            )
            return MatchDetails(match=match, request=details.request)

    async def _load(
        self,
        match_id: MatchId,
        actor_id: Optional[UserId] = None,
        action: str = "view",
    ) -> MatchDetails:
        match = await self.uow.matches.find_by_id(match_id)
        if not match:
            raise NotFoundError("Match", str(match_id))
        request = await self.uow.requests.find_by_id(match.accepted_request_id)
        if not request:
            raise NotFoundError("Match request", str(match.accepted_request_id))

        details = MatchDetails(match=match, request=request)
        if actor_id is not None and details.party_of(actor_id) is None:
            raise NotAuthorizedError("match", str(match_id), str(actor_id), action)
        return details

    @staticmethod
    def _check_progress_allowed(match: Match) -> None:
        if match.status == MatchStatus.COMPLETED:
            raise MatchAlreadyCompletedError(str(match.id))
        if match.status == MatchStatus.DISSOLVED:
            raise MatchNotActiveError(str(match.id), match.status.value)

    async def _notify(
        self, notification_type: NotificationType, details: MatchDetails, **payload
    ) -> None:
        await publish_best_effort(
            self.notification_publisher,
            Notification(
                type=notification_type,
                recipient_ids=[details.offering_user_id, details.requesting_user_id],
                subject_id=details.id,
                payload={
                    "accepted_request_id": str(details.request.id),
                    "skill_id": str(details.skill_id),
                    "status": details.status.value,
                    **payload,
                },
                occurred_at=self.clock(),
            ),
        )
