"""Negotiation domain service.

Drives a negotiation thread from the first proposal through optional
counter-offers to either an agreement (which creates the Match) or a
terminal no-agreement / expired state.

Thread state machine:

    ACTIVE ── accept ──────────────────────► AGREEMENT_REACHED
       │
       ├── round limit / all rejected ─────► NO_AGREEMENT
       │
       └── inactivity sweep ───────────────► EXPIRED

Every operation runs in a single unit of work. Guards are evaluated on
state read inside that unit of work and the thread row is saved on every
write, so its version token serializes concurrent operations on one thread.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import uuid4

import logfire

from barter.config import NegotiationSettings
from barter.domain.error import (
    NotAuthorizedError,
    NotFoundError,
    ProposalAlreadyOpenError,
    RequestNotPendingError,
    RoundLimitExceededError,
    ThreadClosedError,
    ValidationError,
)
from barter.domain.model import Match, MatchDetails, MatchRequest, NegotiationThread
from barter.domain.repository import UnitOfWork
from barter.domain.value import (
    CurrencyCode,
    MatchId,
    MatchRequestId,
    MatchRequestStatus,
    NegotiationTerms,
    SkillId,
    ThreadId,
    ThreadStatus,
    UserId,
)

from .base import Service
from .directory import Directory
from .notification import (
    Notification,
    NotificationPublisher,
    NotificationType,
    publish_best_effort,
)


class NegotiationService(Service):
    """Domain service for the match negotiation protocol."""

    def __init__(
        self,
        uow: UnitOfWork,
        settings: NegotiationSettings,
        notification_publisher: NotificationPublisher,
        directory: Directory,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize negotiation service.

        Args:
            uow: Unit of work over the matchmaking repositories
            settings: Negotiation settings (round limit, windows, bounds)
            notification_publisher: Outbound notification port
            directory: User/skill display name lookup
            clock: Source of the current time
        """
        self.uow = uow
        self.settings = settings
        self.notification_publisher = notification_publisher
        self.directory = directory
        self.clock = clock

    async def create_proposal(
        self,
        requester_id: UserId,
        target_user_id: UserId,
        skill_id: SkillId,
        terms: NegotiationTerms,
        message: str,
    ) -> MatchRequest:
        """Open or continue a negotiation with a new proposal.

        Args:
            requester_id: User making the proposal
            target_user_id: User the proposal is addressed to
            skill_id: Skill under negotiation
            terms: Proposed terms
            message: Free-text message for the target user

        Returns:
            The created pending match request

        Raises:
            ValidationError: If the message or terms are malformed
            ThreadClosedError: If the negotiation for this pair and skill is over
            ProposalAlreadyOpenError: If the requester already has an open proposal
            RoundLimitExceededError: If the thread has used all of its rounds
        """
        with logfire.span(
            "negotiation_service.create_proposal",
            requester_id=str(requester_id),
            target_user_id=str(target_user_id),
            skill_id=str(skill_id),
        ):
            if requester_id == target_user_id:
                raise ValidationError("You cannot create a match request for your own skill")
            self._validate_message(message)
            terms = self._validate_terms(terms)

            async with self.uow:
                now = self.clock()
                thread = await self.uow.threads.find_latest_for_pair(
                    requester_id, target_user_id, skill_id
                )
                open_requests: list[MatchRequest] = []

                if thread is None:
                    participant_a, participant_b = NegotiationThread.sorted_pair(
                        requester_id, target_user_id
                    )
                    thread = NegotiationThread(
                        id=ThreadId(uuid4()),
                        participant_a_id=participant_a,
                        participant_b_id=participant_b,
                        skill_id=skill_id,
                        created_at=now,
                        updated_at=now,
                        last_activity_at=now,
                    )
                    logfire.info("Negotiation thread opened", thread_id=str(thread.id))
                elif thread.status.is_terminal:
                    logfire.warn(
                        "Proposal on closed thread",
                        thread_id=str(thread.id),
                        status=thread.status.value,
                    )
                    raise ThreadClosedError(str(thread.id), thread.status.value)
                else:
                    open_requests = await self._open_requests(thread.id)
                    own = next(
                        (r for r in open_requests if r.requester_id == requester_id),
                        None,
                    )
                    if own and own.expires_at is not None and own.expires_at <= now:
                        # A lapsed proposal no longer blocks a fresh one
                        await self.uow.requests.save(
                            own.transition_to(MatchRequestStatus.EXPIRED, now)
                        )
                        open_requests = [r for r in open_requests if r.id != own.id]
                        own = None
                    if own:
                        raise ProposalAlreadyOpenError(str(thread.id), str(own.id))

                thread = await self._claim_round(thread, open_requests, now)

                request = await self.uow.requests.save(
                    MatchRequest(
                        id=MatchRequestId(uuid4()),
                        thread_id=thread.id,
                        requester_id=requester_id,
                        target_user_id=target_user_id,
                        skill_id=skill_id,
                        round_number=thread.round_count,
                        terms=terms,
                        message=message,
                        expires_at=now + timedelta(days=self.settings.request_ttl_days),
                        created_at=now,
                        updated_at=now,
                    )
                )
                await self.uow.commit()

            logfire.info(
                "Proposal created",
                request_id=str(request.id),
                thread_id=str(thread.id),
                round_number=request.round_number,
            )
            await self._notify_request(NotificationType.REQUEST_CREATED, request)
            return request

    async def counter_offer(
        self,
        request_id: MatchRequestId,
        actor_id: UserId,
        revised_terms: NegotiationTerms,
        message: str,
    ) -> MatchRequest:
        """Answer the thread's current open proposal with revised terms.

        The answered proposal is superseded and a new proposal with swapped
        roles is created in the same thread.

        Args:
            request_id: The proposal being countered
            actor_id: User making the counter-offer
            revised_terms: Revised terms
            message: Free-text message

        Returns:
            The new pending match request

        Raises:
            NotFoundError: If the request or its thread does not exist
            NotAuthorizedError: If the actor is not the proposal's target
            RequestNotPendingError: If the proposal is not the open proposal
                or has expired
            RoundLimitExceededError: If the thread has used all of its rounds
        """
        with logfire.span(
            "negotiation_service.counter_offer",
            request_id=str(request_id),
            actor_id=str(actor_id),
        ):
            self._validate_message(message)
            revised_terms = self._validate_terms(revised_terms)

            async with self.uow:
                now = self.clock()
                prior, thread = await self._load_request_and_thread(request_id)

                if actor_id != prior.target_user_id:
                    raise NotAuthorizedError(
                        "match request", str(request_id), str(actor_id), "counter"
                    )
                if not prior.is_pending or not thread.is_active:
                    raise RequestNotPendingError(str(request_id))

                open_requests = await self._open_requests(thread.id)
                latest = max(open_requests, key=lambda r: r.round_number)
                if latest.id != prior.id:
                    raise RequestNotPendingError(
                        str(request_id), "is not the thread's current open proposal"
                    )

                await self._expire_if_lapsed(prior, thread, now)
                thread = await self._claim_round(thread, open_requests, now)

                await self.uow.requests.save(
                    prior.transition_to(MatchRequestStatus.SUPERSEDED, now)
                )
                counter = await self.uow.requests.save(
                    MatchRequest(
                        id=MatchRequestId(uuid4()),
                        thread_id=thread.id,
                        requester_id=actor_id,
                        target_user_id=prior.requester_id,
                        skill_id=prior.skill_id,
                        parent_request_id=prior.id,
                        round_number=thread.round_count,
                        terms=revised_terms,
                        message=message,
                        expires_at=now + timedelta(days=self.settings.request_ttl_days),
                        created_at=now,
                        updated_at=now,
                    )
                )
                await self.uow.commit()

            logfire.info(
                "Counter-offer created",
                request_id=str(counter.id),
                parent_request_id=str(prior.id),
                thread_id=str(thread.id),
                round_number=counter.round_number,
            )
            await self._notify_request(
                NotificationType.REQUEST_CREATED, counter, is_counter_offer=True
            )
            return counter

    async def accept(self, request_id: MatchRequestId, actor_id: UserId) -> MatchDetails:
        """Accept a proposal, closing the thread and creating the Match.

        Args:
            request_id: The proposal to accept
            actor_id: User accepting (must be the proposal's target)

        Returns:
            The created match with its accepted request

        Raises:
            NotFoundError: If the request or its thread does not exist
            NotAuthorizedError: If the actor is not the proposal's target
            ThreadClosedError: If another proposal in the thread was accepted
            RequestNotPendingError: If the proposal is no longer open or has
                expired
            ConcurrentModificationError: If a concurrent operation won the thread
        """
        with logfire.span(
            "negotiation_service.accept",
            request_id=str(request_id),
            actor_id=str(actor_id),
        ):
            async with self.uow:
                now = self.clock()
                request, thread = await self._load_request_and_thread(request_id)
                self._check_response_allowed(request, thread, actor_id, "accept")
                await self._expire_if_lapsed(request, thread, now)

                # Saving the thread first makes a concurrent acceptance lose
                await self.uow.threads.save(
                    thread.transition_to(ThreadStatus.AGREEMENT_REACHED, now)
                )
                accepted = await self.uow.requests.save(
                    request.transition_to(MatchRequestStatus.ACCEPTED, now)
                )
                for other in await self._open_requests(thread.id):
                    if other.id != request.id:
                        await self.uow.requests.save(
                            other.transition_to(MatchRequestStatus.SUPERSEDED, now)
                        )

                match = await self.uow.matches.save(
                    Match(
                        id=MatchId(uuid4()),
                        accepted_request_id=accepted.id,
                        thread_id=thread.id,
                        accepted_at=now,
                        created_at=now,
                        updated_at=now,
                    )
                )
                await self.uow.commit()

            logfire.info(
                "Proposal accepted",
                request_id=str(request_id),
                thread_id=str(thread.id),
                match_id=str(match.id),
            )
            await self._notify_request(
                NotificationType.REQUEST_ACCEPTED, accepted, match_id=str(match.id)
            )
            return MatchDetails(match=match, request=accepted)

    async def reject(
        self,
        request_id: MatchRequestId,
        actor_id: UserId,
        reason: Optional[str] = None,
    ) -> MatchRequest:
        """Reject a proposal.

        When no other proposal remains open the thread ends without agreement.

        Args:
            request_id: The proposal to reject
            actor_id: User rejecting (must be the proposal's target)
            reason: Optional reason shown to the requester

        Returns:
            The rejected match request

        Raises:
            NotFoundError: If the request or its thread does not exist
            NotAuthorizedError: If the actor is not the proposal's target
            ThreadClosedError: If the thread already reached agreement
            RequestNotPendingError: If the proposal is no longer open or has
                expired
        """
        with logfire.span(
            "negotiation_service.reject",
            request_id=str(request_id),
            actor_id=str(actor_id),
        ):
            if reason is not None and len(reason) > self.settings.message_max_length:
                raise ValidationError(
                    f"Reason must be at most {self.settings.message_max_length} characters"
                )

            async with self.uow:
                now = self.clock()
                request, thread = await self._load_request_and_thread(request_id)
                self._check_response_allowed(request, thread, actor_id, "reject")
                await self._expire_if_lapsed(request, thread, now)

                rejected = await self.uow.requests.save(
                    request.transition_to(MatchRequestStatus.REJECTED, now, reason)
                )
                still_open = [
                    r for r in await self._open_requests(thread.id) if r.id != request.id
                ]
                if still_open:
                    await self.uow.threads.save(thread.touch(now))
                else:
                    await self.uow.threads.save(
                        thread.transition_to(ThreadStatus.NO_AGREEMENT, now)
                    )
                await self.uow.commit()

            logfire.info(
                "Proposal rejected",
                request_id=str(request_id),
                thread_id=str(thread.id),
                thread_closed=not still_open,
            )
            await self._notify_request(
                NotificationType.REQUEST_REJECTED, rejected, reason=reason
            )
            return rejected

    async def expire_stale_threads(self, now: Optional[datetime] = None) -> int:
        """Expire active threads that saw no activity within the window.

        Open proposals in those threads expire with them. Pending proposals
        past their own expiry are expired as well, while their thread stays
        active. Safe to re-run: terminal threads and requests are never
        selected.

        Args:
            now: Reference time (defaults to the service clock)

        Returns:
            Number of threads expired
        """
        now = now or self.clock()
        cutoff = now - timedelta(days=self.settings.inactivity_days)
        with logfire.span(
            "negotiation_service.expire_stale_threads", cutoff=cutoff.isoformat()
        ):
            async with self.uow:
                stale = await self.uow.threads.find_stale_active(cutoff)
                for thread in stale:
                    await self.uow.threads.save(
                        thread.transition_to(ThreadStatus.EXPIRED, now)
                    )
                    for request in await self._open_requests(thread.id):
                        await self.uow.requests.save(
                            request.transition_to(MatchRequestStatus.EXPIRED, now)
                        )

                lapsed_by_thread: dict[ThreadId, list[MatchRequest]] = {}
                for request in await self.uow.requests.find_lapsed(now):
                    lapsed_by_thread.setdefault(request.thread_id, []).append(request)
                lapsed_count = 0
                for thread_id, lapsed in lapsed_by_thread.items():
                    thread = await self.uow.threads.find_by_id(thread_id)
                    if thread is None or not thread.is_active:
                        continue
                    await self.uow.threads.save(thread.model_copy(update={"updated_at": now}))
                    for request in lapsed:
                        await self.uow.requests.save(
                            request.transition_to(MatchRequestStatus.EXPIRED, now)
                        )
                    lapsed_count += len(lapsed)
                await self.uow.commit()

            logfire.info(
                "Stale threads expired", count=len(stale), lapsed_requests=lapsed_count
            )
            return len(stale)

    async def get_thread(
        self, thread_id: ThreadId, actor_id: UserId
    ) -> tuple[NegotiationThread, list[MatchRequest]]:
        """Get a thread with its full proposal history.

        Args:
            thread_id: Thread ID
            actor_id: User asking (must be a participant)

        Returns:
            Tuple of (thread, requests in round order)

        Raises:
            NotFoundError: If the thread does not exist
            NotAuthorizedError: If the actor is not a participant
        """
        async with self.uow:
            thread = await self.uow.threads.find_by_id(thread_id)
            if not thread:
                raise NotFoundError("Negotiation thread", str(thread_id))
            if not thread.has_participant(actor_id):
                raise NotAuthorizedError(
                    "negotiation thread", str(thread_id), str(actor_id), "view"
                )
            requests = await self.uow.requests.find_by_thread(thread_id)
            return thread, requests

    async def list_incoming(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MatchRequest]:
        """List proposals addressed to a user."""
        async with self.uow:
            return await self.uow.requests.find_incoming(user_id, status, limit, offset)

    async def list_outgoing(
        self,
        user_id: UserId,
        status: Optional[MatchRequestStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MatchRequest]:
        """List proposals sent by a user."""
        async with self.uow:
            return await self.uow.requests.find_outgoing(user_id, status, limit, offset)

    async def _load_request_and_thread(
        self, request_id: MatchRequestId
    ) -> tuple[MatchRequest, NegotiationThread]:
        request = await self.uow.requests.find_by_id(request_id)
        if not request:
            raise NotFoundError("Match request", str(request_id))
        thread = await self.uow.threads.find_by_id(request.thread_id)
        if not thread:
            raise NotFoundError("Negotiation thread", str(request.thread_id))
        return request, thread

    async def _open_requests(self, thread_id: ThreadId) -> list[MatchRequest]:
        return [r for r in await self.uow.requests.find_by_thread(thread_id) if r.is_pending]

    @staticmethod
    def _check_response_allowed(
        request: MatchRequest,
        thread: NegotiationThread,
        actor_id: UserId,
        action: str,
    ) -> None:
        """Guards shared by accept and reject."""
        if actor_id != request.target_user_id:
            raise NotAuthorizedError("match request", str(request.id), str(actor_id), action)
        if thread.status == ThreadStatus.AGREEMENT_REACHED:
            raise ThreadClosedError(str(thread.id), thread.status.value)
        if not request.is_pending or not thread.is_active:
            raise RequestNotPendingError(str(request.id))

    async def _expire_if_lapsed(
        self, request: MatchRequest, thread: NegotiationThread, now: datetime
    ) -> None:
        """Expire a pending proposal whose time ran out and refuse to act on it.

        The expiry is committed before the error is raised. The thread stays
        active so either party may propose again.

        Raises:
            RequestNotPendingError: If the proposal has expired
        """
        if request.expires_at is None or request.expires_at > now:
            return

        await self.uow.threads.save(thread.model_copy(update={"updated_at": now}))
        await self.uow.requests.save(
            request.transition_to(MatchRequestStatus.EXPIRED, now)
        )
        await self.uow.commit()

        logfire.info(
            "Lapsed proposal expired",
            request_id=str(request.id),
            thread_id=str(thread.id),
        )
        raise RequestNotPendingError(str(request.id), "has expired")

    async def _claim_round(
        self,
        thread: NegotiationThread,
        open_requests: list[MatchRequest],
        now: datetime,
    ) -> NegotiationThread:
        """Advance the round counter or close the thread when it is exhausted.

        Exhaustion is committed before the error is raised: the thread ends
        without agreement and its open proposals expire.
        """
        if thread.round_count + 1 <= self.settings.max_rounds:
            return await self.uow.threads.save(thread.touch(now, rounds=1))

        await self.uow.threads.save(thread.transition_to(ThreadStatus.NO_AGREEMENT, now))
        for request in open_requests:
            await self.uow.requests.save(
                request.transition_to(MatchRequestStatus.EXPIRED, now)
            )
        await self.uow.commit()

        logfire.warn(
            "Round limit exceeded",
            thread_id=str(thread.id),
            max_rounds=self.settings.max_rounds,
        )
        raise RoundLimitExceededError(self.settings.max_rounds)

    def _validate_message(self, message: str) -> None:
        min_length = self.settings.message_min_length
        max_length = self.settings.message_max_length
        if len(message.strip()) < min_length or len(message) > max_length:
            raise ValidationError(
                f"Message must be {min_length}-{max_length} characters"
            )

    def _validate_terms(self, terms: NegotiationTerms) -> NegotiationTerms:
        """Check cross-field rules and fill in the default currency.

        Returns:
            Terms ready to be stored
        """
        if terms.is_skill_exchange and terms.is_monetary:
            raise ValidationError(
                "A proposal is either a skill exchange or a monetary offer, not both"
            )
        if terms.is_skill_exchange and terms.exchange_skill_id is None:
            raise ValidationError("A skill exchange must name the skill offered in return")
        if not terms.is_skill_exchange and terms.exchange_skill_id is not None:
            raise ValidationError("An exchange skill requires a skill exchange proposal")
        if terms.is_monetary:
            if terms.offered_amount is None or terms.offered_amount <= 0:
                raise ValidationError("A monetary offer needs a positive amount")
            if terms.currency is None:
                terms = terms.model_copy(
                    update={"currency": CurrencyCode(self.settings.default_currency)}
                )
        elif terms.offered_amount is not None:
            raise ValidationError("An offered amount requires a monetary proposal")
        return terms

    async def _notify_request(
        self,
        notification_type: NotificationType,
        request: MatchRequest,
        is_counter_offer: bool = False,
        **extra: Optional[str],
    ) -> None:
        """Publish a request signal enriched with display names."""
        recipient = (
            request.requester_id
            if notification_type != NotificationType.REQUEST_CREATED
            else request.target_user_id
        )
        payload = {
            "thread_id": str(request.thread_id),
            "requester_id": str(request.requester_id),
            "requester_name": await self.directory.get_user_name(request.requester_id),
            "target_user_id": str(request.target_user_id),
            "target_user_name": await self.directory.get_user_name(request.target_user_id),
            "skill_id": str(request.skill_id),
            "skill_name": await self.directory.get_skill_name(request.skill_id),
            "round_number": request.round_number,
            "is_counter_offer": is_counter_offer,
            "terms": request.terms.model_dump(mode="json"),
            **extra,
        }
        if request.exchange_skill_id:
            payload["exchange_skill_name"] = await self.directory.get_skill_name(
                request.exchange_skill_id
            )
        await publish_best_effort(
            self.notification_publisher,
            Notification(
                type=notification_type,
                recipient_ids=[recipient],
                subject_id=request.id,
                payload=payload,
                occurred_at=self.clock(),
            ),
        )
