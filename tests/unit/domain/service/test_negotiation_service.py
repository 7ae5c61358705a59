"""Unit tests for NegotiationService."""

import asyncio
from decimal import Decimal
from uuid import uuid4

import pytest

from barter.adapter.directory import StaticDirectory
from barter.adapter.notification import RecordingNotificationPublisher
from barter.config import NegotiationSettings
from barter.domain.error import (
    ConcurrentModificationError,
    NotAuthorizedError,
    NotFoundError,
    ProposalAlreadyOpenError,
    RequestNotPendingError,
    RoundLimitExceededError,
    ThreadClosedError,
    ValidationError,
)
from barter.domain.model import MatchDetails
from barter.domain.service import UNKNOWN_USER, NegotiationService, NotificationType
from barter.domain.value import (
    MatchRequestId,
    MatchRequestStatus,
    MatchStatus,
    NegotiationTerms,
    ThreadStatus,
)
from barter.persistence.repository.inmemory import InMemoryStore, InMemoryUnitOfWork
from tests.conftest import (
    PROPOSAL_MESSAGE,
    exchange_terms,
    monetary_terms,
    new_skill,
    new_user,
    utc_in,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


async def _counter_until(service, request, rounds: int):
    """Alternate counter-offers until the thread holds the given round."""
    while request.round_number < rounds:
        request = await service.counter_offer(
            request.id, request.target_user_id, NegotiationTerms(), "How about this?"
        )
    return request


class _CommitAfterBarrierUnitOfWork(InMemoryUnitOfWork):
    """Holds every commit until all parties have reached theirs."""

    def __init__(self, store: InMemoryStore, barrier: asyncio.Barrier) -> None:
        super().__init__(store)
        self.barrier = barrier

    async def _commit(self) -> None:
        await self.barrier.wait()
        await super()._commit()


class TestCreateProposal:
    """Tests for create_proposal method."""

    @pytest.mark.asyncio
    async def test_first_proposal_opens_thread(self, unit_env):
        """First proposal should open an active thread at round one."""
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()

        # Act
        request = await service.create_proposal(
            alice, bob, skill, monetary_terms(), PROPOSAL_MESSAGE
        )

        # Assert
        assert request.status == MatchRequestStatus.PENDING
        assert request.round_number == 1
        assert request.parent_request_id is None
        assert request.expires_at is not None

        thread = store.threads[request.thread_id]
        assert thread.status == ThreadStatus.ACTIVE
        assert thread.round_count == 1
        assert thread.has_participant(alice) and thread.has_participant(bob)

    @pytest.mark.asyncio
    async def test_reverse_direction_reuses_active_thread(self, unit_env):
        """A proposal from the other side joins the same active thread."""
        service = await unit_env.get(NegotiationService)
        alice, bob, skill = new_user(), new_user(), new_skill()

        first = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        second = await service.create_proposal(
            bob, alice, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )

        assert second.thread_id == first.thread_id
        assert second.round_number == 2

    @pytest.mark.asyncio
    async def test_different_skill_opens_new_thread(self, unit_env):
        """Each skill is negotiated in its own thread."""
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()

        first = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        second = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        assert second.thread_id != first.thread_id
        assert second.round_number == 1

    @pytest.mark.asyncio
    async def test_second_open_proposal_from_same_user_raises(self, unit_env):
        """A user may have only one open proposal per thread."""
        service = await unit_env.get(NegotiationService)
        alice, bob, skill = new_user(), new_user(), new_skill()
        await service.create_proposal(alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE)

        with pytest.raises(ProposalAlreadyOpenError):
            await service.create_proposal(
                alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
            )

    @pytest.mark.asyncio
    async def test_proposal_on_closed_thread_raises(self, unit_env):
        """Once the pair reached agreement on a skill the thread stays closed."""
        service = await unit_env.get(NegotiationService)
        alice, bob, skill = new_user(), new_user(), new_skill()
        request = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await service.accept(request.id, bob)

        with pytest.raises(ThreadClosedError):
            await service.create_proposal(
                alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
            )

    @pytest.mark.asyncio
    async def test_self_proposal_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice = new_user()

        with pytest.raises(ValidationError, match="own skill"):
            await service.create_proposal(
                alice, alice, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   hi   ", "x" * 501])
    async def test_message_length_is_validated(self, unit_env, message):
        """Messages must be 5-500 characters, ignoring surrounding whitespace."""
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)

        with pytest.raises(ValidationError, match="Message"):
            await service.create_proposal(
                new_user(), new_user(), new_skill(), NegotiationTerms(), message
            )
        assert store.threads == {}
        assert store.requests == {}

    @pytest.mark.asyncio
    async def test_exchange_and_monetary_together_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        terms = NegotiationTerms(
            is_skill_exchange=True,
            exchange_skill_id=new_skill(),
            is_monetary=True,
            offered_amount=Decimal("10"),
        )

        with pytest.raises(ValidationError, match="not both"):
            await service.create_proposal(
                new_user(), new_user(), new_skill(), terms, PROPOSAL_MESSAGE
            )

    @pytest.mark.asyncio
    async def test_exchange_without_skill_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)

        with pytest.raises(ValidationError, match="skill offered in return"):
            await service.create_proposal(
                new_user(),
                new_user(),
                new_skill(),
                NegotiationTerms(is_skill_exchange=True),
                PROPOSAL_MESSAGE,
            )

    @pytest.mark.asyncio
    async def test_monetary_without_positive_amount_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)

        with pytest.raises(ValidationError, match="positive amount"):
            await service.create_proposal(
                new_user(),
                new_user(),
                new_skill(),
                monetary_terms(amount="0"),
                PROPOSAL_MESSAGE,
            )

    @pytest.mark.asyncio
    async def test_monetary_without_currency_defaults_to_eur(self, unit_env):
        service = await unit_env.get(NegotiationService)

        request = await service.create_proposal(
            new_user(),
            new_user(),
            new_skill(),
            monetary_terms(currency=None),
            PROPOSAL_MESSAGE,
        )

        assert request.terms.currency is not None
        assert request.terms.currency.root == "EUR"

    @pytest.mark.asyncio
    async def test_notifies_target_with_display_names(self, unit_env):
        """The target is notified with names resolved through the directory."""
        service = await unit_env.get(NegotiationService)
        directory = await unit_env.get(StaticDirectory)
        publisher = await unit_env.get(RecordingNotificationPublisher)
        alice, bob, skill, guitar = new_user(), new_user(), new_skill(), new_skill()
        directory.users[alice] = "Alice"
        directory.skills[skill] = "Spanish"
        directory.skills[guitar] = "Guitar"

        request = await service.create_proposal(
            alice, bob, skill, exchange_terms(guitar), PROPOSAL_MESSAGE
        )

        [notification] = publisher.published
        assert notification.type == NotificationType.REQUEST_CREATED
        assert notification.recipient_ids == [bob]
        assert notification.subject_id == request.id
        assert notification.payload["requester_name"] == "Alice"
        assert notification.payload["target_user_name"] == UNKNOWN_USER
        assert notification.payload["skill_name"] == "Spanish"
        assert notification.payload["exchange_skill_name"] == "Guitar"
        assert notification.payload["is_counter_offer"] is False

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_proposal(self, unit_env):
        """Publishing is best effort once the proposal is committed."""
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        publisher = await unit_env.get(RecordingNotificationPublisher)
        publisher.fail_with = RuntimeError("notification service down")

        request = await service.create_proposal(
            new_user(), new_user(), new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        assert request.id in store.requests


class TestCounterOffer:
    """Tests for counter_offer method."""

    @pytest.mark.asyncio
    async def test_counter_supersedes_prior_and_swaps_roles(self, unit_env):
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        proposal = await service.create_proposal(
            alice, bob, skill, monetary_terms(), PROPOSAL_MESSAGE
        )

        # Act
        counter = await service.counter_offer(
            proposal.id, bob, monetary_terms(amount="40.00"), "A bit more please"
        )

        # Assert
        assert counter.requester_id == bob
        assert counter.target_user_id == alice
        assert counter.parent_request_id == proposal.id
        assert counter.round_number == 2
        assert counter.terms.offered_amount == Decimal("40.00")
        assert store.requests[proposal.id].status == MatchRequestStatus.SUPERSEDED
        assert store.threads[proposal.thread_id].round_count == 2

    @pytest.mark.asyncio
    async def test_counter_by_requester_raises(self, unit_env):
        """Only the target of a proposal can counter it."""
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        with pytest.raises(NotAuthorizedError):
            await service.counter_offer(
                proposal.id, alice, NegotiationTerms(), PROPOSAL_MESSAGE
            )

    @pytest.mark.asyncio
    async def test_counter_on_superseded_request_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await service.counter_offer(proposal.id, bob, NegotiationTerms(), PROPOSAL_MESSAGE)

        with pytest.raises(RequestNotPendingError):
            await service.counter_offer(
                proposal.id, bob, NegotiationTerms(), PROPOSAL_MESSAGE
            )

    @pytest.mark.asyncio
    async def test_counter_unknown_request_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)

        with pytest.raises(NotFoundError):
            await service.counter_offer(
                MatchRequestId(uuid4()), new_user(), NegotiationTerms(), PROPOSAL_MESSAGE
            )

    @pytest.mark.asyncio
    async def test_counter_notification_is_marked(self, unit_env):
        service = await unit_env.get(NegotiationService)
        publisher = await unit_env.get(RecordingNotificationPublisher)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        await service.counter_offer(proposal.id, bob, NegotiationTerms(), PROPOSAL_MESSAGE)

        notification = publisher.published[-1]
        assert notification.recipient_ids == [alice]
        assert notification.payload["is_counter_offer"] is True
        assert notification.payload["round_number"] == 2


class TestRoundLimit:
    """Tests for the round limit."""

    @pytest.mark.asyncio
    async def test_six_rounds_keep_thread_active(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        proposal = await service.create_proposal(
            new_user(), new_user(), new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        latest = await _counter_until(service, proposal, 6)

        thread = store.threads[latest.thread_id]
        assert latest.round_number == 6
        assert thread.round_count == 6
        assert thread.status == ThreadStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_seventh_round_closes_thread_without_agreement(self, unit_env):
        """The seventh proposal fails, closes the thread and expires the open one."""
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        proposal = await service.create_proposal(
            new_user(), new_user(), new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        latest = await _counter_until(service, proposal, 6)
        requests_before = len(store.requests)

        # Act
        with pytest.raises(RoundLimitExceededError) as exc_info:
            await service.counter_offer(
                latest.id, latest.target_user_id, NegotiationTerms(), "One more try"
            )

        # Assert
        assert exc_info.value.code == "round_limit_exceeded"
        assert isinstance(exc_info.value, ValidationError)
        thread = store.threads[latest.thread_id]
        assert thread.status == ThreadStatus.NO_AGREEMENT
        assert thread.round_count == 6
        assert thread.closed_at is not None
        assert len(store.requests) == requests_before
        assert store.requests[latest.id].status == MatchRequestStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_closed_thread_rejects_new_proposals(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob, skill = new_user(), new_user(), new_skill()
        proposal = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        latest = await _counter_until(service, proposal, 6)
        with pytest.raises(RoundLimitExceededError):
            await service.counter_offer(
                latest.id, latest.target_user_id, NegotiationTerms(), "One more try"
            )

        with pytest.raises(ThreadClosedError):
            await service.create_proposal(
                alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
            )


class TestAccept:
    """Tests for accept method."""

    @pytest.mark.asyncio
    async def test_accept_creates_match_and_closes_thread(self, unit_env):
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        proposal = await service.create_proposal(
            alice, bob, skill, monetary_terms(), PROPOSAL_MESSAGE
        )

        # Act
        details = await service.accept(proposal.id, bob)

        # Assert
        assert details.status == MatchStatus.ACCEPTED
        assert details.match.accepted_request_id == proposal.id
        assert details.offering_user_id == bob
        assert details.requesting_user_id == alice
        assert details.agreed_amount == Decimal("25.00")
        assert details.total_sessions_planned == 3

        assert store.requests[proposal.id].status == MatchRequestStatus.ACCEPTED
        thread = store.threads[proposal.thread_id]
        assert thread.status == ThreadStatus.AGREEMENT_REACHED
        assert list(store.matches) == [details.id]

    @pytest.mark.asyncio
    async def test_accept_supersedes_other_open_proposal(self, unit_env):
        """Both sides may have a proposal open; accepting one closes the other."""
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        from_alice = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        from_bob = await service.create_proposal(
            bob, alice, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )

        await service.accept(from_alice.id, bob)

        assert store.requests[from_bob.id].status == MatchRequestStatus.SUPERSEDED

    @pytest.mark.asyncio
    async def test_accept_by_non_target_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        with pytest.raises(NotAuthorizedError):
            await service.accept(proposal.id, alice)
        with pytest.raises(NotAuthorizedError):
            await service.accept(proposal.id, new_user())

    @pytest.mark.asyncio
    async def test_second_accept_raises_thread_closed(self, unit_env):
        """Accepting twice never creates a second match."""
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await service.accept(proposal.id, bob)

        with pytest.raises(ThreadClosedError):
            await service.accept(proposal.id, bob)
        assert len(store.matches) == 1

    @pytest.mark.asyncio
    async def test_accept_superseded_request_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await service.counter_offer(proposal.id, bob, NegotiationTerms(), PROPOSAL_MESSAGE)

        with pytest.raises(RequestNotPendingError):
            await service.accept(proposal.id, bob)

    @pytest.mark.asyncio
    async def test_concurrent_accepts_create_exactly_one_match(self, unit_env):
        """Two accepts racing on one thread: the later commit loses."""
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        from_alice = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        from_bob = await service.create_proposal(
            bob, alice, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )

        # Both units of work read the active thread before either commits
        barrier = asyncio.Barrier(2)
        racers = [
            NegotiationService(
                uow=_CommitAfterBarrierUnitOfWork(store, barrier),
                settings=NegotiationSettings(),
                notification_publisher=RecordingNotificationPublisher(),
                directory=StaticDirectory(),
                clock=utc_in,
            )
            for _ in range(2)
        ]

        # Act
        results = await asyncio.gather(
            racers[0].accept(from_alice.id, bob),
            racers[1].accept(from_bob.id, alice),
            return_exceptions=True,
        )

        # Assert
        winners = [r for r in results if isinstance(r, MatchDetails)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], (ThreadClosedError, ConcurrentModificationError))
        assert list(store.matches) == [winners[0].id]
        accepted = [
            r for r in store.requests.values() if r.status == MatchRequestStatus.ACCEPTED
        ]
        assert [r.id for r in accepted] == [winners[0].match.accepted_request_id]
        assert store.threads[from_alice.thread_id].status == ThreadStatus.AGREEMENT_REACHED


class TestReject:
    """Tests for reject method."""

    @pytest.mark.asyncio
    async def test_rejecting_last_open_proposal_ends_thread(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        rejected = await service.reject(proposal.id, bob, reason="Not available")

        assert rejected.status == MatchRequestStatus.REJECTED
        assert rejected.response_message == "Not available"
        assert rejected.responded_at is not None
        assert store.threads[proposal.thread_id].status == ThreadStatus.NO_AGREEMENT

    @pytest.mark.asyncio
    async def test_rejecting_with_other_proposal_open_keeps_thread_active(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        from_alice = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await service.create_proposal(bob, alice, skill, NegotiationTerms(), PROPOSAL_MESSAGE)

        await service.reject(from_alice.id, bob)

        assert store.threads[from_alice.thread_id].status == ThreadStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_reject_after_accept_raises_thread_closed(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await service.accept(proposal.id, bob)

        with pytest.raises(ThreadClosedError):
            await service.reject(proposal.id, bob)

    @pytest.mark.asyncio
    async def test_reject_by_requester_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        with pytest.raises(NotAuthorizedError):
            await service.reject(proposal.id, alice)

    @pytest.mark.asyncio
    async def test_reject_notifies_requester(self, unit_env):
        service = await unit_env.get(NegotiationService)
        publisher = await unit_env.get(RecordingNotificationPublisher)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        await service.reject(proposal.id, bob, reason="Busy this month")

        notification = publisher.published[-1]
        assert notification.type == NotificationType.REQUEST_REJECTED
        assert notification.recipient_ids == [alice]
        assert notification.payload["reason"] == "Busy this month"


class TestExpireStaleThreads:
    """Tests for expire_stale_threads method."""

    @pytest.mark.asyncio
    async def test_expires_inactive_threads_and_open_requests(self, unit_env):
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        proposal = await service.create_proposal(
            new_user(), new_user(), new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        # Act
        expired = await service.expire_stale_threads(now=utc_in(days=8))

        # Assert
        assert expired == 1
        assert store.threads[proposal.thread_id].status == ThreadStatus.EXPIRED
        assert store.requests[proposal.id].status == MatchRequestStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_recent_threads_are_kept(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        proposal = await service.create_proposal(
            new_user(), new_user(), new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        expired = await service.expire_stale_threads(now=utc_in(days=6))

        assert expired == 0
        assert store.threads[proposal.thread_id].status == ThreadStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_sweep_is_idempotent(self, unit_env):
        service = await unit_env.get(NegotiationService)
        await service.create_proposal(
            new_user(), new_user(), new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        later = utc_in(days=8)

        assert await service.expire_stale_threads(now=later) == 1
        assert await service.expire_stale_threads(now=later) == 0

    @pytest.mark.asyncio
    async def test_terminal_threads_are_never_expired(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await service.accept(proposal.id, bob)

        assert await service.expire_stale_threads(now=utc_in(days=30)) == 0
        assert store.threads[proposal.thread_id].status == ThreadStatus.AGREEMENT_REACHED


class TestRequestExpiry:
    """Tests for proposals that outlive their expiry."""

    @pytest.mark.asyncio
    async def test_accepting_lapsed_proposal_expires_it(self, unit_env):
        """Activity elsewhere in the thread does not keep a proposal alive."""
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        from_alice = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        service.clock = lambda: utc_in(days=5)
        from_bob = await service.create_proposal(
            bob, alice, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        service.clock = lambda: utc_in(days=10)

        # Act / Assert
        with pytest.raises(RequestNotPendingError):
            await service.accept(from_alice.id, bob)

        assert store.requests[from_alice.id].status == MatchRequestStatus.EXPIRED
        assert store.requests[from_bob.id].status == MatchRequestStatus.PENDING
        assert store.threads[from_alice.thread_id].status == ThreadStatus.ACTIVE
        assert store.matches == {}

    @pytest.mark.asyncio
    async def test_countering_lapsed_proposal_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        service.clock = lambda: utc_in(days=8)

        with pytest.raises(RequestNotPendingError):
            await service.counter_offer(proposal.id, bob, NegotiationTerms(), PROPOSAL_MESSAGE)

        assert store.requests[proposal.id].status == MatchRequestStatus.EXPIRED
        assert store.threads[proposal.thread_id].round_count == 1

    @pytest.mark.asyncio
    async def test_rejecting_lapsed_proposal_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        service.clock = lambda: utc_in(days=8)

        with pytest.raises(RequestNotPendingError):
            await service.reject(proposal.id, bob)

        assert store.requests[proposal.id].status == MatchRequestStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_lapsed_own_proposal_does_not_block_a_new_one(self, unit_env):
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        first = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        service.clock = lambda: utc_in(days=8)

        second = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )

        assert second.thread_id == first.thread_id
        assert second.round_number == 2
        assert store.requests[first.id].status == MatchRequestStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_sweep_expires_lapsed_proposal_in_active_thread(self, unit_env):
        # Arrange
        service = await unit_env.get(NegotiationService)
        store = await unit_env.get(InMemoryStore)
        alice, bob, skill = new_user(), new_user(), new_skill()
        from_alice = await service.create_proposal(
            alice, bob, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )
        service.clock = lambda: utc_in(days=5)
        from_bob = await service.create_proposal(
            bob, alice, skill, NegotiationTerms(), PROPOSAL_MESSAGE
        )

        # Act
        expired = await service.expire_stale_threads(now=utc_in(days=10))

        # Assert
        assert expired == 0
        assert store.threads[from_alice.thread_id].status == ThreadStatus.ACTIVE
        assert store.requests[from_alice.id].status == MatchRequestStatus.EXPIRED
        assert store.requests[from_bob.id].status == MatchRequestStatus.PENDING
        assert await service.expire_stale_threads(now=utc_in(days=10)) == 0


class TestQueries:
    """Tests for thread and request listings."""

    @pytest.mark.asyncio
    async def test_get_thread_returns_history_in_round_order(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )
        await _counter_until(service, proposal, 3)

        thread, requests = await service.get_thread(proposal.thread_id, alice)

        assert thread.round_count == 3
        assert [r.round_number for r in requests] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_get_thread_by_outsider_raises(self, unit_env):
        service = await unit_env.get(NegotiationService)
        proposal = await service.create_proposal(
            new_user(), new_user(), new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        with pytest.raises(NotAuthorizedError):
            await service.get_thread(proposal.thread_id, new_user())

    @pytest.mark.asyncio
    async def test_incoming_and_outgoing_lists(self, unit_env):
        service = await unit_env.get(NegotiationService)
        alice, bob = new_user(), new_user()
        proposal = await service.create_proposal(
            alice, bob, new_skill(), NegotiationTerms(), PROPOSAL_MESSAGE
        )

        incoming = await service.list_incoming(bob)
        outgoing = await service.list_outgoing(alice)
        accepted = await service.list_incoming(bob, MatchRequestStatus.ACCEPTED)

        assert [r.id for r in incoming] == [proposal.id]
        assert [r.id for r in outgoing] == [proposal.id]
        assert accepted == []
