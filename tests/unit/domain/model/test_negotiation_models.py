"""Unit tests for negotiation domain models."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from barter.domain.error import InvalidStateError
from barter.domain.model import Match, MatchDetails, MatchRequest, NegotiationThread
from barter.domain.value import (
    CurrencyCode,
    MatchId,
    MatchParty,
    MatchRequestId,
    MatchRequestStatus,
    MatchStatus,
    NegotiationTerms,
    ThreadId,
    ThreadStatus,
)
from tests.conftest import new_skill, new_user

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _thread(**overrides) -> NegotiationThread:
    first, second = NegotiationThread.sorted_pair(new_user(), new_user())
    return NegotiationThread(
        id=ThreadId(uuid4()),
        participant_a_id=first,
        participant_b_id=second,
        skill_id=new_skill(),
        **overrides,
    )


def _request(thread: NegotiationThread, **overrides) -> MatchRequest:
    return MatchRequest(
        id=MatchRequestId(uuid4()),
        thread_id=thread.id,
        requester_id=thread.participant_a_id,
        target_user_id=thread.participant_b_id,
        skill_id=thread.skill_id,
        round_number=1,
        message="Hello there",
        **overrides,
    )


class TestNegotiationThread:
    """Tests for NegotiationThread."""

    def test_sorted_pair_is_order_independent(self):
        alice, bob = new_user(), new_user()

        assert NegotiationThread.sorted_pair(alice, bob) == NegotiationThread.sorted_pair(
            bob, alice
        )

    @pytest.mark.parametrize(
        "status",
        [ThreadStatus.AGREEMENT_REACHED, ThreadStatus.NO_AGREEMENT, ThreadStatus.EXPIRED],
    )
    def test_active_thread_can_close(self, status):
        closed = _thread().transition_to(status, NOW)

        assert closed.status == status
        assert closed.closed_at == NOW
        assert closed.status.is_terminal

    @pytest.mark.parametrize(
        "status",
        [ThreadStatus.ACTIVE, ThreadStatus.NO_AGREEMENT, ThreadStatus.EXPIRED],
    )
    def test_terminal_thread_cannot_move(self, status):
        closed = _thread(status=ThreadStatus.AGREEMENT_REACHED)

        with pytest.raises(InvalidStateError):
            closed.transition_to(status, NOW)

    def test_touch_advances_rounds_and_activity(self):
        thread = _thread(round_count=2)

        touched = thread.touch(NOW, rounds=1)

        assert touched.round_count == 3
        assert touched.last_activity_at == NOW
        assert thread.round_count == 2


class TestMatchRequest:
    """Tests for MatchRequest."""

    def test_pending_request_moves_to_any_terminal_state(self):
        request = _request(_thread())

        rejected = request.transition_to(MatchRequestStatus.REJECTED, NOW, "No thanks")

        assert rejected.status == MatchRequestStatus.REJECTED
        assert rejected.response_message == "No thanks"
        assert rejected.responded_at == NOW

    def test_terminal_request_cannot_move(self):
        request = _request(_thread(), status=MatchRequestStatus.SUPERSEDED)

        with pytest.raises(InvalidStateError):
            request.transition_to(MatchRequestStatus.ACCEPTED, NOW)

    def test_references_exchange_skill(self):
        guitar = new_skill()
        request = _request(
            _thread(),
            terms=NegotiationTerms(is_skill_exchange=True, exchange_skill_id=guitar),
        )

        assert request.references_skill(guitar)
        assert request.references_skill(request.skill_id)
        assert not request.references_skill(new_skill())


class TestMatch:
    """Tests for Match and MatchDetails."""

    def test_completed_match_cannot_be_dissolved(self):
        match = Match(
            id=MatchId(uuid4()),
            accepted_request_id=MatchRequestId(uuid4()),
            thread_id=ThreadId(uuid4()),
        ).transition_to(MatchStatus.COMPLETED, NOW)

        assert match.completed_at == NOW
        with pytest.raises(InvalidStateError):
            match.transition_to(MatchStatus.DISSOLVED, NOW)

    def test_details_resolve_parties_from_accepted_request(self):
        thread = _thread()
        request = _request(thread, terms=NegotiationTerms(total_sessions=4))
        match = Match(
            id=MatchId(uuid4()), accepted_request_id=request.id, thread_id=thread.id
        )

        details = MatchDetails(match=match, request=request)

        assert details.offering_user_id == request.target_user_id
        assert details.requesting_user_id == request.requester_id
        assert details.party_of(request.target_user_id) == MatchParty.OFFERING
        assert details.party_of(request.requester_id) == MatchParty.REQUESTING
        assert details.party_of(new_user()) is None
        assert details.total_sessions_planned == 4


class TestNegotiationTerms:
    """Tests for NegotiationTerms field bounds."""

    def test_currency_is_normalized(self):
        assert CurrencyCode("usd").root == "USD"

    @pytest.mark.parametrize("currency", ["EURO", "E1R", ""])
    def test_invalid_currency_raises(self, currency):
        with pytest.raises(ValueError):
            CurrencyCode(currency)

    @pytest.mark.parametrize(
        "field,value",
        [("session_duration_minutes", 10), ("total_sessions", 0), ("total_sessions", 101)],
    )
    def test_out_of_bounds_fields_raise(self, field, value):
        with pytest.raises(ValueError):
            NegotiationTerms.model_validate({field: value})
