"""Unit tests for MatchService."""

from uuid import uuid4

import pytest

from barter.adapter.notification import RecordingNotificationPublisher
from barter.domain.error import (
    InvalidRatingError,
    InvalidStateError,
    MatchAlreadyCompletedError,
    MatchNotActiveError,
    NotAuthorizedError,
    NotFoundError,
)
from barter.domain.service import MatchService, NegotiationService, NotificationType
from barter.domain.value import MatchId, MatchStatus, NegotiationTerms
from tests.conftest import PROPOSAL_MESSAGE, monetary_terms, new_skill, new_user, utc_in
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


async def _agree(env, terms: NegotiationTerms | None = None):
    """Negotiate and accept a match between two fresh users.

    Returns:
        Tuple of (match details, requesting user, offering user)
    """
    negotiation = await env.get(NegotiationService)
    requester, offerer = new_user(), new_user()
    proposal = await negotiation.create_proposal(
        requester, offerer, new_skill(), terms or monetary_terms(), PROPOSAL_MESSAGE
    )
    details = await negotiation.accept(proposal.id, offerer)
    return details, requester, offerer


class TestCompleteSession:
    """Tests for complete_session method."""

    @pytest.mark.asyncio
    async def test_records_session_and_next_date(self, unit_env):
        # Arrange
        service = await unit_env.get(MatchService)
        details, requester, _ = await _agree(unit_env)
        next_date = utc_in(days=7)

        # Act
        updated = await service.complete_session(
            details.id, actor_id=requester, next_session_date=next_date
        )

        # Assert
        assert updated.match.completed_sessions == 1
        assert updated.match.next_session_date == next_date
        assert updated.status == MatchStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_last_planned_session_completes_match(self, unit_env):
        """Terms plan three sessions; the third completes the match."""
        service = await unit_env.get(MatchService)
        publisher = await unit_env.get(RecordingNotificationPublisher)
        details, _, _ = await _agree(unit_env)

        for _ in range(3):
            updated = await service.complete_session(details.id)

        assert updated.status == MatchStatus.COMPLETED
        assert updated.match.completed_sessions == 3
        assert updated.match.completed_at is not None
        assert updated.match.next_session_date is None
        assert publisher.published[-1].type == NotificationType.MATCH_COMPLETED

    @pytest.mark.asyncio
    async def test_unspecified_plan_completes_after_one_session(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, _ = await _agree(unit_env, NegotiationTerms())

        updated = await service.complete_session(details.id)

        assert updated.status == MatchStatus.COMPLETED
        assert updated.match.completed_sessions == 1

    @pytest.mark.asyncio
    async def test_session_on_completed_match_raises(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, _ = await _agree(unit_env)
        await service.complete(details.id)

        with pytest.raises(MatchAlreadyCompletedError):
            await service.complete_session(details.id)

    @pytest.mark.asyncio
    async def test_session_on_dissolved_match_raises(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, _ = await _agree(unit_env)
        await service.dissolve(details.id)

        with pytest.raises(MatchNotActiveError):
            await service.complete_session(details.id)

    @pytest.mark.asyncio
    async def test_session_by_outsider_raises(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, _ = await _agree(unit_env)

        with pytest.raises(NotAuthorizedError):
            await service.complete_session(details.id, actor_id=new_user())

    @pytest.mark.asyncio
    async def test_unknown_match_raises(self, unit_env):
        service = await unit_env.get(MatchService)

        with pytest.raises(NotFoundError):
            await service.complete_session(MatchId(uuid4()))


class TestCompleteAndDissolve:
    """Tests for complete and dissolve methods."""

    @pytest.mark.asyncio
    async def test_complete_stores_notes(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, offerer = await _agree(unit_env)

        completed = await service.complete(details.id, actor_id=offerer, notes="Great")

        assert completed.status == MatchStatus.COMPLETED
        assert completed.match.completion_notes == "Great"

    @pytest.mark.asyncio
    async def test_dissolve_stores_reason_and_notifies_both(self, unit_env):
        service = await unit_env.get(MatchService)
        publisher = await unit_env.get(RecordingNotificationPublisher)
        details, requester, offerer = await _agree(unit_env)

        dissolved = await service.dissolve(details.id, actor_id=requester, reason="Moved")

        assert dissolved.status == MatchStatus.DISSOLVED
        assert dissolved.match.dissolution_reason == "Moved"
        assert dissolved.match.dissolved_at is not None
        notification = publisher.published[-1]
        assert notification.type == NotificationType.MATCH_DISSOLVED
        assert set(notification.recipient_ids) == {requester, offerer}

    @pytest.mark.asyncio
    async def test_dissolve_completed_match_raises(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, _ = await _agree(unit_env)
        await service.complete(details.id)

        with pytest.raises(MatchNotActiveError):
            await service.dissolve(details.id)

    @pytest.mark.asyncio
    async def test_terminal_states_are_invalid_state_errors(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, _ = await _agree(unit_env)
        await service.dissolve(details.id)

        with pytest.raises(InvalidStateError):
            await service.complete(details.id)
        with pytest.raises(InvalidStateError):
            await service.dissolve(details.id)


class TestRate:
    """Tests for rating methods."""

    @pytest.mark.asyncio
    async def test_rate_by_each_party(self, unit_env):
        service = await unit_env.get(MatchService)
        details, requester, offerer = await _agree(unit_env)

        await service.rate_by_offering(details.id, 4, actor_id=offerer)
        rated = await service.rate_by_requesting(details.id, 5, actor_id=requester)

        assert rated.match.rating_by_offering == 4
        assert rated.match.rating_by_requesting == 5

    @pytest.mark.asyncio
    async def test_rate_resolves_actor_party(self, unit_env):
        service = await unit_env.get(MatchService)
        details, requester, _ = await _agree(unit_env)

        rated = await service.rate(details.id, requester, 3)

        assert rated.match.rating_by_requesting == 3
        assert rated.match.rating_by_offering is None

    @pytest.mark.asyncio
    async def test_rerating_overwrites(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, offerer = await _agree(unit_env)

        await service.rate(details.id, offerer, 2)
        rated = await service.rate(details.id, offerer, 5)

        assert rated.match.rating_by_offering == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, -1])
    async def test_out_of_range_rating_raises(self, unit_env, rating):
        service = await unit_env.get(MatchService)
        details, _, offerer = await _agree(unit_env)

        with pytest.raises(InvalidRatingError):
            await service.rate_by_offering(details.id, rating, actor_id=offerer)

    @pytest.mark.asyncio
    async def test_rating_other_side_raises(self, unit_env):
        service = await unit_env.get(MatchService)
        details, requester, _ = await _agree(unit_env)

        with pytest.raises(NotAuthorizedError):
            await service.rate_by_offering(details.id, 4, actor_id=requester)

    @pytest.mark.asyncio
    async def test_rate_by_outsider_raises(self, unit_env):
        service = await unit_env.get(MatchService)
        details, _, _ = await _agree(unit_env)

        with pytest.raises(NotAuthorizedError):
            await service.rate(details.id, new_user(), 4)

    @pytest.mark.asyncio
    async def test_rating_completed_match_raises(self, unit_env):
        service = await unit_env.get(MatchService)
        details, requester, _ = await _agree(unit_env)
        await service.complete(details.id)

        with pytest.raises(MatchNotActiveError):
            await service.rate(details.id, requester, 5)


class TestQueries:
    """Tests for match listings and statistics."""

    @pytest.mark.asyncio
    async def test_list_user_matches_filters_by_party_and_status(self, unit_env):
        service = await unit_env.get(MatchService)
        first, requester, _ = await _agree(unit_env)
        await _agree(unit_env)
        await service.dissolve(first.id)

        mine = await service.list_user_matches(requester)
        dissolved = await service.list_user_matches(requester, MatchStatus.DISSOLVED)
        active = await service.list_user_matches(requester, MatchStatus.ACCEPTED)

        assert [d.id for d in mine] == [first.id]
        assert [d.id for d in dissolved] == [first.id]
        assert active == []

    @pytest.mark.asyncio
    async def test_user_statistics_average_received_ratings(self, unit_env):
        service = await unit_env.get(MatchService)
        first, requester, offerer = await _agree(unit_env)
        # Offerer rates the requester; requester's own rating of offerer is ignored
        await service.rate(first.id, offerer, 4)
        await service.rate(first.id, requester, 1)
        await service.complete(first.id)

        stats = await service.get_statistics(requester)

        assert stats.total == 1
        assert stats.completed == 1
        assert stats.completion_rate == 1.0
        assert stats.average_rating == 4.0
        assert stats.ratings_count == 1

    @pytest.mark.asyncio
    async def test_global_statistics(self, unit_env):
        service = await unit_env.get(MatchService)
        first, requester, offerer = await _agree(unit_env)
        second, _, _ = await _agree(unit_env)
        await _agree(unit_env)
        await service.rate(first.id, offerer, 5)
        await service.rate(first.id, requester, 4)
        await service.complete(first.id)
        await service.dissolve(second.id)

        stats = await service.get_statistics()

        assert stats.total == 3
        assert stats.active == 1
        assert stats.completed == 1
        assert stats.dissolved == 1
        assert stats.completion_rate == 0.5
        assert stats.average_rating == 4.5
        assert stats.ratings_count == 2

    @pytest.mark.asyncio
    async def test_statistics_without_matches(self, unit_env):
        service = await unit_env.get(MatchService)

        stats = await service.get_statistics(new_user())

        assert stats.total == 0
        assert stats.completion_rate == 0.0
        assert stats.average_rating is None
