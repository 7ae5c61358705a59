"""Unit tests for the domain error to HTTP mapping."""

import pytest

from barter.domain.error import (
    ConcurrentModificationError,
    DomainError,
    InvalidRatingError,
    MatchAlreadyCompletedError,
    NotAuthorizedError,
    NotFoundError,
    RequestNotPendingError,
    RoundLimitExceededError,
    ThreadClosedError,
    ValidationError,
)
from barter.interface.error import status_for


class TestStatusFor:
    """Tests for status_for."""

    @pytest.mark.parametrize(
        "error,status_code",
        [
            (NotFoundError("Match", "m-1"), 404),
            (NotAuthorizedError("match", "m-1", "u-1", "rate"), 403),
            (ConcurrentModificationError("Negotiation thread", "t-1"), 409),
            (RequestNotPendingError("r-1"), 409),
            (ThreadClosedError("t-1", "expired"), 409),
            (MatchAlreadyCompletedError("m-1"), 409),
            (ValidationError("bad terms"), 422),
            (RoundLimitExceededError(6), 422),
            (InvalidRatingError(9), 422),
            (DomainError("anything else"), 400),
        ],
    )
    def test_maps_error_family_to_status(self, error, status_code):
        assert status_for(error) == status_code

    def test_error_codes_are_stable(self):
        assert RoundLimitExceededError(6).code == "round_limit_exceeded"
        assert ThreadClosedError("t-1", "expired").code == "thread_closed"
        assert ConcurrentModificationError("Match", "m-1").code == "concurrent_modification"
        assert "round limit" in RoundLimitExceededError(6).message.lower()
