"""Match entity and its read-through projection.

A match is the durable agreement created when a match request is accepted.
It owns the post-agreement lifecycle only; everything that was negotiated
is read through the accepted request instead of being copied.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from barter.domain.error import InvalidStateError
from barter.domain.model.common import DomainModel
from barter.domain.model.match_request import MatchRequest
from barter.domain.value import (
    MATCH_TRANSITIONS,
    CurrencyCode,
    MatchId,
    MatchParty,
    MatchRequestId,
    MatchStatus,
    SkillId,
    ThreadId,
    UserId,
)


class Match(DomainModel):
    """Match entity.

    Business rules:
    - Exactly one match per accepted request (accepted_request_id is unique)
    - completed_sessions never decreases and never exceeds the plan
    - Completed and dissolved matches accept no further writes
    """

    id: MatchId
    accepted_request_id: MatchRequestId
    thread_id: ThreadId
    status: MatchStatus = MatchStatus.ACCEPTED
    accepted_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    dissolved_at: Optional[datetime] = None
    completed_sessions: int = Field(default=0, ge=0)
    next_session_date: Optional[datetime] = None
    rating_by_offering: Optional[int] = Field(default=None, ge=1, le=5)
    rating_by_requesting: Optional[int] = Field(default=None, ge=1, le=5)
    completion_notes: Optional[str] = Field(default=None, max_length=1000)
    dissolution_reason: Optional[str] = Field(default=None, max_length=500)
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    deleted_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == MatchStatus.ACCEPTED

    def transition_to(self, status: MatchStatus, at: datetime, **changes) -> "Match":
        """Return a copy moved to a new status with extra field changes.

        Raises:
            InvalidStateError: If the transition is not allowed
        """
        if (self.status, status) not in MATCH_TRANSITIONS:
            raise InvalidStateError(
                f"Match {self.id} cannot move from {self.status.value} to {status.value}"
            )
        timestamps = {
            MatchStatus.COMPLETED: "completed_at",
            MatchStatus.DISSOLVED: "dissolved_at",
        }
        return self.model_copy(
            update={"status": status, timestamps[status]: at, "updated_at": at, **changes}
        )


class MatchDetails(DomainModel):
    """Match joined with the request it was created from.

    The offering party is the user who accepted the final terms (the
    accepted request's target); the requesting party is the user who
    proposed them.
    """

    match: Match
    request: MatchRequest

    @property
    def id(self) -> MatchId:
        return self.match.id

    @property
    def status(self) -> MatchStatus:
        return self.match.status

    @property
    def offering_user_id(self) -> UserId:
        return self.request.target_user_id

    @property
    def requesting_user_id(self) -> UserId:
        return self.request.requester_id

    @property
    def skill_id(self) -> SkillId:
        return self.request.skill_id

    @property
    def exchange_skill_id(self) -> Optional[SkillId]:
        return self.request.terms.exchange_skill_id

    @property
    def is_skill_exchange(self) -> bool:
        return self.request.terms.is_skill_exchange

    @property
    def is_monetary(self) -> bool:
        return self.request.terms.is_monetary

    @property
    def agreed_amount(self) -> Optional[Decimal]:
        return self.request.terms.offered_amount

    @property
    def currency(self) -> Optional[CurrencyCode]:
        return self.request.terms.currency

    @property
    def agreed_days(self) -> list[str]:
        return self.request.terms.preferred_days

    @property
    def agreed_times(self) -> list[str]:
        return self.request.terms.preferred_times

    @property
    def session_duration_minutes(self) -> Optional[int]:
        return self.request.terms.session_duration_minutes

    @property
    def total_sessions_planned(self) -> int:
        return self.request.terms.sessions_planned

    def party_of(self, user_id: UserId) -> Optional[MatchParty]:
        """Return which side of the match the user is on, if any."""
        if user_id == self.offering_user_id:
            return MatchParty.OFFERING
        if user_id == self.requesting_user_id:
            return MatchParty.REQUESTING
        return None
