"""Match request entity.

A match request is one proposal or counter-offer within a negotiation
thread. Requests are never deleted by the negotiation itself: superseded
and rejected proposals stay as the thread's history.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from barter.domain.error import InvalidStateError
from barter.domain.model.common import DomainModel
from barter.domain.value import (
    MATCH_REQUEST_TRANSITIONS,
    MatchRequestId,
    MatchRequestStatus,
    NegotiationTerms,
    SkillId,
    ThreadId,
    UserId,
)


class MatchRequest(DomainModel):
    """Match request entity.

    Business rules:
    - Created pending; accepted, rejected, expired and superseded are terminal
    - At most one request per thread is ever accepted
    - A counter-offer swaps requester and target and points back to the
      request it answers through parent_request_id
    """

    id: MatchRequestId
    thread_id: ThreadId
    requester_id: UserId
    target_user_id: UserId
    skill_id: SkillId
    parent_request_id: Optional[MatchRequestId] = None
    round_number: int = Field(ge=1)
    status: MatchRequestStatus = MatchRequestStatus.PENDING
    terms: NegotiationTerms = Field(default_factory=NegotiationTerms)
    message: str
    response_message: Optional[str] = None
    responded_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    deleted_at: Optional[datetime] = None

    @property
    def exchange_skill_id(self) -> Optional[SkillId]:
        return self.terms.exchange_skill_id

    @property
    def is_pending(self) -> bool:
        return self.status == MatchRequestStatus.PENDING

    def involves_user(self, user_id: UserId) -> bool:
        return user_id in (self.requester_id, self.target_user_id)

    def references_skill(self, skill_id: SkillId) -> bool:
        return skill_id in (self.skill_id, self.exchange_skill_id)

    def transition_to(
        self,
        status: MatchRequestStatus,
        at: datetime,
        response_message: Optional[str] = None,
    ) -> "MatchRequest":
        """Return a copy moved to a new status.

        Raises:
            InvalidStateError: If the transition is not allowed
        """
        if (self.status, status) not in MATCH_REQUEST_TRANSITIONS:
            raise InvalidStateError(
                f"Match request {self.id} cannot move from "
                f"{self.status.value} to {status.value}"
            )
        return self.model_copy(
            update={
                "status": status,
                "response_message": response_message,
                "responded_at": at,
                "updated_at": at,
            }
        )
