"""Response views shared by match request use cases."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from barter.domain.error import ValidationError
from barter.domain.model import MatchRequest, NegotiationThread
from barter.domain.value import MatchRequestStatus, NegotiationTerms, ThreadStatus


class TermsInput(BaseModel):
    """Negotiation terms as submitted by a client."""

    is_skill_exchange: bool = False
    exchange_skill_id: Optional[str] = None
    is_monetary: bool = False
    offered_amount: Optional[Decimal] = None
    currency: Optional[str] = None
    preferred_days: list[str] = []
    preferred_times: list[str] = []
    session_duration_minutes: Optional[int] = None
    total_sessions: Optional[int] = None
    additional_notes: Optional[str] = None

    def to_domain(self) -> NegotiationTerms:
        """Build domain terms.

        Raises:
            ValidationError: If a field is out of bounds
        """
        try:
            return NegotiationTerms.model_validate(self.model_dump())
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid terms: {e.errors()[0]['msg']}") from e


class MatchRequestView(BaseModel):
    """A match request as returned to clients."""

    request_id: str
    thread_id: str
    requester_id: str
    target_user_id: str
    skill_id: str
    parent_request_id: Optional[str]
    round_number: int
    status: MatchRequestStatus
    terms: NegotiationTerms
    message: str
    response_message: Optional[str]
    responded_at: Optional[datetime]
    expires_at: Optional[datetime]
    created_at: datetime
    is_counter_offer: bool

    @classmethod
    def from_domain(cls, request: MatchRequest) -> "MatchRequestView":
        return cls(
            request_id=str(request.id),
            thread_id=str(request.thread_id),
            requester_id=str(request.requester_id),
            target_user_id=str(request.target_user_id),
            skill_id=str(request.skill_id),
            parent_request_id=(
                str(request.parent_request_id) if request.parent_request_id else None
            ),
            round_number=request.round_number,
            status=request.status,
            terms=request.terms,
            message=request.message,
            response_message=request.response_message,
            responded_at=request.responded_at,
            expires_at=request.expires_at,
            created_at=request.created_at,
            is_counter_offer=request.parent_request_id is not None,
        )


class ThreadView(BaseModel):
    """A negotiation thread summary."""

    thread_id: str
    participant_ids: list[str]
    skill_id: str
    status: ThreadStatus
    round_count: int
    max_rounds: int
    last_activity_at: datetime
    closed_at: Optional[datetime]

    @classmethod
    def from_domain(cls, thread: NegotiationThread, max_rounds: int) -> "ThreadView":
        return cls(
            thread_id=str(thread.id),
            participant_ids=[str(p) for p in thread.participant_ids],
            skill_id=str(thread.skill_id),
            status=thread.status,
            round_count=thread.round_count,
            max_rounds=max_rounds,
            last_activity_at=thread.last_activity_at,
            closed_at=thread.closed_at,
        )
