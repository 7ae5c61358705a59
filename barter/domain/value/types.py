"""Domain value objects for skill-exchange negotiation.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from barter.domain.value.common import RootValueObject, ValueObject
from barter.domain.value.identifiers import SkillId


class ThreadStatus(str, Enum):
    """Status of a negotiation thread.

    ACTIVE is the only non-terminal state; there are no transitions out of
    the other three.
    """

    ACTIVE = "active"
    AGREEMENT_REACHED = "agreement_reached"
    NO_AGREEMENT = "no_agreement"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not ThreadStatus.ACTIVE


class MatchRequestStatus(str, Enum):
    """Status of a single proposal or counter-offer."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    SUPERSEDED = "superseded"

    @property
    def is_terminal(self) -> bool:
        return self is not MatchRequestStatus.PENDING


class MatchStatus(str, Enum):
    """Status of an agreed match."""

    ACCEPTED = "accepted"
    COMPLETED = "completed"
    DISSOLVED = "dissolved"


class MatchParty(str, Enum):
    """Side of a match, used for ratings."""

    OFFERING = "offering"
    REQUESTING = "requesting"


# Allowed (from, to) transitions; anything else is a programming error.
THREAD_TRANSITIONS: frozenset[tuple[ThreadStatus, ThreadStatus]] = frozenset(
    {
        (ThreadStatus.ACTIVE, ThreadStatus.AGREEMENT_REACHED),
        (ThreadStatus.ACTIVE, ThreadStatus.NO_AGREEMENT),
        (ThreadStatus.ACTIVE, ThreadStatus.EXPIRED),
    }
)

MATCH_REQUEST_TRANSITIONS: frozenset[
    tuple[MatchRequestStatus, MatchRequestStatus]
] = frozenset(
    (MatchRequestStatus.PENDING, target)
    for target in MatchRequestStatus
    if target is not MatchRequestStatus.PENDING
)

MATCH_TRANSITIONS: frozenset[tuple[MatchStatus, MatchStatus]] = frozenset(
    {
        (MatchStatus.ACCEPTED, MatchStatus.COMPLETED),
        (MatchStatus.ACCEPTED, MatchStatus.DISSOLVED),
    }
)


class CurrencyCode(RootValueObject[str]):
    """ISO 4217 currency code, e.g. 'EUR'."""

    @field_validator("root")
    @classmethod
    def validate_currency_code(cls, v: str) -> str:
        """Validate and normalize the code to upper case."""
        v = v.upper()
        if not re.match(r"^[A-Z]{3}$", v):
            raise ValueError("Currency must be a three letter ISO 4217 code")
        return v


class NegotiationTerms(ValueObject):
    """Terms proposed in a match request.

    Field-level bounds are checked here; the cross-field rules (exchange vs.
    monetary) are business rules enforced by the negotiation service.
    """

    is_skill_exchange: bool = False
    exchange_skill_id: Optional[SkillId] = None
    is_monetary: bool = False
    offered_amount: Optional[Decimal] = None
    currency: Optional[CurrencyCode] = None
    preferred_days: list[str] = Field(default_factory=list)
    preferred_times: list[str] = Field(default_factory=list)
    session_duration_minutes: Optional[int] = Field(default=None, ge=15, le=480)
    total_sessions: Optional[int] = Field(default=None, ge=1, le=100)
    additional_notes: Optional[str] = Field(default=None, max_length=1000)

    @property
    def sessions_planned(self) -> int:
        """Number of sessions the agreement covers (one when unspecified)."""
        return self.total_sessions or 1
