"""Domain value objects for skill-exchange negotiation."""

from barter.domain.value.identifiers import (
    MatchId,
    MatchRequestId,
    SkillId,
    ThreadId,
    UserId,
)
from barter.domain.value.types import (
    MATCH_REQUEST_TRANSITIONS,
    MATCH_TRANSITIONS,
    THREAD_TRANSITIONS,
    CurrencyCode,
    MatchParty,
    MatchRequestStatus,
    MatchStatus,
    NegotiationTerms,
    ThreadStatus,
)

__all__ = [
    # Identifiers
    "ThreadId",
    "MatchRequestId",
    "MatchId",
    "UserId",
    "SkillId",
    # Types
    "ThreadStatus",
    "MatchRequestStatus",
    "MatchStatus",
    "MatchParty",
    "CurrencyCode",
    "NegotiationTerms",
    "THREAD_TRANSITIONS",
    "MATCH_REQUEST_TRANSITIONS",
    "MATCH_TRANSITIONS",
]
