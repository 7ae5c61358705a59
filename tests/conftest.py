"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from barter.domain.value import NegotiationTerms, SkillId, UserId

PROPOSAL_MESSAGE = "Would love to learn this from you"


def new_user() -> UserId:
    return UserId(uuid4())


def new_skill() -> SkillId:
    return SkillId(uuid4())


def utc_in(**delta) -> datetime:
    """Aware timestamp relative to now, matching the service clock."""
    return datetime.now(timezone.utc) + timedelta(**delta)


def monetary_terms(amount: str = "25.00", currency: str | None = "EUR") -> NegotiationTerms:
    """Terms for a paid exchange of a given number of sessions."""
    return NegotiationTerms.model_validate(
        {
            "is_monetary": True,
            "offered_amount": amount,
            "currency": currency,
            "total_sessions": 3,
            "session_duration_minutes": 60,
        }
    )


def exchange_terms(exchange_skill_id: SkillId, total_sessions: int = 2) -> NegotiationTerms:
    """Terms for a skill-for-skill exchange."""
    return NegotiationTerms(
        is_skill_exchange=True,
        exchange_skill_id=exchange_skill_id,
        preferred_days=["monday", "thursday"],
        preferred_times=["evening"],
        total_sessions=total_sessions,
    )
