"""Response views shared by match use cases."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from barter.domain.model import MatchDetails
from barter.domain.service import MatchStatistics
from barter.domain.value import MatchStatus


class MatchView(BaseModel):
    """A match with the terms agreed in its accepted request."""

    match_id: str
    accepted_request_id: str
    thread_id: str
    status: MatchStatus
    offering_user_id: str
    requesting_user_id: str
    skill_id: str
    exchange_skill_id: Optional[str]
    is_skill_exchange: bool
    is_monetary: bool
    agreed_amount: Optional[Decimal]
    currency: Optional[str]
    agreed_days: list[str]
    agreed_times: list[str]
    session_duration_minutes: Optional[int]
    total_sessions_planned: int
    completed_sessions: int
    next_session_date: Optional[datetime]
    rating_by_offering: Optional[int]
    rating_by_requesting: Optional[int]
    completion_notes: Optional[str]
    dissolution_reason: Optional[str]
    accepted_at: datetime
    completed_at: Optional[datetime]
    dissolved_at: Optional[datetime]

    @classmethod
    def from_domain(cls, details: MatchDetails) -> "MatchView":
        match = details.match
        return cls(
            match_id=str(match.id),
            accepted_request_id=str(match.accepted_request_id),
            thread_id=str(match.thread_id),
            status=match.status,
            offering_user_id=str(details.offering_user_id),
            requesting_user_id=str(details.requesting_user_id),
            skill_id=str(details.skill_id),
            exchange_skill_id=(
                str(details.exchange_skill_id) if details.exchange_skill_id else None
            ),
            is_skill_exchange=details.is_skill_exchange,
            is_monetary=details.is_monetary,
            agreed_amount=details.agreed_amount,
            currency=details.currency.root if details.currency else None,
            agreed_days=details.agreed_days,
            agreed_times=details.agreed_times,
            session_duration_minutes=details.session_duration_minutes,
            total_sessions_planned=details.total_sessions_planned,
            completed_sessions=match.completed_sessions,
            next_session_date=match.next_session_date,
            rating_by_offering=match.rating_by_offering,
            rating_by_requesting=match.rating_by_requesting,
            completion_notes=match.completion_notes,
            dissolution_reason=match.dissolution_reason,
            accepted_at=match.accepted_at,
            completed_at=match.completed_at,
            dissolved_at=match.dissolved_at,
        )


class MatchStatisticsView(BaseModel):
    """Match statistics as returned to clients."""

    total: int
    active: int
    completed: int
    dissolved: int
    completion_rate: float
    average_rating: Optional[float]
    ratings_count: int

    @classmethod
    def from_domain(cls, stats: MatchStatistics) -> "MatchStatisticsView":
        return cls(**stats.model_dump())
