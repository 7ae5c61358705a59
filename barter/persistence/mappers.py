"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from barter.domain.model import Match, MatchRequest, NegotiationThread
from barter.domain.value import (
    CurrencyCode,
    MatchId,
    MatchRequestId,
    MatchRequestStatus,
    MatchStatus,
    NegotiationTerms,
    SkillId,
    ThreadId,
    ThreadStatus,
    UserId,
)

TERMS_COLUMNS = tuple(NegotiationTerms.model_fields)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> UUID | None:
    return _uuid(value) if value is not None else None


def row_to_thread(row: Dict[str, Any]) -> NegotiationThread:
    """Convert database row to NegotiationThread domain model.

    Args:
        row: Database row as dict

    Returns:
        NegotiationThread domain model
    """
    return NegotiationThread(
        id=ThreadId(_uuid(row["id"])),
        participant_a_id=UserId(_uuid(row["participant_a_id"])),
        participant_b_id=UserId(_uuid(row["participant_b_id"])),
        skill_id=SkillId(_uuid(row["skill_id"])),
        status=ThreadStatus(row["status"]),
        round_count=row["round_count"],
        version=row["version"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        last_activity_at=row["last_activity_at"],
        closed_at=row.get("closed_at"),
        deleted_at=row.get("deleted_at"),
    )


def thread_to_dict(thread: NegotiationThread) -> Dict[str, Any]:
    """Convert NegotiationThread domain model to database dict."""
    data = thread.model_dump()
    data["status"] = thread.status.value
    return data


def row_to_match_request(row: Dict[str, Any]) -> MatchRequest:
    """Convert database row to MatchRequest domain model.

    The flattened terms columns are folded back into NegotiationTerms.

    Args:
        row: Database row as dict

    Returns:
        MatchRequest domain model
    """
    terms = NegotiationTerms(
        is_skill_exchange=row["is_skill_exchange"],
        exchange_skill_id=_optional_uuid(row.get("exchange_skill_id")),
        is_monetary=row["is_monetary"],
        offered_amount=row.get("offered_amount"),
        currency=CurrencyCode(row["currency"]) if row.get("currency") else None,
        preferred_days=list(row.get("preferred_days") or []),
        preferred_times=list(row.get("preferred_times") or []),
        session_duration_minutes=row.get("session_duration_minutes"),
        total_sessions=row.get("total_sessions"),
        additional_notes=row.get("additional_notes"),
    )
    parent_id = _optional_uuid(row.get("parent_request_id"))
    return MatchRequest(
        id=MatchRequestId(_uuid(row["id"])),
        thread_id=ThreadId(_uuid(row["thread_id"])),
        requester_id=UserId(_uuid(row["requester_id"])),
        target_user_id=UserId(_uuid(row["target_user_id"])),
        skill_id=SkillId(_uuid(row["skill_id"])),
        parent_request_id=MatchRequestId(parent_id) if parent_id else None,
        round_number=row["round_number"],
        status=MatchRequestStatus(row["status"]),
        terms=terms,
        message=row["message"],
        response_message=row.get("response_message"),
        responded_at=row.get("responded_at"),
        expires_at=row.get("expires_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def match_request_to_dict(request: MatchRequest) -> Dict[str, Any]:
    """Convert MatchRequest domain model to database dict.

    Terms are flattened into their own columns.
    """
    data = request.model_dump(exclude={"terms"})
    data["status"] = request.status.value
    terms = request.terms
    data.update(terms.model_dump(include=set(TERMS_COLUMNS)))
    data["currency"] = terms.currency.root if terms.currency else None
    return data


def row_to_match(row: Dict[str, Any]) -> Match:
    """Convert database row to Match domain model.

    Args:
        row: Database row as dict

    Returns:
        Match domain model
    """
    return Match(
        id=MatchId(_uuid(row["id"])),
        accepted_request_id=MatchRequestId(_uuid(row["accepted_request_id"])),
        thread_id=ThreadId(_uuid(row["thread_id"])),
        status=MatchStatus(row["status"]),
        accepted_at=row["accepted_at"],
        completed_at=row.get("completed_at"),
        dissolved_at=row.get("dissolved_at"),
        completed_sessions=row["completed_sessions"],
        next_session_date=row.get("next_session_date"),
        rating_by_offering=row.get("rating_by_offering"),
        rating_by_requesting=row.get("rating_by_requesting"),
        completion_notes=row.get("completion_notes"),
        dissolution_reason=row.get("dissolution_reason"),
        version=row["version"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def match_to_dict(match: Match) -> Dict[str, Any]:
    """Convert Match domain model to database dict."""
    data = match.model_dump()
    data["status"] = match.status.value
    return data
