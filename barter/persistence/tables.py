"""SQLAlchemy table definitions for the matchmaking store.

These table definitions are used with SQLAlchemy Core and manual mappers.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# NEGOTIATION THREADS TABLE
# ============================================================================
negotiation_threads_table = Table(
    "negotiation_threads",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    # Sorted pair: participant_a_id <= participant_b_id
    Column("participant_a_id", UUID(as_uuid=True), nullable=False),
    Column("participant_b_id", UUID(as_uuid=True), nullable=False),
    Column("skill_id", UUID(as_uuid=True), nullable=False),
    Column(
        "status",
        postgresql.ENUM(
            "active",
            "agreement_reached",
            "no_agreement",
            "expired",
            name="thread_status",
            create_type=False,
        ),
        nullable=False,
        server_default="active",
    ),
    Column("round_count", Integer, nullable=False, server_default="0"),
    Column("version", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "last_activity_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default="NOW()",
    ),
    Column("closed_at", TIMESTAMP(timezone=True), nullable=True),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint(
        "participant_a_id < participant_b_id", name="check_thread_pair_sorted"
    ),
    CheckConstraint("round_count >= 0", name="check_thread_round_count"),
)

Index(
    "idx_threads_participant_a",
    negotiation_threads_table.c.participant_a_id,
)
Index(
    "idx_threads_participant_b",
    negotiation_threads_table.c.participant_b_id,
)
Index("idx_threads_skill_id", negotiation_threads_table.c.skill_id)
Index(
    "idx_threads_status_activity",
    negotiation_threads_table.c.status,
    negotiation_threads_table.c.last_activity_at,
)
# One live active thread per pair and skill
Index(
    "uq_threads_active_pair_skill",
    negotiation_threads_table.c.participant_a_id,
    negotiation_threads_table.c.participant_b_id,
    negotiation_threads_table.c.skill_id,
    unique=True,
    postgresql_where=text("status = 'active' AND deleted_at IS NULL"),
)

# ============================================================================
# MATCH REQUESTS TABLE
# ============================================================================
match_requests_table = Table(
    "match_requests",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "thread_id",
        UUID(as_uuid=True),
        ForeignKey("negotiation_threads.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("requester_id", UUID(as_uuid=True), nullable=False),
    Column("target_user_id", UUID(as_uuid=True), nullable=False),
    Column("skill_id", UUID(as_uuid=True), nullable=False),
    Column(
        "parent_request_id",
        UUID(as_uuid=True),
        ForeignKey("match_requests.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("round_number", Integer, nullable=False),
    Column(
        "status",
        postgresql.ENUM(
            "pending",
            "accepted",
            "rejected",
            "expired",
            "superseded",
            name="match_request_status",
            create_type=False,
        ),
        nullable=False,
        server_default="pending",
    ),
    # Negotiated terms (flattened NegotiationTerms)
    Column("is_skill_exchange", Boolean, nullable=False, server_default="false"),
    Column("exchange_skill_id", UUID(as_uuid=True), nullable=True),
    Column("is_monetary", Boolean, nullable=False, server_default="false"),
    Column("offered_amount", Numeric(10, 2), nullable=True),
    Column("currency", String(3), nullable=True),
    Column("preferred_days", ARRAY(Text), nullable=False, server_default="{}"),
    Column("preferred_times", ARRAY(Text), nullable=False, server_default="{}"),
    Column("session_duration_minutes", Integer, nullable=True),
    Column("total_sessions", Integer, nullable=True),
    Column("additional_notes", String(1000), nullable=True),
    Column("message", String(500), nullable=False),
    Column("response_message", String(500), nullable=True),
    Column("responded_at", TIMESTAMP(timezone=True), nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("requester_id <> target_user_id", name="check_request_not_self"),
    CheckConstraint("round_number >= 1", name="check_request_round_number"),
    CheckConstraint(
        "NOT (is_skill_exchange AND is_monetary)", name="check_request_terms_kind"
    ),
)

Index("idx_match_requests_thread_id", match_requests_table.c.thread_id)
Index(
    "idx_match_requests_requester",
    match_requests_table.c.requester_id,
    match_requests_table.c.status,
)
Index(
    "idx_match_requests_target",
    match_requests_table.c.target_user_id,
    match_requests_table.c.status,
)
Index("idx_match_requests_skill_id", match_requests_table.c.skill_id)
Index("idx_match_requests_exchange_skill_id", match_requests_table.c.exchange_skill_id)
# At most one accepted request per thread
Index(
    "uq_match_requests_accepted_per_thread",
    match_requests_table.c.thread_id,
    unique=True,
    postgresql_where=text("status = 'accepted'"),
)

# ============================================================================
# MATCHES TABLE
# ============================================================================
matches_table = Table(
    "matches",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "accepted_request_id",
        UUID(as_uuid=True),
        ForeignKey("match_requests.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column(
        "thread_id",
        UUID(as_uuid=True),
        ForeignKey("negotiation_threads.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "status",
        postgresql.ENUM(
            "accepted", "completed", "dissolved", name="match_status", create_type=False
        ),
        nullable=False,
        server_default="accepted",
    ),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=False),
    Column("completed_at", TIMESTAMP(timezone=True), nullable=True),
    Column("dissolved_at", TIMESTAMP(timezone=True), nullable=True),
    Column("completed_sessions", Integer, nullable=False, server_default="0"),
    Column("next_session_date", TIMESTAMP(timezone=True), nullable=True),
    Column("rating_by_offering", Integer, nullable=True),
    Column("rating_by_requesting", Integer, nullable=True),
    Column("completion_notes", String(1000), nullable=True),
    Column("dissolution_reason", String(500), nullable=True),
    Column("version", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("completed_sessions >= 0", name="check_match_sessions"),
    CheckConstraint(
        "rating_by_offering IS NULL OR rating_by_offering BETWEEN 1 AND 5",
        name="check_match_rating_by_offering",
    ),
    CheckConstraint(
        "rating_by_requesting IS NULL OR rating_by_requesting BETWEEN 1 AND 5",
        name="check_match_rating_by_requesting",
    ),
)

Index("idx_matches_thread_id", matches_table.c.thread_id)
Index("idx_matches_status", matches_table.c.status)
