"""initial_schema

Create the negotiation schema for the matchmaking service:
- Negotiation threads (one active thread per user pair and skill)
- Match requests (proposals and counter-offers with flattened terms)
- Matches (the agreement and its session lifecycle)

Users and skills live in their own services, so their ids carry no
foreign keys here. Deletions arrive as events and soft-delete rows.

Revision ID: 3c1f0a9d7b42
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d7b42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE thread_status AS ENUM (
                'active', 'agreement_reached', 'no_agreement', 'expired'
            );
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE match_request_status AS ENUM (
                'pending', 'accepted', 'rejected', 'expired', 'superseded'
            );
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE match_status AS ENUM ('accepted', 'completed', 'dissolved');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # NEGOTIATION_THREADS table
    # ========================================================================
    op.create_table(
        "negotiation_threads",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("participant_a_id", sa.UUID(), nullable=False),
        sa.Column("participant_b_id", sa.UUID(), nullable=False),
        sa.Column("skill_id", sa.UUID(), nullable=False),
        sa.Column(
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
        sa.Column("round_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "last_activity_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("closed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "participant_a_id < participant_b_id", name="check_thread_pair_sorted"
        ),
        sa.CheckConstraint("round_count >= 0", name="check_thread_round_count"),
    )
    op.create_index(
        "idx_threads_participant_a", "negotiation_threads", ["participant_a_id"]
    )
    op.create_index(
        "idx_threads_participant_b", "negotiation_threads", ["participant_b_id"]
    )
    op.create_index("idx_threads_skill_id", "negotiation_threads", ["skill_id"])
    op.create_index(
        "idx_threads_status_activity",
        "negotiation_threads",
        ["status", "last_activity_at"],
    )
    op.create_index(
        "uq_threads_active_pair_skill",
        "negotiation_threads",
        ["participant_a_id", "participant_b_id", "skill_id"],
        unique=True,
        postgresql_where=sa.text("status = 'active' AND deleted_at IS NULL"),
    )

    # ========================================================================
    # MATCH_REQUESTS table
    # ========================================================================
    op.create_table(
        "match_requests",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("thread_id", sa.UUID(), nullable=False),
        sa.Column("requester_id", sa.UUID(), nullable=False),
        sa.Column("target_user_id", sa.UUID(), nullable=False),
        sa.Column("skill_id", sa.UUID(), nullable=False),
        sa.Column("parent_request_id", sa.UUID(), nullable=True),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column(
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
        sa.Column(
            "is_skill_exchange", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("exchange_skill_id", sa.UUID(), nullable=True),
        sa.Column("is_monetary", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("offered_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column(
            "preferred_days",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "preferred_times",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("session_duration_minutes", sa.Integer(), nullable=True),
        sa.Column("total_sessions", sa.Integer(), nullable=True),
        sa.Column("additional_notes", sa.String(1000), nullable=True),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("response_message", sa.String(500), nullable=True),
        sa.Column("responded_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["thread_id"], ["negotiation_threads.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["parent_request_id"], ["match_requests.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "requester_id <> target_user_id", name="check_request_not_self"
        ),
        sa.CheckConstraint("round_number >= 1", name="check_request_round_number"),
        sa.CheckConstraint(
            "NOT (is_skill_exchange AND is_monetary)", name="check_request_terms_kind"
        ),
    )
    op.create_index("idx_match_requests_thread_id", "match_requests", ["thread_id"])
    op.create_index(
        "idx_match_requests_requester", "match_requests", ["requester_id", "status"]
    )
    op.create_index(
        "idx_match_requests_target", "match_requests", ["target_user_id", "status"]
    )
    op.create_index("idx_match_requests_skill_id", "match_requests", ["skill_id"])
    op.create_index(
        "idx_match_requests_exchange_skill_id",
        "match_requests",
        ["exchange_skill_id"],
    )
    op.create_index(
        "uq_match_requests_accepted_per_thread",
        "match_requests",
        ["thread_id"],
        unique=True,
        postgresql_where=sa.text("status = 'accepted'"),
    )

    # ========================================================================
    # MATCHES table
    # ========================================================================
    op.create_table(
        "matches",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("accepted_request_id", sa.UUID(), nullable=False),
        sa.Column("thread_id", sa.UUID(), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(
                "accepted",
                "completed",
                "dissolved",
                name="match_status",
                create_type=False,
            ),
            nullable=False,
            server_default="accepted",
        ),
        sa.Column("accepted_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("dissolved_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "completed_sessions", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("next_session_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("rating_by_offering", sa.Integer(), nullable=True),
        sa.Column("rating_by_requesting", sa.Integer(), nullable=True),
        sa.Column("completion_notes", sa.String(1000), nullable=True),
        sa.Column("dissolution_reason", sa.String(500), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["accepted_request_id"], ["match_requests.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["thread_id"], ["negotiation_threads.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("accepted_request_id", name="uq_match_accepted_request"),
        sa.CheckConstraint("completed_sessions >= 0", name="check_match_sessions"),
        sa.CheckConstraint(
            "rating_by_offering IS NULL OR rating_by_offering BETWEEN 1 AND 5",
            name="check_match_rating_by_offering",
        ),
        sa.CheckConstraint(
            "rating_by_requesting IS NULL OR rating_by_requesting BETWEEN 1 AND 5",
            name="check_match_rating_by_requesting",
        ),
    )
    op.create_index("idx_matches_thread_id", "matches", ["thread_id"])
    op.create_index("idx_matches_status", "matches", ["status"])


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("matches")
    op.drop_table("match_requests")
    op.drop_table("negotiation_threads")

    # Drop ENUM types
    op.execute("DROP TYPE IF EXISTS match_status")
    op.execute("DROP TYPE IF EXISTS match_request_status")
    op.execute("DROP TYPE IF EXISTS thread_status")
