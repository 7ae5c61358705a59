"""Negotiation thread entity.

A thread groups every proposal exchanged between two users over one skill
into a single bounded negotiation.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from barter.domain.error import InvalidStateError
from barter.domain.model.common import DomainModel
from barter.domain.value import (
    THREAD_TRANSITIONS,
    SkillId,
    ThreadId,
    ThreadStatus,
    UserId,
)


class NegotiationThread(DomainModel):
    """Negotiation thread entity.

    Business rules:
    - Participants are stored as a sorted pair so either party finds the
      same thread
    - round_count never exceeds the configured round limit
    - Once terminal, no further match request may be added
    - version is an optimistic concurrency token checked on every save
    """

    id: ThreadId
    participant_a_id: UserId
    participant_b_id: UserId
    skill_id: SkillId
    status: ThreadStatus = ThreadStatus.ACTIVE
    round_count: int = Field(default=0, ge=0)
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    last_activity_at: datetime = Field(default_factory=datetime.now)
    closed_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @staticmethod
    def sorted_pair(first: UserId, second: UserId) -> tuple[UserId, UserId]:
        """Return the participant pair in storage order."""
        if str(first) <= str(second):
            return first, second
        return second, first

    @property
    def participant_ids(self) -> tuple[UserId, UserId]:
        return self.participant_a_id, self.participant_b_id

    def has_participant(self, user_id: UserId) -> bool:
        return user_id in self.participant_ids

    @property
    def is_active(self) -> bool:
        return self.status == ThreadStatus.ACTIVE

    def transition_to(self, status: ThreadStatus, at: datetime) -> "NegotiationThread":
        """Return a copy moved to a new status.

        Raises:
            InvalidStateError: If the transition is not allowed
        """
        if (self.status, status) not in THREAD_TRANSITIONS:
            raise InvalidStateError(
                f"Thread {self.id} cannot move from {self.status.value} to {status.value}"
            )
        return self.model_copy(
            update={
                "status": status,
                "closed_at": at if status.is_terminal else None,
                "last_activity_at": at,
                "updated_at": at,
            }
        )

    def touch(self, at: datetime, rounds: int = 0) -> "NegotiationThread":
        """Return a copy with activity recorded and the round counter advanced."""
        return self.model_copy(
            update={
                "round_count": self.round_count + rounds,
                "last_activity_at": at,
                "updated_at": at,
            }
        )
