"""Deletion events published by the user, skill and match owners."""

from typing import Annotated, Literal, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class UserDeleted(BaseModel):
    """A user account was deleted."""

    type: Literal["user.deleted"] = "user.deleted"
    event_id: UUID = Field(default_factory=uuid4)
    user_id: UUID


class SkillDeleted(BaseModel):
    """A skill listing was deleted."""

    type: Literal["skill.deleted"] = "skill.deleted"
    event_id: UUID = Field(default_factory=uuid4)
    skill_id: UUID


class MatchDeleted(BaseModel):
    """A match was deleted by an administrative process."""

    type: Literal["match.deleted"] = "match.deleted"
    event_id: UUID = Field(default_factory=uuid4)
    match_id: UUID


DeletionEvent = Annotated[
    Union[UserDeleted, SkillDeleted, MatchDeleted], Field(discriminator="type")
]
