"""Cascade use cases."""

from .events import DeletionEvent, MatchDeleted, SkillDeleted, UserDeleted
from .handle_deletion import (
    HandleDeletionRequest,
    HandleDeletionResponse,
    HandleDeletionUseCase,
)

__all__ = [
    "DeletionEvent",
    "HandleDeletionRequest",
    "HandleDeletionResponse",
    "HandleDeletionUseCase",
    "MatchDeleted",
    "SkillDeleted",
    "UserDeleted",
]
