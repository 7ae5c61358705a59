"""Strongly typed identifiers for the matchmaking domain.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Entities owned by this service
ThreadId = NewType("ThreadId", UUID)
MatchRequestId = NewType("MatchRequestId", UUID)
MatchId = NewType("MatchId", UUID)

# References to entities owned by the user and skill services
UserId = NewType("UserId", UUID)
SkillId = NewType("SkillId", UUID)
