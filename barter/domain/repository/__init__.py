"""Repository interfaces for the matchmaking domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from barter.domain.repository.match import MatchRepository
from barter.domain.repository.match_request import MatchRequestRepository
from barter.domain.repository.thread import NegotiationThreadRepository
from barter.domain.repository.unit_of_work import UnitOfWork

__all__ = [
    "NegotiationThreadRepository",
    "MatchRequestRepository",
    "MatchRepository",
    "UnitOfWork",
]
