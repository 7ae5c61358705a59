"""In-memory repository implementations for testing."""

from .match import InMemoryMatchRepository
from .match_request import InMemoryMatchRequestRepository
from .thread import InMemoryNegotiationThreadRepository
from .unit_of_work import InMemoryStore, InMemoryUnitOfWork

__all__ = [
    "InMemoryMatchRepository",
    "InMemoryMatchRequestRepository",
    "InMemoryNegotiationThreadRepository",
    "InMemoryStore",
    "InMemoryUnitOfWork",
]
