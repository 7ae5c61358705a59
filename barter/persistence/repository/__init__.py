"""PostgreSQL repository implementations."""

from barter.persistence.repository.match import PostgresMatchRepository
from barter.persistence.repository.match_request import PostgresMatchRequestRepository
from barter.persistence.repository.thread import PostgresNegotiationThreadRepository

__all__ = [
    "PostgresMatchRepository",
    "PostgresMatchRequestRepository",
    "PostgresNegotiationThreadRepository",
]
