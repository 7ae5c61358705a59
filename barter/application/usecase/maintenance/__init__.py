"""Maintenance use cases."""

from .expire_threads import (
    ExpireThreadsRequest,
    ExpireThreadsResponse,
    ExpireThreadsUseCase,
)

__all__ = [
    "ExpireThreadsRequest",
    "ExpireThreadsResponse",
    "ExpireThreadsUseCase",
]
