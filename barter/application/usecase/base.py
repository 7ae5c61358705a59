"""Shared use case helpers."""

from typing import Awaitable, Callable, TypeVar

import logfire

from barter.domain.error import ConcurrentModificationError

T = TypeVar("T")


async def retry_on_conflict(operation: Callable[[], Awaitable[T]]) -> T:
    """Run an operation, retrying it once after a concurrent modification.

    The retry starts a fresh unit of work, so every guard is re-evaluated
    against the state the winning transaction left behind.

    Args:
        operation: Zero-argument coroutine factory

    Returns:
        The operation's result

    Raises:
        ConcurrentModificationError: If the retry loses as well
    """
    try:
        return await operation()
    except ConcurrentModificationError as e:
        logfire.warn(
            "Concurrent modification, retrying once",
            resource=e.resource,
            identifier=e.identifier,
        )
        return await operation()
