"""Internal routes for collaborating services and schedulers.

These are not exposed through the public gateway.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from barter.application.usecase.cascade import (
    HandleDeletionRequest,
    HandleDeletionResponse,
    HandleDeletionUseCase,
)
from barter.application.usecase.maintenance import (
    ExpireThreadsRequest,
    ExpireThreadsResponse,
    ExpireThreadsUseCase,
)

router = APIRouter(prefix="/internal", tags=["internal"], route_class=DishkaRoute)


@router.post("/events", response_model=HandleDeletionResponse)
async def handle_event(
    body: HandleDeletionRequest,
    handle_deletion_use_case: FromDishka[HandleDeletionUseCase],
) -> HandleDeletionResponse:
    """Apply a user, skill or match deletion event.

    The body wraps the event: ``{"event": {"type": "user.deleted", ...}}``.
    Re-delivered events succeed and report zero removed rows.
    """
    return await handle_deletion_use_case.execute(body)


@router.post("/threads/expire", response_model=ExpireThreadsResponse)
async def expire_threads(
    expire_threads_use_case: FromDishka[ExpireThreadsUseCase],
    body: ExpireThreadsRequest = ExpireThreadsRequest(),
) -> ExpireThreadsResponse:
    """Expire negotiation threads that went quiet."""
    return await expire_threads_use_case.execute(body)
