"""Match request and negotiation thread routes."""

from typing import Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from barter.application.usecase.match_request import (
    AcceptRequestRequest,
    AcceptRequestResponse,
    AcceptRequestUseCase,
    CounterOfferRequest,
    CounterOfferResponse,
    CounterOfferUseCase,
    CreateProposalRequest,
    CreateProposalResponse,
    CreateProposalUseCase,
    GetThreadRequest,
    GetThreadResponse,
    GetThreadUseCase,
    ListRequestsRequest,
    ListRequestsResponse,
    ListRequestsUseCase,
    RejectRequestRequest,
    RejectRequestResponse,
    RejectRequestUseCase,
    RequestDirection,
    TermsInput,
)
from barter.domain.value import MatchRequestStatus
from barter.interface.api.dependencies import get_actor_id

router = APIRouter(prefix="/match-requests", tags=["match-requests"], route_class=DishkaRoute)


class CreateProposalBody(BaseModel):
    """Body for opening a negotiation."""

    target_user_id: UUID
    skill_id: UUID
    terms: TermsInput = TermsInput()
    message: str


class CounterOfferBody(BaseModel):
    """Body for a counter-offer."""

    terms: TermsInput = TermsInput()
    message: str


class RejectBody(BaseModel):
    """Body for a rejection."""

    reason: Optional[str] = None


@router.post(
    "",
    response_model=CreateProposalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_proposal(
    body: CreateProposalBody,
    create_proposal_use_case: FromDishka[CreateProposalUseCase],
    actor_id: str = Depends(get_actor_id),
) -> CreateProposalResponse:
    """Send a proposal to another user for one of their skills.

    Starts a new negotiation thread, or adds a round to the active one for
    the same pair of users and skill.
    """
    return await create_proposal_use_case.execute(
        CreateProposalRequest(
            requester_id=actor_id,
            target_user_id=str(body.target_user_id),
            skill_id=str(body.skill_id),
            terms=body.terms,
            message=body.message,
        )
    )


@router.get("/incoming", response_model=ListRequestsResponse)
async def list_incoming(
    list_requests_use_case: FromDishka[ListRequestsUseCase],
    actor_id: str = Depends(get_actor_id),
    request_status: Optional[MatchRequestStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ListRequestsResponse:
    """List proposals addressed to the caller, newest first."""
    return await list_requests_use_case.execute(
        ListRequestsRequest(
            user_id=actor_id,
            direction=RequestDirection.INCOMING,
            status=request_status,
            limit=limit,
            offset=offset,
        )
    )


@router.get("/outgoing", response_model=ListRequestsResponse)
async def list_outgoing(
    list_requests_use_case: FromDishka[ListRequestsUseCase],
    actor_id: str = Depends(get_actor_id),
    request_status: Optional[MatchRequestStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ListRequestsResponse:
    """List proposals sent by the caller, newest first."""
    return await list_requests_use_case.execute(
        ListRequestsRequest(
            user_id=actor_id,
            direction=RequestDirection.OUTGOING,
            status=request_status,
            limit=limit,
            offset=offset,
        )
    )


@router.get("/threads/{thread_id}", response_model=GetThreadResponse)
async def get_thread(
    thread_id: UUID,
    get_thread_use_case: FromDishka[GetThreadUseCase],
    actor_id: str = Depends(get_actor_id),
) -> GetThreadResponse:
    """Get a negotiation thread with every proposal in round order."""
    return await get_thread_use_case.execute(
        GetThreadRequest(thread_id=str(thread_id), actor_id=actor_id)
    )


@router.post(
    "/{request_id}/counter",
    response_model=CounterOfferResponse,
    status_code=status.HTTP_201_CREATED,
)
async def counter_offer(
    request_id: UUID,
    body: CounterOfferBody,
    counter_offer_use_case: FromDishka[CounterOfferUseCase],
    actor_id: str = Depends(get_actor_id),
) -> CounterOfferResponse:
    """Answer a proposal with revised terms."""
    return await counter_offer_use_case.execute(
        CounterOfferRequest(
            request_id=str(request_id),
            actor_id=actor_id,
            terms=body.terms,
            message=body.message,
        )
    )


@router.post("/{request_id}/accept", response_model=AcceptRequestResponse)
async def accept_request(
    request_id: UUID,
    accept_request_use_case: FromDishka[AcceptRequestUseCase],
    actor_id: str = Depends(get_actor_id),
) -> AcceptRequestResponse:
    """Accept a proposal. Returns the match it creates."""
    return await accept_request_use_case.execute(
        AcceptRequestRequest(request_id=str(request_id), actor_id=actor_id)
    )


@router.post("/{request_id}/reject", response_model=RejectRequestResponse)
async def reject_request(
    request_id: UUID,
    reject_request_use_case: FromDishka[RejectRequestUseCase],
    body: RejectBody = RejectBody(),
    actor_id: str = Depends(get_actor_id),
) -> RejectRequestResponse:
    """Reject a proposal with an optional reason."""
    return await reject_request_use_case.execute(
        RejectRequestRequest(
            request_id=str(request_id), actor_id=actor_id, reason=body.reason
        )
    )
