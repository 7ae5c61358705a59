"""Match routes."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from barter.application.usecase.match import (
    CompleteMatchRequest,
    CompleteMatchResponse,
    CompleteMatchUseCase,
    CompleteSessionRequest,
    CompleteSessionResponse,
    CompleteSessionUseCase,
    DissolveMatchRequest,
    DissolveMatchResponse,
    DissolveMatchUseCase,
    GetMatchRequest,
    GetMatchResponse,
    GetMatchUseCase,
    GetStatisticsRequest,
    GetStatisticsResponse,
    GetStatisticsUseCase,
    ListMatchesRequest,
    ListMatchesResponse,
    ListMatchesUseCase,
    RateMatchRequest,
    RateMatchResponse,
    RateMatchUseCase,
)
from barter.domain.value import MatchParty, MatchStatus
from barter.interface.api.dependencies import get_actor_id

router = APIRouter(prefix="/matches", tags=["matches"], route_class=DishkaRoute)


class CompleteSessionBody(BaseModel):
    next_session_date: Optional[datetime] = None


class CompleteMatchBody(BaseModel):
    notes: Optional[str] = None


class DissolveMatchBody(BaseModel):
    reason: Optional[str] = None


class RateMatchBody(BaseModel):
    rating: int
    party: Optional[MatchParty] = None  # Defaults to the caller's side


@router.get("", response_model=ListMatchesResponse)
async def list_matches(
    list_matches_use_case: FromDishka[ListMatchesUseCase],
    actor_id: str = Depends(get_actor_id),
    match_status: Optional[MatchStatus] = Query(default=None, alias="status"),
) -> ListMatchesResponse:
    """List the caller's matches, newest first."""
    return await list_matches_use_case.execute(
        ListMatchesRequest(user_id=actor_id, status=match_status)
    )


@router.get("/statistics", response_model=GetStatisticsResponse)
async def get_statistics(
    get_statistics_use_case: FromDishka[GetStatisticsUseCase],
    actor_id: str = Depends(get_actor_id),
    scope: Literal["mine", "all"] = Query(default="mine"),
) -> GetStatisticsResponse:
    """Match statistics for the caller, or across every match."""
    return await get_statistics_use_case.execute(
        GetStatisticsRequest(user_id=actor_id if scope == "mine" else None)
    )


@router.get("/{match_id}", response_model=GetMatchResponse)
async def get_match(
    match_id: UUID,
    get_match_use_case: FromDishka[GetMatchUseCase],
    actor_id: str = Depends(get_actor_id),
) -> GetMatchResponse:
    """Get a match with its agreed terms."""
    return await get_match_use_case.execute(
        GetMatchRequest(match_id=str(match_id), actor_id=actor_id)
    )


@router.post("/{match_id}/sessions", response_model=CompleteSessionResponse)
async def complete_session(
    match_id: UUID,
    complete_session_use_case: FromDishka[CompleteSessionUseCase],
    body: CompleteSessionBody = CompleteSessionBody(),
    actor_id: str = Depends(get_actor_id),
) -> CompleteSessionResponse:
    """Record a completed session."""
    return await complete_session_use_case.execute(
        CompleteSessionRequest(
            match_id=str(match_id),
            actor_id=actor_id,
            next_session_date=body.next_session_date,
        )
    )


@router.post("/{match_id}/complete", response_model=CompleteMatchResponse)
async def complete_match(
    match_id: UUID,
    complete_match_use_case: FromDishka[CompleteMatchUseCase],
    body: CompleteMatchBody = CompleteMatchBody(),
    actor_id: str = Depends(get_actor_id),
) -> CompleteMatchResponse:
    """Complete a match ahead of its session plan."""
    return await complete_match_use_case.execute(
        CompleteMatchRequest(match_id=str(match_id), actor_id=actor_id, notes=body.notes)
    )


@router.post("/{match_id}/dissolve", response_model=DissolveMatchResponse)
async def dissolve_match(
    match_id: UUID,
    dissolve_match_use_case: FromDishka[DissolveMatchUseCase],
    body: DissolveMatchBody = DissolveMatchBody(),
    actor_id: str = Depends(get_actor_id),
) -> DissolveMatchResponse:
    """Dissolve an active match."""
    return await dissolve_match_use_case.execute(
        DissolveMatchRequest(
            match_id=str(match_id), actor_id=actor_id, reason=body.reason
        )
    )


@router.post("/{match_id}/rating", response_model=RateMatchResponse)
async def rate_match(
    match_id: UUID,
    body: RateMatchBody,
    rate_match_use_case: FromDishka[RateMatchUseCase],
    actor_id: str = Depends(get_actor_id),
) -> RateMatchResponse:
    """Rate a match from the caller's side."""
    return await rate_match_use_case.execute(
        RateMatchRequest(
            match_id=str(match_id),
            actor_id=actor_id,
            rating=body.rating,
            party=body.party,
        )
    )
