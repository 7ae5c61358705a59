"""Match use cases."""

from .complete_match import (
    CompleteMatchRequest,
    CompleteMatchResponse,
    CompleteMatchUseCase,
)
from .complete_session import (
    CompleteSessionRequest,
    CompleteSessionResponse,
    CompleteSessionUseCase,
)
from .dissolve_match import (
    DissolveMatchRequest,
    DissolveMatchResponse,
    DissolveMatchUseCase,
)
from .get_match import GetMatchRequest, GetMatchResponse, GetMatchUseCase
from .get_statistics import (
    GetStatisticsRequest,
    GetStatisticsResponse,
    GetStatisticsUseCase,
)
from .list_matches import ListMatchesRequest, ListMatchesResponse, ListMatchesUseCase
from .rate_match import RateMatchRequest, RateMatchResponse, RateMatchUseCase
from .view import MatchStatisticsView, MatchView

__all__ = [
    "CompleteMatchRequest",
    "CompleteMatchResponse",
    "CompleteMatchUseCase",
    "CompleteSessionRequest",
    "CompleteSessionResponse",
    "CompleteSessionUseCase",
    "DissolveMatchRequest",
    "DissolveMatchResponse",
    "DissolveMatchUseCase",
    "GetMatchRequest",
    "GetMatchResponse",
    "GetMatchUseCase",
    "GetStatisticsRequest",
    "GetStatisticsResponse",
    "GetStatisticsUseCase",
    "ListMatchesRequest",
    "ListMatchesResponse",
    "ListMatchesUseCase",
    "MatchStatisticsView",
    "MatchView",
    "RateMatchRequest",
    "RateMatchResponse",
    "RateMatchUseCase",
]
