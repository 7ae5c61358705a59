"""Match request use cases."""

from .accept_request import (
    AcceptRequestRequest,
    AcceptRequestResponse,
    AcceptRequestUseCase,
)
from .counter_offer import CounterOfferRequest, CounterOfferResponse, CounterOfferUseCase
from .create_proposal import (
    CreateProposalRequest,
    CreateProposalResponse,
    CreateProposalUseCase,
)
from .get_thread import GetThreadRequest, GetThreadResponse, GetThreadUseCase
from .list_requests import (
    ListRequestsRequest,
    ListRequestsResponse,
    ListRequestsUseCase,
    RequestDirection,
)
from .reject_request import (
    RejectRequestRequest,
    RejectRequestResponse,
    RejectRequestUseCase,
)
from .view import MatchRequestView, TermsInput, ThreadView

__all__ = [
    "AcceptRequestRequest",
    "AcceptRequestResponse",
    "AcceptRequestUseCase",
    "CounterOfferRequest",
    "CounterOfferResponse",
    "CounterOfferUseCase",
    "CreateProposalRequest",
    "CreateProposalResponse",
    "CreateProposalUseCase",
    "GetThreadRequest",
    "GetThreadResponse",
    "GetThreadUseCase",
    "ListRequestsRequest",
    "ListRequestsResponse",
    "ListRequestsUseCase",
    "MatchRequestView",
    "RejectRequestRequest",
    "RejectRequestResponse",
    "RejectRequestUseCase",
    "RequestDirection",
    "TermsInput",
    "ThreadView",
]
