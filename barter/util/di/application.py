"""Application layer DI providers."""

from dishka import Scope, provide

from barter.application.usecase.cascade import HandleDeletionUseCase
from barter.application.usecase.maintenance import ExpireThreadsUseCase
from barter.application.usecase.match import (
    CompleteMatchUseCase,
    CompleteSessionUseCase,
    DissolveMatchUseCase,
    GetMatchUseCase,
    GetStatisticsUseCase,
    ListMatchesUseCase,
    RateMatchUseCase,
)
from barter.application.usecase.match_request import (
    AcceptRequestUseCase,
    CounterOfferUseCase,
    CreateProposalUseCase,
    GetThreadUseCase,
    ListRequestsUseCase,
    RejectRequestUseCase,
)
from barter.config import NegotiationSettings
from barter.domain.service import CascadeService, MatchService, NegotiationService
from barter.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Negotiation use cases
    @provide
    def get_create_proposal_use_case(
        self, negotiation_service: NegotiationService
    ) -> CreateProposalUseCase:
        """Provide create proposal use case."""
        return CreateProposalUseCase(negotiation_service=negotiation_service)

    @provide
    def get_counter_offer_use_case(
        self, negotiation_service: NegotiationService
    ) -> CounterOfferUseCase:
        """Provide counter-offer use case."""
        return CounterOfferUseCase(negotiation_service=negotiation_service)

    @provide
    def get_accept_request_use_case(
        self, negotiation_service: NegotiationService
    ) -> AcceptRequestUseCase:
        """Provide accept use case."""
        return AcceptRequestUseCase(negotiation_service=negotiation_service)

    @provide
    def get_reject_request_use_case(
        self, negotiation_service: NegotiationService
    ) -> RejectRequestUseCase:
        """Provide reject use case."""
        return RejectRequestUseCase(negotiation_service=negotiation_service)

    @provide
    def get_get_thread_use_case(
        self, negotiation_service: NegotiationService, settings: NegotiationSettings
    ) -> GetThreadUseCase:
        """Provide get thread use case."""
        return GetThreadUseCase(
            negotiation_service=negotiation_service, settings=settings
        )

    @provide
    def get_list_requests_use_case(
        self, negotiation_service: NegotiationService
    ) -> ListRequestsUseCase:
        """Provide list requests use case."""
        return ListRequestsUseCase(negotiation_service=negotiation_service)

    @provide
    def get_expire_threads_use_case(
        self, negotiation_service: NegotiationService
    ) -> ExpireThreadsUseCase:
        """Provide expire threads use case."""
        return ExpireThreadsUseCase(negotiation_service=negotiation_service)

    # Match use cases
    @provide
    def get_complete_session_use_case(
        self, match_service: MatchService
    ) -> CompleteSessionUseCase:
        """Provide complete session use case."""
        return CompleteSessionUseCase(match_service=match_service)

    @provide
    def get_complete_match_use_case(
        self, match_service: MatchService
    ) -> CompleteMatchUseCase:
        """Provide complete match use case."""
        return CompleteMatchUseCase(match_service=match_service)

    @provide
    def get_dissolve_match_use_case(
        self, match_service: MatchService
    ) -> DissolveMatchUseCase:
        """Provide dissolve match use case."""
        return DissolveMatchUseCase(match_service=match_service)

    @provide
    def get_rate_match_use_case(self, match_service: MatchService) -> RateMatchUseCase:
        """Provide rate match use case."""
        return RateMatchUseCase(match_service=match_service)

    @provide
    def get_get_match_use_case(self, match_service: MatchService) -> GetMatchUseCase:
        """Provide get match use case."""
        return GetMatchUseCase(match_service=match_service)

    @provide
    def get_list_matches_use_case(
        self, match_service: MatchService
    ) -> ListMatchesUseCase:
        """Provide list matches use case."""
        return ListMatchesUseCase(match_service=match_service)

    @provide
    def get_get_statistics_use_case(
        self, match_service: MatchService
    ) -> GetStatisticsUseCase:
        """Provide statistics use case."""
        return GetStatisticsUseCase(match_service=match_service)

    # Cascade use cases
    @provide
    def get_handle_deletion_use_case(
        self, cascade_service: CascadeService
    ) -> HandleDeletionUseCase:
        """Provide deletion event use case."""
        return HandleDeletionUseCase(cascade_service=cascade_service)
