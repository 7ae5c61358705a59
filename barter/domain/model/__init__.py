"""Domain model entities for skill-exchange matchmaking."""

from barter.domain.model.match import Match, MatchDetails
from barter.domain.model.match_request import MatchRequest
from barter.domain.model.thread import NegotiationThread

__all__ = [
    "NegotiationThread",
    "MatchRequest",
    "Match",
    "MatchDetails",
]
