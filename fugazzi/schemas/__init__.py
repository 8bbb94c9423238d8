from .rounds import (
    GemPosition, GemResponse, RoundCreate, RoundStateResponse,
    TransitionResponse, RoundActionResponse
)
from .feed import TransactionResponse, FeedResponse, TierOddsResponse

__all__ = [
    "GemPosition", "GemResponse", "RoundCreate", "RoundStateResponse",
    "TransitionResponse", "RoundActionResponse",
    "TransactionResponse", "FeedResponse", "TierOddsResponse",
]
