# Core game engine (no database dependencies)
from .placement import PlacementGenerator, Position
from .population import PopulationGenerator, Gem, RiskTier, TierConfig, TIER_CONFIGS
from .round_state import RoundStateMachine, Round, RoundPhase, Outcome, Flash, TransitionResult
from .transaction_feed import TransactionFeedSimulator, TransactionRecord
from .odds import TierOdds, tier_odds, all_tier_odds, simulate_tier

__all__ = [
    "PlacementGenerator",
    "Position",
    "PopulationGenerator",
    "Gem",
    "RiskTier",
    "TierConfig",
    "TIER_CONFIGS",
    "RoundStateMachine",
    "Round",
    "RoundPhase",
    "Outcome",
    "Flash",
    "TransitionResult",
    "TransactionFeedSimulator",
    "TransactionRecord",
    "TierOdds",
    "tier_odds",
    "all_tier_odds",
    "simulate_tier",
]
