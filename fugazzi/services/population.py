"""Population Generator for Fugazzi rounds.

Builds the gems for a round: a handful of cheap diamonds plus regular gems
drawn from a fixed catalog in fixed risk proportions. Every gem gets its own
reward multiplier and authenticity draw at generation time.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum
import logging
import math
import random

from .placement import PlacementGenerator, Position

logger = logging.getLogger(__name__)


class RiskTier(str, Enum):
    """Risk bucket controlling cost, fake probability and return range."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    JACKPOT = "jackpot"
    DIAMOND = "diamond"


@dataclass(frozen=True)
class TierConfig:
    """Fixed odds for a risk tier."""
    fake_probability: float
    min_return: float
    max_return: float
    color: str


@dataclass(frozen=True)
class CatalogEntry:
    """A regular gem the generator can hand out."""
    asset_id: str
    base_cost: int
    risk_tier: RiskTier


@dataclass
class Gem:
    """A gem on the play field."""
    asset_id: str
    base_cost: int
    risk_tier: RiskTier
    is_fake: bool
    reward_multiplier: float
    position: Position = field(default_factory=lambda: Position(50.0, 50.0))
    rotation: float = 0.0
    scale: float = 1.0


TIER_CONFIGS: Dict[RiskTier, TierConfig] = {
    RiskTier.LOW: TierConfig(fake_probability=0.20, min_return=1.05, max_return=1.15, color="#4ade80"),
    RiskTier.MEDIUM: TierConfig(fake_probability=0.35, min_return=1.20, max_return=1.40, color="#facc15"),
    RiskTier.HIGH: TierConfig(fake_probability=0.50, min_return=1.50, max_return=2.00, color="#fb923c"),
    RiskTier.JACKPOT: TierConfig(fake_probability=0.65, min_return=2.50, max_return=5.00, color="#f87171"),
    RiskTier.DIAMOND: TierConfig(fake_probability=0.15, min_return=1.10, max_return=1.30, color="#ffffff"),
}

GEM_CATALOG: List[CatalogEntry] = [
    CatalogEntry("gem1", 10, RiskTier.LOW),
    CatalogEntry("gem2", 15, RiskTier.LOW),
    CatalogEntry("gem3", 20, RiskTier.LOW),
    CatalogEntry("gem4", 25, RiskTier.LOW),
    CatalogEntry("gem5", 35, RiskTier.MEDIUM),
    CatalogEntry("gem6", 45, RiskTier.MEDIUM),
    CatalogEntry("gem8", 65, RiskTier.MEDIUM),
    CatalogEntry("gem10", 100, RiskTier.HIGH),
    CatalogEntry("gem11", 125, RiskTier.HIGH),
    CatalogEntry("gem14", 250, RiskTier.JACKPOT),
    CatalogEntry("gem16", 400, RiskTier.JACKPOT),
]

DIAMOND_ASSETS = ["diamond1", "diamond2"]


class PopulationGenerator:
    """Generates the gem population for a round.

    Diamonds come first, then regular gems split by tier proportion. The
    ordering is a convenience only; callers should not rely on it.
    """

    # Diamonds per round (inclusive)
    DIAMOND_COUNT_RANGE = (6, 10)
    DIAMOND_COST_RANGE = (1, 10)
    DIAMOND_SCALE = 0.6

    # Share of the regular slots per tier; jackpot takes the remainder
    TIER_PROPORTIONS = {
        RiskTier.LOW: 0.4,
        RiskTier.MEDIUM: 0.3,
        RiskTier.HIGH: 0.2,
    }

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        placer: Optional[PlacementGenerator] = None,
        catalog: Optional[List[CatalogEntry]] = None,
    ):
        self.rng = rng or random.Random()
        self.placer = placer or PlacementGenerator(rng=self.rng)
        self.catalog = list(catalog) if catalog is not None else list(GEM_CATALOG)

    @classmethod
    def tier_quotas(cls, remaining: int) -> Dict[RiskTier, int]:
        """Split the regular slots across tiers.

        Jackpot always gets at least one slot, even when the proportional
        share rounds down to nothing.
        """
        remaining = max(0, remaining)
        quotas = {
            tier: math.floor(remaining * share)
            for tier, share in cls.TIER_PROPORTIONS.items()
        }
        quotas[RiskTier.JACKPOT] = max(1, remaining - sum(quotas.values()))
        return quotas

    def generate(self, total_count: int) -> List[Gem]:
        """Build the gems for a round.

        Args:
            total_count: Number of gems the round should hold

        Returns:
            Diamonds followed by regular gems, each placed on the field
        """
        if total_count <= 0:
            return []

        low, high = self.DIAMOND_COUNT_RANGE
        # Leave at least one slot for the guaranteed jackpot gem
        diamond_count = min(self.rng.randint(low, high), total_count - 1)

        gems = [self._make_diamond() for _ in range(diamond_count)]
        gems.extend(self._draw_regular(total_count - diamond_count))

        positions: List[Position] = []
        for gem in gems:
            gem.position = self.placer.place(positions)
            positions.append(gem.position)

        logger.debug(
            f"Generated {len(gems)} gems ({diamond_count} diamonds) for a round of {total_count}"
        )
        return gems

    def _make_diamond(self) -> Gem:
        cost_low, cost_high = self.DIAMOND_COST_RANGE
        gem = self._make_gem(
            asset_id=self.rng.choice(DIAMOND_ASSETS),
            base_cost=self.rng.randint(cost_low, cost_high),
            risk_tier=RiskTier.DIAMOND,
        )
        gem.scale = self.DIAMOND_SCALE
        return gem

    def _draw_regular(self, remaining: int) -> List[Gem]:
        """Draw regular gems without replacement, up to each tier's quota."""
        shuffled = list(self.catalog)
        self.rng.shuffle(shuffled)

        gems = []
        for tier, quota in self.tier_quotas(remaining).items():
            available = [entry for entry in shuffled if entry.risk_tier == tier]
            for entry in available[:quota]:
                gems.append(self._make_gem(entry.asset_id, entry.base_cost, entry.risk_tier))
        return gems

    def _make_gem(self, asset_id: str, base_cost: int, risk_tier: RiskTier) -> Gem:
        """Sample multiplier and authenticity independently for one gem."""
        config = TIER_CONFIGS[risk_tier]
        return Gem(
            asset_id=asset_id,
            base_cost=base_cost,
            risk_tier=risk_tier,
            is_fake=self.rng.random() < config.fake_probability,
            reward_multiplier=self.rng.uniform(config.min_return, config.max_return),
            rotation=self.rng.uniform(0.0, 360.0) % 360.0,
        )
