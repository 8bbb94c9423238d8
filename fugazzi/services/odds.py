"""Odds analysis for the risk tiers.

Expected net return per unit of cost for the two calls a player can make:

    real call:    (1 - p) * mean_multiplier - 1
    Fugazzi call: 2 * p - 1

where p is the tier's fake probability. The Monte Carlo estimator applies
the integer floor the game uses for real-call rewards, so for cheap gems it
comes out slightly below the analytic value.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

import numpy as np

from .population import RiskTier, TIER_CONFIGS


@dataclass
class TierOdds:
    """Analytic or simulated odds for one tier."""
    tier: str
    fake_probability: float
    min_return: float
    max_return: float
    mean_multiplier: float
    real_call_ev: float      # per unit of cost
    fugazzi_call_ev: float   # per unit of cost
    samples: int = 0         # 0 = analytic

    def to_dict(self) -> Dict:
        return asdict(self)


def tier_odds(tier: RiskTier) -> TierOdds:
    config = TIER_CONFIGS[tier]
    mean = (config.min_return + config.max_return) / 2
    p = config.fake_probability
    return TierOdds(
        tier=tier.value,
        fake_probability=p,
        min_return=config.min_return,
        max_return=config.max_return,
        mean_multiplier=mean,
        real_call_ev=(1 - p) * mean - 1,
        fugazzi_call_ev=2 * p - 1,
    )


def all_tier_odds() -> List[TierOdds]:
    return [tier_odds(tier) for tier in RiskTier]


def simulate_tier(
    tier: RiskTier,
    cost: int,
    rounds: int = 100_000,
    seed: Optional[int] = None,
) -> TierOdds:
    """Estimate a tier's odds by sampling gems with numpy.

    Args:
        tier: Tier to simulate
        cost: Gem cost; the real-call reward is floor(cost * multiplier)
        rounds: Number of gems to sample
        seed: Seed for numpy's Generator

    Returns:
        TierOdds with per-unit-cost EVs measured over the samples
    """
    config = TIER_CONFIGS[tier]
    rng = np.random.default_rng(seed)

    multipliers = rng.uniform(config.min_return, config.max_return, size=rounds)
    is_fake = rng.random(rounds) < config.fake_probability

    real_rewards = np.where(is_fake, 0, np.floor(cost * multipliers))
    fugazzi_rewards = np.where(is_fake, cost * 2, 0)

    return TierOdds(
        tier=tier.value,
        fake_probability=float(is_fake.mean()),
        min_return=config.min_return,
        max_return=config.max_return,
        mean_multiplier=float(multipliers.mean()),
        real_call_ev=float((real_rewards - cost).mean() / cost),
        fugazzi_call_ev=float((fugazzi_rewards - cost).mean() / cost),
        samples=rounds,
    )
