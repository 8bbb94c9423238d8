from fastapi import APIRouter
from typing import List

from ...schemas.feed import TierOddsResponse
from ...services.odds import all_tier_odds
from ...services.population import RiskTier
from ...services.formatting import risk_color

router = APIRouter()


@router.get("/", response_model=List[TierOddsResponse])
async def list_tiers():
    """Tier configuration with the expected return of each call."""
    return [
        TierOddsResponse(**odds.to_dict(), color=risk_color(RiskTier(odds.tier)))
        for odds in all_tier_odds()
    ]
