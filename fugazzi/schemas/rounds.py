from pydantic import BaseModel
from typing import Optional, List


class GemPosition(BaseModel):
    x: float
    y: float


class GemResponse(BaseModel):
    index: int
    asset_id: str
    base_cost: int
    risk_tier: str  # 'low', 'medium', 'high', 'jackpot', 'diamond'
    reward_multiplier: float
    position: GemPosition
    rotation: float
    scale: float

    # Display hints for the price tag
    price_label: str
    return_label: str
    risk_color: str
    affordable: bool


class RoundCreate(BaseModel):
    player: Optional[str] = None  # balance key suffix; None = shared key


class RoundStateResponse(BaseModel):
    session_id: str
    balance: int
    balance_label: str
    phase: str  # 'active', 'item_selected', 'over'
    is_over: bool
    selected_index: Optional[int] = None
    last_outcome_message: Optional[str] = None
    flash: Optional[str] = None  # 'success', 'fail'
    items: List[GemResponse]


class TransitionResponse(BaseModel):
    outcome: str
    flash: Optional[str] = None
    message: Optional[str] = None
    balance_delta: int = 0
    reward: int = 0


class RoundActionResponse(BaseModel):
    result: TransitionResponse
    round: RoundStateResponse
