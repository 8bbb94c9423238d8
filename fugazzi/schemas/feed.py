from pydantic import BaseModel
from typing import List
from datetime import datetime


class TransactionResponse(BaseModel):
    id: str
    username: str
    amount: int
    is_win: bool
    timestamp: datetime

    class Config:
        from_attributes = True


class FeedResponse(BaseModel):
    running: bool
    transactions: List[TransactionResponse]  # newest first


class TierOddsResponse(BaseModel):
    tier: str
    fake_probability: float
    min_return: float
    max_return: float
    mean_multiplier: float
    real_call_ev: float
    fugazzi_call_ev: float
    color: str
