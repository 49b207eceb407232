"""Leaderboard models for API responses."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from .prize_pool import PrizePoolInfo


class LeaderboardEntry(BaseModel):
    """
    A single participant's standing in a championship.
    
    Derived on every computation, never persisted.
    """
    model_config = ConfigDict(populate_by_name=True)
    
    rank: int = Field(description="1-based position after sorting by net worth")
    userEmail: str
    userName: str
    buyingPower: Decimal = Field(description="Signed sum of ledger transactions")
    totalAssetValue: Decimal = Field(description="Mark-to-market value of holdings")
    totalNetWorth: Decimal
    totalReturn: Decimal = Field(description="Net worth minus starting cash")
    returnPercentage: Decimal
    totalTrades: int = Field(description="Count of buy/sell transactions")


class ParticipantError(BaseModel):
    """A participant left out of a leaderboard because a lookup failed."""
    model_config = ConfigDict(populate_by_name=True)
    
    userEmail: str
    message: str


class LeaderboardResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    championshipId: str
    startingCash: Decimal
    entries: list[LeaderboardEntry]
    errors: list[ParticipantError] = Field(default_factory=list, description="Only populated in lenient mode")
    prizePool: Optional[PrizePoolInfo] = None
