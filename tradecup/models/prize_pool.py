"""Prize pool models."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class PrizeDistribution(BaseModel):
    """Payout for one finishing position."""
    model_config = ConfigDict(populate_by_name=True)
    
    rank: int
    percentage: Decimal = Field(description="Share of the prize pool, e.g. 0.5 for 50%")
    amount: Decimal
    userEmail: Optional[str] = Field(default=None, description="None until winners are assigned")
    userName: Optional[str] = None
    paid: bool = False


class PrizePoolInfo(BaseModel):
    """Prize pool of a championship with a positive enrollment fee."""
    model_config = ConfigDict(populate_by_name=True)
    
    participantsCount: int = Field(ge=0)
    enrollmentFee: Decimal
    totalEntry: Decimal = Field(description="participantsCount x enrollmentFee")
    rakePercentage: Decimal
    platformCommission: Decimal
    prizePool: Decimal
    prizeDistribution: list[PrizeDistribution]
