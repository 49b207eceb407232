"""Holding model."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class Holding(BaseModel):
    """A participant's current position in one instrument within one championship."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    
    symbol: str
    quantity: Decimal = Field(ge=0)
    avgPrice: Decimal = Field(gt=0, description="Average acquisition price, used when no live price is available")
    name: Optional[str] = None
    championshipId: Optional[str] = None
