"""Ledger transaction model."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class TransactionKind(str, Enum):
    """Kind of a ledger entry."""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    BUY = "buy"
    SELL = "sell"

    @property
    def is_trade(self) -> bool:
        """True for buy/sell, which count towards a participant's trades."""
        return self in (TransactionKind.BUY, TransactionKind.SELL)

    def signed(self, amount: Decimal) -> Decimal:
        """Effect of an entry of this kind on buying power."""
        if self in (TransactionKind.DEPOSIT, TransactionKind.SELL):
            return amount
        return -amount


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"


class Transaction(BaseModel):
    """
    An immutable ledger entry for a participant within one championship.
    
    The signed sum of a participant's transactions is their buying power.
    Joining a championship writes one initial deposit of the starting cash.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    
    id: Optional[str] = None
    kind: TransactionKind = Field(alias="type")
    amount: Decimal = Field(ge=0, description="Absolute amount in USD")
    date: Optional[str] = Field(default=None, description="ISO timestamp")
    status: TransactionStatus = TransactionStatus.COMPLETED
    method: Optional[str] = Field(default=None, description="e.g. 'Championship Starting Funds'")
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = Field(default=None, description="Price per share")
    championshipId: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.kind.signed(self.amount)
