"""Participant and championship models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class Participant(BaseModel):
    """A user enrolled in a championship, identified by email."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    
    id: str = Field(description="User email")
    name: str


class ChampionshipStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    FINISHED = "finished"
    ARCHIVED = "archived"


class Championship(BaseModel):
    """A time-boxed trading competition."""
    model_config = ConfigDict(populate_by_name=True)
    
    id: str
    name: str
    description: Optional[str] = None
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
    startingCash: Decimal = Field(gt=0)
    enrollmentFee: Decimal = Field(default=Decimal("0"), ge=0)
    status: ChampionshipStatus = ChampionshipStatus.PENDING
    adminUserId: Optional[str] = None


class EnrollmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    userEmail: str


class EnrollmentResult(BaseModel):
    """Outcome of joining or leaving a championship."""
    model_config = ConfigDict(populate_by_name=True)
    
    championshipId: str
    userEmail: str
    enrolled: bool = Field(description="Whether the user is enrolled after the operation")
    changed: bool = Field(description="False when the user was already in the requested state")
