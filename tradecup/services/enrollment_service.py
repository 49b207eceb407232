"""Enrollment service for joining and leaving championships."""

import logging
from datetime import datetime, timezone
from typing import Optional

from tradecup.datasources import DataSource
from tradecup.errors import ChampionshipNotFoundError
from tradecup.models import (
    Championship,
    EnrollmentResult,
    Transaction,
    TransactionKind,
)
from .prize_pool_service import PrizePoolCache

logger = logging.getLogger(__name__)

STARTING_FUNDS_METHOD = "Championship Starting Funds"


class EnrollmentService:
    """
    Service for championship enrollment.
    
    Enrollment is implied by ledger data: joining writes the initial deposit
    of the starting cash, leaving deletes the participant's holdings and
    transactions. Both change the roster size, so the cached prize pool of
    the championship is invalidated.
    """

    def __init__(self, datasource: DataSource, prize_pool_cache: Optional[PrizePoolCache] = None):
        self.datasource = datasource
        self.prize_pool_cache = prize_pool_cache

    async def _get_championship(self, championship_id: str) -> Championship:
        championship = await self.datasource.get_championship(championship_id)
        if championship is None:
            raise ChampionshipNotFoundError(championship_id)
        return championship

    async def is_enrolled(self, championship_id: str, user_email: str) -> bool:
        holdings = await self.datasource.get_holdings(user_email, championship_id)
        if holdings:
            return True
        transactions = await self.datasource.get_transactions(user_email, championship_id)
        return bool(transactions)

    async def join(self, championship_id: str, user_email: str) -> EnrollmentResult:
        """
        Enroll a user by crediting the championship's starting cash.
        
        Users who already have data in the championship are left untouched,
        so the starting cash is never credited twice.
        """
        championship = await self._get_championship(championship_id)
        
        if await self.is_enrolled(championship_id, user_email):
            logger.info(
                f"User {user_email} already has data for championship {championship_id}. "
                "Skipping initial cash."
            )
            return EnrollmentResult(
                championshipId=championship_id,
                userEmail=user_email,
                enrolled=True,
                changed=False,
            )
        
        now = datetime.now(timezone.utc)
        initial_deposit = Transaction(
            id=f"tx_{int(now.timestamp() * 1000)}_champ_start",
            kind=TransactionKind.DEPOSIT,
            amount=championship.startingCash,
            date=now.isoformat(),
            method=STARTING_FUNDS_METHOD,
            championshipId=championship_id,
        )
        await self.datasource.add_transaction(user_email, championship_id, initial_deposit)
        self._invalidate(championship_id)
        
        logger.info(f"User {user_email} enrolled in championship {championship_id}")
        return EnrollmentResult(
            championshipId=championship_id,
            userEmail=user_email,
            enrolled=True,
            changed=True,
        )

    async def leave(self, championship_id: str, user_email: str) -> EnrollmentResult:
        """Remove a user and all their data from a championship."""
        await self._get_championship(championship_id)
        
        was_enrolled = await self.is_enrolled(championship_id, user_email)
        if was_enrolled:
            # a failed removal may still have deleted part of the data
            try:
                await self.datasource.remove_participant(user_email, championship_id)
            finally:
                self._invalidate(championship_id)
        
        return EnrollmentResult(
            championshipId=championship_id,
            userEmail=user_email,
            enrolled=False,
            changed=was_enrolled,
        )

    def _invalidate(self, championship_id: str) -> None:
        if self.prize_pool_cache is not None:
            self.prize_pool_cache.invalidate(championship_id)
