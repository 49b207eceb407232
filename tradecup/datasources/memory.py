"""In-memory data sources for local mode and tests."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from tradecup.models import Championship, Holding, Participant, Transaction
from .base import DataSource, PriceSource

logger = logging.getLogger(__name__)


class InMemoryDataSource(DataSource):
    """
    Process-local championship store.
    
    Used when no hosted database is configured. Data does not survive a
    restart.
    """

    def __init__(self):
        self.championships: dict[str, Championship] = {}
        self.profiles: dict[str, Participant] = {}
        self.holdings: dict[tuple[str, str], list[Holding]] = defaultdict(list)
        self.transactions: dict[tuple[str, str], list[Transaction]] = defaultdict(list)

    def add_championship(self, championship: Championship) -> None:
        self.championships[championship.id] = championship

    def add_profile(self, participant: Participant) -> None:
        self.profiles[participant.id] = participant

    def add_holding(self, user_email: str, championship_id: str, holding: Holding) -> None:
        self.holdings[(user_email, championship_id)].append(holding)

    async def get_championship(self, championship_id: str) -> Optional[Championship]:
        return self.championships.get(championship_id)

    async def get_participants(self, championship_id: str) -> list[str]:
        # dict keeps first-seen order, which keeps rankings of equal net worth stable
        emails: dict[str, None] = {}
        for store in (self.holdings, self.transactions):
            for (user_email, champ_id), rows in store.items():
                if champ_id == championship_id and rows:
                    emails[user_email] = None
        return list(emails)

    async def get_profile(self, user_email: str) -> Optional[Participant]:
        return self.profiles.get(user_email)

    async def get_holdings(self, user_email: str, championship_id: str) -> list[Holding]:
        return list(self.holdings.get((user_email, championship_id), []))

    async def get_transactions(self, user_email: str, championship_id: str) -> list[Transaction]:
        return list(self.transactions.get((user_email, championship_id), []))

    async def add_transaction(
        self,
        user_email: str,
        championship_id: str,
        transaction: Transaction,
    ) -> None:
        self.transactions[(user_email, championship_id)].append(transaction)

    async def remove_participant(self, user_email: str, championship_id: str) -> None:
        self.holdings.pop((user_email, championship_id), None)
        self.transactions.pop((user_email, championship_id), None)
        logger.info(f"Removed {user_email} from championship {championship_id} (local)")


class StaticPriceSource(PriceSource):
    """Price source backed by a fixed symbol -> price mapping."""

    def __init__(self, prices: Optional[dict[str, Decimal]] = None):
        self.prices = {symbol.upper(): Decimal(str(price)) for symbol, price in (prices or {}).items()}

    async def get_latest_price(self, symbol: str) -> Optional[Decimal]:
        return self.prices.get(symbol.upper())
