"""Abstract base classes for data sources."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from tradecup.models import Championship, Holding, Participant, Transaction


class DataSource(ABC):
    """
    Abstract interface for championship ledger data.
    
    This abstraction allows swapping between the hosted database and the
    local in-memory store with no changes to the services.
    """

    @abstractmethod
    async def get_championship(self, championship_id: str) -> Optional[Championship]:
        """
        Look up a championship.
        
        Returns:
            Championship, or None if it does not exist
        """
        pass

    @abstractmethod
    async def get_participants(self, championship_id: str) -> list[str]:
        """
        Return the emails of users enrolled in a championship.
        
        A user is enrolled when they have at least one holding or
        transaction in the championship. Each email appears once.
        """
        pass

    @abstractmethod
    async def get_profile(self, user_email: str) -> Optional[Participant]:
        """
        Look up a user's profile.
        
        Returns:
            Participant, or None if the profile does not exist
        """
        pass

    @abstractmethod
    async def get_holdings(self, user_email: str, championship_id: str) -> list[Holding]:
        """Return a participant's current positions in a championship."""
        pass

    @abstractmethod
    async def get_transactions(self, user_email: str, championship_id: str) -> list[Transaction]:
        """Return a participant's transaction history in a championship."""
        pass

    @abstractmethod
    async def add_transaction(
        self,
        user_email: str,
        championship_id: str,
        transaction: Transaction,
    ) -> None:
        """Append a transaction to a participant's ledger."""
        pass

    @abstractmethod
    async def remove_participant(self, user_email: str, championship_id: str) -> None:
        """Delete a participant's holdings and transactions in a championship."""
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).
        
        Override this if the data source holds resources that need cleanup.
        """
        pass


class PriceSource(ABC):
    """Abstract interface for live market prices."""

    @abstractmethod
    async def get_latest_price(self, symbol: str) -> Optional[Decimal]:
        """
        Get the latest known trade price for a ticker.
        
        Returns:
            Price in USD, or None if the symbol has no available price
        """
        pass

    async def close(self) -> None:
        pass
