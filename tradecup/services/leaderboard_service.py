"""Leaderboard service for ranking championship participants by net worth."""

import asyncio
import logging
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, NamedTuple, Optional

from tradecup.datasources import DataSource, PriceSource
from tradecup.errors import (
    ChampionshipNotFoundError,
    LeaderboardComputationError,
    ProfileNotFoundError,
)
from tradecup.models import (
    Holding,
    LeaderboardEntry,
    LeaderboardResponse,
    Participant,
    ParticipantError,
    Transaction,
)

logger = logging.getLogger(__name__)

HoldingsFetcher = Callable[[str, str], Awaitable[list[Holding]]]
TransactionsFetcher = Callable[[str, str], Awaitable[list[Transaction]]]
PriceFetcher = Callable[[str], Awaitable[Optional[Decimal]]]


class FailurePolicy(str, Enum):
    """What to do when a participant's data cannot be fetched."""
    ABORT = "abort"
    SKIP = "skip"


class LeaderboardComputation(NamedTuple):
    entries: list[LeaderboardEntry]
    errors: list[ParticipantError]


class _PriceMemo:
    """Looks each symbol up at most once per leaderboard computation."""

    def __init__(self, fetch_price: PriceFetcher):
        self._fetch_price = fetch_price
        self._tasks: dict[str, asyncio.Future] = {}

    async def get(self, symbol: str) -> Optional[Decimal]:
        task = self._tasks.get(symbol)
        if task is None:
            task = asyncio.ensure_future(self._fetch_price(symbol))
            self._tasks[symbol] = task
        return await asyncio.shield(task)

    def cancel(self) -> None:
        for task in self._tasks.values():
            if not task.done():
                task.cancel()


async def _cancel_all(tasks: list[asyncio.Future]) -> None:
    """Cancel unfinished tasks and wait for all of them, retrieving their exceptions."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def gather_or_cancel(*aws: Awaitable) -> list:
    """
    Run awaitables concurrently, like asyncio.gather.

    If one of them fails, the others are cancelled and awaited before the
    error is raised, so nothing is left running in the background.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        await _cancel_all(tasks)
        raise


def calculate_participant_standing(
    participant: Participant,
    starting_cash: Decimal,
    holdings: list[Holding],
    transactions: list[Transaction],
    prices: dict[str, Optional[Decimal]],
) -> LeaderboardEntry:
    """
    Compute one participant's unranked leaderboard entry.
    
    Buying power starts at 0: the starting cash is already in the ledger as
    the initial deposit. Holdings without a live price are valued at their
    average acquisition price.
    
    Returns:
        LeaderboardEntry with rank 0
    """
    buying_power = Decimal("0")
    total_trades = 0
    for tx in transactions:
        buying_power += tx.signed_amount
        if tx.kind.is_trade:
            total_trades += 1
    
    total_asset_value = Decimal("0")
    for holding in holdings:
        price = prices.get(holding.symbol)
        if price is None:
            price = holding.avgPrice
        total_asset_value += price * holding.quantity
    
    total_net_worth = buying_power + total_asset_value
    total_return = total_net_worth - starting_cash
    if starting_cash > 0:
        return_percentage = total_return / starting_cash * 100
    else:
        return_percentage = Decimal("0")
    
    return LeaderboardEntry(
        rank=0,
        userEmail=participant.id,
        userName=participant.name,
        buyingPower=buying_power,
        totalAssetValue=total_asset_value,
        totalNetWorth=total_net_worth,
        totalReturn=total_return,
        returnPercentage=return_percentage,
        totalTrades=total_trades,
    )


def rank_entries(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    """
    Sort entries by net worth, highest first, and number them from 1.
    
    The sort is stable and every entry gets its own rank, so equal net
    worths keep their input order and receive consecutive ranks.
    """
    ordered = sorted(entries, key=lambda e: e.totalNetWorth, reverse=True)
    return [
        entry.model_copy(update={"rank": i + 1})
        for i, entry in enumerate(ordered)
    ]


async def compute_standings(
    participants: list[Participant],
    starting_cash: Decimal,
    championship_id: str,
    fetch_holdings: HoldingsFetcher,
    fetch_transactions: TransactionsFetcher,
    fetch_price: PriceFetcher,
    failure_policy: FailurePolicy = FailurePolicy.ABORT,
) -> LeaderboardComputation:
    """
    Compute the ranked leaderboard and any per-participant failures.
    
    Participants are processed concurrently; ranking starts only once every
    participant has been computed.
    
    Args:
        participants: Enrolled participants, unique by id
        starting_cash: Championship starting cash
        championship_id: Championship the holdings and transactions belong to
        fetch_holdings: (user_email, championship_id) -> holdings
        fetch_transactions: (user_email, championship_id) -> transactions
        fetch_price: symbol -> latest price, or None if unavailable
        failure_policy: ABORT raises on the first failure, SKIP leaves the
            participant out and reports it in the errors
            
    Raises:
        ValueError: if a participant appears more than once
        LeaderboardComputationError: on any fetch failure under ABORT
    """
    seen: set[str] = set()
    for participant in participants:
        if participant.id in seen:
            raise ValueError(f"Duplicate participant in roster: {participant.id}")
        seen.add(participant.id)
    
    starting_cash = Decimal(str(starting_cash))
    prices = _PriceMemo(fetch_price)

    async def standing(participant: Participant) -> LeaderboardEntry:
        try:
            holdings, transactions = await gather_or_cancel(
                fetch_holdings(participant.id, championship_id),
                fetch_transactions(participant.id, championship_id),
            )
            symbols = list(dict.fromkeys(h.symbol for h in holdings))
            symbol_prices = await gather_or_cancel(*(prices.get(s) for s in symbols))
        except Exception as e:
            raise LeaderboardComputationError(str(e), user_email=participant.id) from e
        
        return calculate_participant_standing(
            participant,
            starting_cash,
            holdings,
            transactions,
            dict(zip(symbols, symbol_prices)),
        )

    tasks = [asyncio.ensure_future(standing(p)) for p in participants]
    errors: list[ParticipantError] = []
    try:
        if failure_policy == FailurePolicy.ABORT:
            try:
                entries = list(await asyncio.gather(*tasks))
            except BaseException as e:
                if isinstance(e, LeaderboardComputationError):
                    logger.error(
                        f"Leaderboard for championship {championship_id} failed "
                        f"on {e.user_email}: {e}"
                    )
                await _cancel_all(tasks)
                raise
        else:
            entries = []
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for participant, result in zip(participants, results):
                if isinstance(result, LeaderboardComputationError):
                    logger.warning(f"Skipping {participant.id} in championship {championship_id}: {result}")
                    errors.append(ParticipantError(userEmail=participant.id, message=str(result)))
                elif isinstance(result, BaseException):
                    raise result
                else:
                    entries.append(result)
    finally:
        prices.cancel()
    
    return LeaderboardComputation(entries=rank_entries(entries), errors=errors)


async def compute_leaderboard(
    participants: list[Participant],
    starting_cash: Decimal,
    championship_id: str,
    fetch_holdings: HoldingsFetcher,
    fetch_transactions: TransactionsFetcher,
    fetch_price: PriceFetcher,
    failure_policy: FailurePolicy = FailurePolicy.ABORT,
) -> list[LeaderboardEntry]:
    """
    Rank participants by net worth.
    
    net worth = buying power + mark-to-market value of holdings. Any fetch
    failure fails the whole computation unless failure_policy is SKIP.
    
    Returns:
        List of LeaderboardEntry sorted by rank (1 = best)
    """
    result = await compute_standings(
        participants,
        starting_cash,
        championship_id,
        fetch_holdings,
        fetch_transactions,
        fetch_price,
        failure_policy=failure_policy,
    )
    return result.entries


class LeaderboardService:
    """Service for generating championship leaderboards."""

    def __init__(
        self,
        datasource: DataSource,
        price_source: PriceSource,
        skip_missing_profiles: bool = True,
        failure_policy: FailurePolicy = FailurePolicy.ABORT,
    ):
        self.datasource = datasource
        self.price_source = price_source
        self.skip_missing_profiles = skip_missing_profiles
        self.failure_policy = failure_policy

    async def get_participants(self, championship_id: str) -> list[Participant]:
        """
        Resolve the roster of a championship to participant profiles.
        
        Users without a profile are left out, or raise ProfileNotFoundError
        when skip_missing_profiles is off.
        """
        try:
            emails = list(dict.fromkeys(await self.datasource.get_participants(championship_id)))
            profiles = await asyncio.gather(*(self.datasource.get_profile(e) for e in emails))
        except Exception as e:
            raise LeaderboardComputationError(str(e)) from e
        
        participants = []
        for email, profile in zip(emails, profiles):
            if profile is None:
                if not self.skip_missing_profiles:
                    raise ProfileNotFoundError(email)
                logger.debug(f"No profile for {email}, leaving out of leaderboard")
                continue
            participants.append(profile)
        return participants

    async def get_leaderboard(self, championship_id: str) -> LeaderboardResponse:
        """
        Generate the leaderboard of a championship.
        
        Raises:
            ChampionshipNotFoundError: if the championship does not exist
            LeaderboardComputationError: if any lookup fails (ABORT policy)
        """
        championship = await self.datasource.get_championship(championship_id)
        if championship is None:
            raise ChampionshipNotFoundError(championship_id)
        
        participants = await self.get_participants(championship_id)
        result = await compute_standings(
            participants,
            championship.startingCash,
            championship_id,
            self.datasource.get_holdings,
            self.datasource.get_transactions,
            self.price_source.get_latest_price,
            failure_policy=self.failure_policy,
        )
        
        logger.info(
            f"Computed leaderboard for championship {championship_id}: "
            f"{len(result.entries)} entries, {len(result.errors)} skipped"
        )
        
        return LeaderboardResponse(
            championshipId=championship_id,
            startingCash=championship.startingCash,
            entries=result.entries,
            errors=result.errors,
        )
