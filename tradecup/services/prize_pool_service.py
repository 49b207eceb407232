"""Prize pool service: progressive rake and payout table for paid championships."""

import logging
from decimal import Decimal
from typing import Optional

from tradecup.datasources import DataSource
from tradecup.errors import ChampionshipNotFoundError
from tradecup.models import LeaderboardEntry, PrizeDistribution, PrizePoolInfo

logger = logging.getLogger(__name__)

# (minimum participants, rake), highest threshold first
RAKE_TIERS: tuple[tuple[int, Decimal], ...] = (
    (100, Decimal("0.20")),
    (50, Decimal("0.15")),
    (20, Decimal("0.10")),
)
BASE_RAKE = Decimal("0.05")

# (minimum participants, share of the pool per rank), highest threshold first.
# Shares within a tier sum to exactly 1.
DISTRIBUTION_TIERS: tuple[tuple[int, tuple[Decimal, ...]], ...] = (
    (10, (Decimal("0.50"), Decimal("0.30"), Decimal("0.20"))),
    (5, (Decimal("0.60"), Decimal("0.40"))),
    (3, (Decimal("1.00"),)),
)


def calculate_rake_percentage(participants_count: int) -> Decimal:
    """
    Platform commission rate for a championship of the given size.
    
    Larger championships pay a larger rake: 5% below 20 participants,
    10% from 20, 15% from 50 and 20% from 100.
    """
    for threshold, rake in RAKE_TIERS:
        if participants_count >= threshold:
            return rake
    return BASE_RAKE


def generate_prize_distribution(
    participants_count: int,
    prize_pool: Decimal,
) -> list[PrizeDistribution]:
    """
    Split a prize pool among the top finishers.
    
    Args:
        participants_count: Number of enrolled participants
        prize_pool: Amount available after the rake
        
    Returns:
        One PrizeDistribution per paid rank, rank 1 first. Empty with fewer
        than 3 participants.
    """
    for threshold, shares in DISTRIBUTION_TIERS:
        if participants_count >= threshold:
            return [
                PrizeDistribution(
                    rank=rank,
                    percentage=share,
                    amount=prize_pool * share,
                )
                for rank, share in enumerate(shares, start=1)
            ]
    return []


def compute_prize_pool(
    participants_count: int,
    enrollment_fee: Decimal,
) -> Optional[PrizePoolInfo]:
    """
    Compute the prize pool of a championship.
    
    Formula:
        totalEntry = participantsCount * enrollmentFee
        platformCommission = totalEntry * rake(participantsCount)
        prizePool = totalEntry - platformCommission
    
    Returns:
        PrizePoolInfo, or None when the fee is not positive or nobody is
        enrolled
    """
    enrollment_fee = Decimal(str(enrollment_fee))
    if enrollment_fee <= 0 or participants_count < 1:
        return None
    
    total_entry = enrollment_fee * participants_count
    rake = calculate_rake_percentage(participants_count)
    platform_commission = total_entry * rake
    prize_pool = total_entry - platform_commission
    
    return PrizePoolInfo(
        participantsCount=participants_count,
        enrollmentFee=enrollment_fee,
        totalEntry=total_entry,
        rakePercentage=rake,
        platformCommission=platform_commission,
        prizePool=prize_pool,
        prizeDistribution=generate_prize_distribution(participants_count, prize_pool),
    )


def assign_winners(
    prize_pool: PrizePoolInfo,
    leaderboard: list[LeaderboardEntry],
) -> list[PrizeDistribution]:
    """
    Match payout ranks to leaderboard finishers.
    
    Ranks with no finisher are returned unassigned.
    """
    by_rank = {entry.rank: entry for entry in leaderboard}
    
    distribution = []
    for prize in prize_pool.prizeDistribution:
        winner = by_rank.get(prize.rank)
        if winner is None:
            distribution.append(prize)
            continue
        distribution.append(prize.model_copy(update={
            "userEmail": winner.userEmail,
            "userName": winner.userName,
        }))
    return distribution


class PrizePoolCache:
    """
    Prize pools memoized per championship.
    
    Entries must be invalidated whenever the roster size changes.
    """

    def __init__(self):
        self._entries: dict[str, Optional[PrizePoolInfo]] = {}

    def __contains__(self, championship_id: str) -> bool:
        return championship_id in self._entries

    def get(self, championship_id: str) -> Optional[PrizePoolInfo]:
        return self._entries.get(championship_id)

    def set(self, championship_id: str, prize_pool: Optional[PrizePoolInfo]) -> None:
        self._entries[championship_id] = prize_pool

    def invalidate(self, championship_id: str) -> None:
        if self._entries.pop(championship_id, None) is not None:
            logger.debug(f"Invalidated prize pool for championship {championship_id}")

    def clear(self) -> None:
        self._entries.clear()


class PrizePoolService:
    """Service for championship prize pools."""

    def __init__(self, datasource: DataSource, cache: Optional[PrizePoolCache] = None):
        self.datasource = datasource
        self.cache = cache if cache is not None else PrizePoolCache()

    async def get_prize_pool(self, championship_id: str) -> Optional[PrizePoolInfo]:
        """
        Get the prize pool of a championship.
        
        Returns:
            PrizePoolInfo, or None for free championships and empty rosters
            
        Raises:
            ChampionshipNotFoundError: if the championship does not exist
        """
        if championship_id in self.cache:
            return self.cache.get(championship_id)
        
        championship = await self.datasource.get_championship(championship_id)
        if championship is None:
            raise ChampionshipNotFoundError(championship_id)
        
        participants = await self.datasource.get_participants(championship_id)
        prize_pool = compute_prize_pool(len(participants), championship.enrollmentFee)
        
        self.cache.set(championship_id, prize_pool)
        return prize_pool

    async def distribute_prizes(
        self,
        championship_id: str,
        leaderboard: list[LeaderboardEntry],
    ) -> Optional[list[PrizeDistribution]]:
        """
        Assign prizes to the final leaderboard of a championship.
        
        Returns:
            Payout table with winners filled in, or None if there is no
            prize pool to distribute
        """
        prize_pool = await self.get_prize_pool(championship_id)
        if prize_pool is None or prize_pool.prizePool <= 0:
            logger.info(f"No prize pool to distribute for championship {championship_id}")
            return None
        
        distribution = assign_winners(prize_pool, leaderboard)
        logger.info(
            f"Prizes distributed for championship {championship_id}: "
            f"{sum(1 for p in distribution if p.userEmail)} winners, pool {prize_pool.prizePool}"
        )
        return distribution
