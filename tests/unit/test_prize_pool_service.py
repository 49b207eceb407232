"""Unit tests for PrizePoolService using the in-memory datasource."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from tradecup.errors import ChampionshipNotFoundError
from tradecup.models import Championship
from tradecup.services import LeaderboardService, PrizePoolService
from tests.conftest import CHAMPIONSHIP_ID


class TestGetPrizePool:
    async def test_prize_pool_from_roster(self, datasource) -> None:
        info = await PrizePoolService(datasource).get_prize_pool(CHAMPIONSHIP_ID)

        assert info.participantsCount == 3
        assert info.enrollmentFee == Decimal("10")
        assert info.totalEntry == Decimal("30")
        assert info.rakePercentage == Decimal("0.05")
        assert info.prizePool == Decimal("28.5")
        assert [p.amount for p in info.prizeDistribution] == [Decimal("28.5")]

    async def test_free_championship(self, datasource) -> None:
        datasource.add_championship(Championship(
            id="free-cup",
            name="Free Cup",
            startingCash=Decimal("50000"),
        ))
        assert await PrizePoolService(datasource).get_prize_pool("free-cup") is None

    async def test_unknown_championship(self, datasource) -> None:
        with pytest.raises(ChampionshipNotFoundError):
            await PrizePoolService(datasource).get_prize_pool("nope")

    async def test_roster_looked_up_once(self, datasource) -> None:
        datasource.get_participants = AsyncMock(return_value=["a", "b", "c"])
        svc = PrizePoolService(datasource)

        await svc.get_prize_pool(CHAMPIONSHIP_ID)
        await svc.get_prize_pool(CHAMPIONSHIP_ID)

        datasource.get_participants.assert_awaited_once()


class TestDistributePrizes:
    async def test_winner_gets_whole_pool(self, datasource, price_source) -> None:
        leaderboard = await LeaderboardService(datasource, price_source).get_leaderboard(CHAMPIONSHIP_ID)

        dist = await PrizePoolService(datasource).distribute_prizes(CHAMPIONSHIP_ID, leaderboard.entries)

        assert len(dist) == 1
        assert dist[0].userEmail == "bob@example.com"
        assert dist[0].userName == "Bob"
        assert dist[0].amount == Decimal("28.5")

    async def test_nothing_to_distribute(self, datasource) -> None:
        datasource.add_championship(Championship(
            id="free-cup",
            name="Free Cup",
            startingCash=Decimal("50000"),
        ))
        assert await PrizePoolService(datasource).distribute_prizes("free-cup", []) is None
