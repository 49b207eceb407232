"""Unit tests for championship enrollment."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from tradecup.errors import ChampionshipNotFoundError, DataSourceError
from tradecup.models import TransactionKind
from tradecup.services import EnrollmentService, PrizePoolCache, PrizePoolService
from tests.conftest import CHAMPIONSHIP_ID, deposit


class TestJoin:
    async def test_join_credits_starting_cash(self, datasource) -> None:
        svc = EnrollmentService(datasource)

        result = await svc.join(CHAMPIONSHIP_ID, "dave@example.com")

        assert result.enrolled is True
        assert result.changed is True
        ledger = await datasource.get_transactions("dave@example.com", CHAMPIONSHIP_ID)
        assert len(ledger) == 1
        assert ledger[0].kind == TransactionKind.DEPOSIT
        assert ledger[0].amount == Decimal("100000")
        assert ledger[0].method == "Championship Starting Funds"
        assert ledger[0].championshipId == CHAMPIONSHIP_ID

    async def test_join_twice_does_not_credit_twice(self, datasource) -> None:
        svc = EnrollmentService(datasource)

        await svc.join(CHAMPIONSHIP_ID, "dave@example.com")
        result = await svc.join(CHAMPIONSHIP_ID, "dave@example.com")

        assert result.changed is False
        assert len(await datasource.get_transactions("dave@example.com", CHAMPIONSHIP_ID)) == 1

    async def test_existing_participant_untouched(self, datasource) -> None:
        svc = EnrollmentService(datasource)

        result = await svc.join(CHAMPIONSHIP_ID, "bob@example.com")

        assert result.changed is False
        assert len(await datasource.get_transactions("bob@example.com", CHAMPIONSHIP_ID)) == 2

    async def test_unknown_championship(self, datasource) -> None:
        with pytest.raises(ChampionshipNotFoundError):
            await EnrollmentService(datasource).join("nope", "dave@example.com")


class TestLeave:
    async def test_leave_removes_ledger_and_holdings(self, datasource) -> None:
        svc = EnrollmentService(datasource)

        result = await svc.leave(CHAMPIONSHIP_ID, "bob@example.com")

        assert result.enrolled is False
        assert result.changed is True
        assert await datasource.get_holdings("bob@example.com", CHAMPIONSHIP_ID) == []
        assert await datasource.get_transactions("bob@example.com", CHAMPIONSHIP_ID) == []
        assert "bob@example.com" not in await datasource.get_participants(CHAMPIONSHIP_ID)

    async def test_leave_when_not_enrolled(self, datasource) -> None:
        result = await EnrollmentService(datasource).leave(CHAMPIONSHIP_ID, "dave@example.com")
        assert result.changed is False


class TestPrizePoolInvalidation:
    async def test_roster_changes_refresh_prize_pool(self, datasource) -> None:
        cache = PrizePoolCache()
        prize_pools = PrizePoolService(datasource, cache)
        enrollment = EnrollmentService(datasource, cache)

        before = await prize_pools.get_prize_pool(CHAMPIONSHIP_ID)
        assert before.participantsCount == 3

        await enrollment.join(CHAMPIONSHIP_ID, "dave@example.com")
        after_join = await prize_pools.get_prize_pool(CHAMPIONSHIP_ID)
        assert after_join.participantsCount == 4
        assert after_join.totalEntry == Decimal("40")

        await enrollment.leave(CHAMPIONSHIP_ID, "alice@example.com")
        after_leave = await prize_pools.get_prize_pool(CHAMPIONSHIP_ID)
        assert after_leave.participantsCount == 3

    async def test_cached_without_roster_change(self, datasource) -> None:
        cache = PrizePoolCache()
        prize_pools = PrizePoolService(datasource, cache)

        first = await prize_pools.get_prize_pool(CHAMPIONSHIP_ID)
        datasource.transactions[("eve@example.com", CHAMPIONSHIP_ID)] = [deposit(100000)]
        second = await prize_pools.get_prize_pool(CHAMPIONSHIP_ID)

        assert second is first

    async def test_failed_leave_still_refreshes_prize_pool(self, datasource) -> None:
        cache = PrizePoolCache()
        prize_pools = PrizePoolService(datasource, cache)
        await prize_pools.get_prize_pool(CHAMPIONSHIP_ID)
        assert CHAMPIONSHIP_ID in cache

        datasource.remove_participant = AsyncMock(side_effect=DataSourceError("delete rejected"))
        with pytest.raises(DataSourceError, match="delete rejected"):
            await EnrollmentService(datasource, cache).leave(CHAMPIONSHIP_ID, "bob@example.com")

        assert CHAMPIONSHIP_ID not in cache
