"""Unit tests for the championship report CLI."""

from decimal import Decimal

from tradecup.report import (
    format_amount,
    leaderboard_table,
    main,
    prize_pool_summary,
)
from tradecup.services import compute_leaderboard, compute_prize_pool
from tradecup.models import Participant
from tests.conftest import deposit


class TestFormatting:
    def test_format_amount(self) -> None:
        assert format_amount(Decimal("1234.5")) == "+$1,234.50"
        assert format_amount(Decimal("-20")) == "-$20.00"

    def test_prize_pool_summary(self) -> None:
        summary = prize_pool_summary(compute_prize_pool(30, Decimal("10")))
        assert "Rake:                10%" in summary
        assert "Prize pool:          $270.00" in summary

    def test_no_prize_pool(self) -> None:
        assert prize_pool_summary(None) == "No prize pool"

    async def test_leaderboard_table(self) -> None:
        async def no_holdings(user_email, championship_id):
            return []

        async def ledger(user_email, championship_id):
            return [deposit(101000)]

        async def no_price(symbol):
            return None

        entries = await compute_leaderboard(
            [Participant(id="a@example.com", name="Alice")],
            Decimal("100000"),
            "cup",
            no_holdings,
            ledger,
            no_price,
        )

        table = leaderboard_table(entries)

        assert "Alice" in table
        assert "$101,000.00" in table
        assert "1.00%" in table


class TestMain:
    def test_prize_pool_preview(self, capsys) -> None:
        main(["prize-pool", "10", "10"])

        out = capsys.readouterr().out
        assert "Participants:        10" in out
        assert "50%" in out
        assert "$47.50" in out
