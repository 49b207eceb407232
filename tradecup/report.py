#!/usr/bin/env python3
"""
Championship report
Prints the leaderboard and prize pool of a championship, or previews a
prize pool for a given participant count and enrollment fee.

Usage:
    tradecup-report leaderboard <championship_id> [--show-all]
    tradecup-report prize-pool <participants> <fee>

Example:
    tradecup-report prize-pool 30 10
"""

import argparse
import asyncio
import sys
from decimal import Decimal
from typing import Optional

from tabulate import tabulate

from tradecup.app import create_datasource, create_price_source
from tradecup.config import Config
from tradecup.errors import LedgerError
from tradecup.models import LeaderboardEntry, PrizeDistribution, PrizePoolInfo
from tradecup.services import LeaderboardService, PrizePoolService, compute_prize_pool
from tradecup.services.prize_pool_service import assign_winners


def format_amount(amount: Decimal) -> str:
    """Format a signed amount in dollars"""
    if amount >= 0:
        return f"+${amount:,.2f}"
    return f"-${abs(amount):,.2f}"


def format_percentage(value: Decimal) -> str:
    return f"{value * 100:.0f}%"


def leaderboard_table(entries: list[LeaderboardEntry], max_show: int = 10) -> str:
    """Render leaderboard entries as a grid"""
    table_data = [
        [
            entry.rank,
            entry.userName,
            f"${entry.totalNetWorth:,.2f}",
            format_amount(entry.totalReturn),
            f"{entry.returnPercentage:.2f}%",
            entry.totalTrades,
        ]
        for entry in entries[:max_show]
    ]
    return tabulate(
        table_data,
        headers=["Rank", "Trader", "Net Worth", "Return", "Return %", "Trades"],
        tablefmt="grid",
    )


def prize_pool_summary(prize_pool: Optional[PrizePoolInfo]) -> str:
    """Render prize pool totals"""
    if prize_pool is None:
        return "No prize pool"
    lines = [
        f"Participants:        {prize_pool.participantsCount}",
        f"Total collected:     ${prize_pool.totalEntry:,.2f}",
        f"Rake:                {format_percentage(prize_pool.rakePercentage)}",
        f"Platform commission: ${prize_pool.platformCommission:,.2f}",
        f"Prize pool:          ${prize_pool.prizePool:,.2f}",
    ]
    return "\n".join(lines)


def distribution_table(distribution: list[PrizeDistribution]) -> str:
    """Render payouts per rank"""
    table_data = [
        [
            prize.rank,
            format_percentage(prize.percentage),
            f"${prize.amount:,.2f}",
            prize.userName or prize.userEmail or "-",
        ]
        for prize in distribution
    ]
    return tabulate(
        table_data,
        headers=["Rank", "Share", "Amount", "Winner"],
        tablefmt="grid",
    )


async def print_championship(championship_id: str, max_show: int) -> None:
    config = Config.from_env()
    datasource = create_datasource(config)
    price_source = create_price_source(config)
    try:
        leaderboard_service = LeaderboardService(
            datasource,
            price_source,
            skip_missing_profiles=config.skip_missing_profiles,
            failure_policy=config.failure_policy,
        )
        prize_pool_service = PrizePoolService(datasource)
        leaderboard, prize_pool = await asyncio.gather(
            leaderboard_service.get_leaderboard(championship_id),
            prize_pool_service.get_prize_pool(championship_id),
        )
    finally:
        await datasource.close()
        await price_source.close()
    
    print("=" * 80)
    print(f"LEADERBOARD - {championship_id}")
    print("=" * 80)
    print(f"Starting cash: ${leaderboard.startingCash:,.2f}")
    print()
    if leaderboard.entries:
        print(leaderboard_table(leaderboard.entries, max_show))
    else:
        print("No participants")
    for error in leaderboard.errors:
        print(f"Skipped {error.userEmail}: {error.message}")
    print()
    print(prize_pool_summary(prize_pool))
    if prize_pool is not None and prize_pool.prizeDistribution:
        print()
        print(distribution_table(assign_winners(prize_pool, leaderboard.entries)))


def print_prize_pool_preview(participants: int, fee: Decimal) -> None:
    prize_pool = compute_prize_pool(participants, fee)
    print(prize_pool_summary(prize_pool))
    if prize_pool is not None and prize_pool.prizeDistribution:
        print()
        print(distribution_table(prize_pool.prizeDistribution))


def main(argv: Optional[list[str]] = None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Championship leaderboard and prize pool report"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    
    leaderboard_parser = subparsers.add_parser("leaderboard", help="Show a championship leaderboard")
    leaderboard_parser.add_argument("championship_id", help="Championship ID")
    leaderboard_parser.add_argument(
        "--show-all",
        action="store_true",
        help="Show all participants (default: top 10)"
    )
    
    preview_parser = subparsers.add_parser("prize-pool", help="Preview a prize pool")
    preview_parser.add_argument("participants", type=int, help="Number of participants")
    preview_parser.add_argument("fee", type=Decimal, help="Enrollment fee")
    
    args = parser.parse_args(argv)
    
    if args.command == "prize-pool":
        print_prize_pool_preview(args.participants, args.fee)
        return
    
    max_show = sys.maxsize if args.show_all else 10
    try:
        asyncio.run(print_championship(args.championship_id, max_show))
    except LedgerError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
