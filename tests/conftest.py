"""Shared test fixtures."""

from decimal import Decimal

import pytest

from tradecup.datasources import InMemoryDataSource, StaticPriceSource
from tradecup.models import (
    Championship,
    Holding,
    Participant,
    Transaction,
    TransactionKind,
)

CHAMPIONSHIP_ID = "spring-cup"


def deposit(amount) -> Transaction:
    return Transaction(kind=TransactionKind.DEPOSIT, amount=Decimal(str(amount)))


def buy(amount) -> Transaction:
    return Transaction(kind=TransactionKind.BUY, amount=Decimal(str(amount)))


def sell(amount) -> Transaction:
    return Transaction(kind=TransactionKind.SELL, amount=Decimal(str(amount)))


def withdrawal(amount) -> Transaction:
    return Transaction(kind=TransactionKind.WITHDRAWAL, amount=Decimal(str(amount)))


def holding(symbol: str, quantity, avg_price) -> Holding:
    return Holding(symbol=symbol, quantity=Decimal(str(quantity)), avgPrice=Decimal(str(avg_price)))


@pytest.fixture
def datasource() -> InMemoryDataSource:
    """
    Championship with a 100k starting cash and a $10 fee.

    alice: cash only, net worth 100000
    bob: bought 10 AAPL at 150, AAPL live at 200, net worth 100500
    carol: bought 100 ZZZZ at 10 with no live price, withdrew 500, net worth 99500
    """
    ds = InMemoryDataSource()
    ds.add_championship(Championship(
        id=CHAMPIONSHIP_ID,
        name="Spring Cup",
        startingCash=Decimal("100000"),
        enrollmentFee=Decimal("10"),
        status="active",
    ))
    for email, name in (
        ("alice@example.com", "Alice"),
        ("bob@example.com", "Bob"),
        ("carol@example.com", "Carol"),
    ):
        ds.add_profile(Participant(id=email, name=name))
    
    ds.transactions[("alice@example.com", CHAMPIONSHIP_ID)] = [deposit(100000)]
    
    ds.transactions[("bob@example.com", CHAMPIONSHIP_ID)] = [deposit(100000), buy(1500)]
    ds.add_holding("bob@example.com", CHAMPIONSHIP_ID, holding("AAPL", 10, 150))
    
    ds.transactions[("carol@example.com", CHAMPIONSHIP_ID)] = [
        deposit(100000),
        buy(1000),
        withdrawal(500),
    ]
    ds.add_holding("carol@example.com", CHAMPIONSHIP_ID, holding("ZZZZ", 100, 10))
    return ds


@pytest.fixture
def price_source() -> StaticPriceSource:
    return StaticPriceSource({"AAPL": Decimal("200")})
