"""API tests running the FastAPI app in-process."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from tradecup.app import create_app
from tradecup.api.dependencies import set_config, set_datasource, set_price_source
from tradecup.config import Config
from tradecup.errors import DataSourceError
from tradecup.services import FailurePolicy
from tests.conftest import CHAMPIONSHIP_ID


@pytest.fixture
async def client(datasource, price_source) -> AsyncClient:
    """Async HTTP client wired to the in-memory championship."""
    app = create_app(Config())
    set_config(Config())
    set_datasource(datasource)
    set_price_source(price_source)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}


class TestLeaderboard:
    async def test_leaderboard_with_prize_pool(self, client: AsyncClient) -> None:
        resp = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/leaderboard")

        assert resp.status_code == 200
        body = resp.json()
        assert [e["userName"] for e in body["entries"]] == ["Bob", "Alice", "Carol"]
        assert [e["rank"] for e in body["entries"]] == [1, 2, 3]
        assert Decimal(body["entries"][0]["totalNetWorth"]) == Decimal("100500")
        assert body["entries"][0]["totalTrades"] == 1
        assert body["errors"] == []
        assert Decimal(body["prizePool"]["prizePool"]) == Decimal("28.5")

    async def test_unknown_championship(self, client: AsyncClient) -> None:
        resp = await client.get("/v1/championships/nope/leaderboard")
        assert resp.status_code == 404

    async def test_fetch_failure_message_surfaced(self, client: AsyncClient, datasource) -> None:
        datasource.get_holdings = AsyncMock(side_effect=RuntimeError("holdings service unavailable"))

        resp = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/leaderboard")

        assert resp.status_code == 502
        assert resp.json()["detail"] == "holdings service unavailable"

    async def test_lenient_mode_reports_errors(self, client: AsyncClient, datasource) -> None:
        set_config(Config(failure_policy=FailurePolicy.SKIP))
        original = datasource.get_holdings

        async def flaky(user_email, championship_id):
            if user_email == "alice@example.com":
                raise RuntimeError("timeout")
            return await original(user_email, championship_id)

        datasource.get_holdings = flaky

        resp = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/leaderboard")

        assert resp.status_code == 200
        body = resp.json()
        assert [e["userEmail"] for e in body["entries"]] == ["bob@example.com", "carol@example.com"]
        assert body["errors"] == [{"userEmail": "alice@example.com", "message": "timeout"}]


class TestPrizePool:
    async def test_preview(self, client: AsyncClient) -> None:
        resp = await client.get("/v1/prize-pool", params={"participants": 50, "fee": "100"})

        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["rakePercentage"]) == Decimal("0.15")
        assert Decimal(body["platformCommission"]) == Decimal("750")
        assert Decimal(body["prizePool"]) == Decimal("4250")
        assert [Decimal(p["percentage"]) for p in body["prizeDistribution"]] == [
            Decimal("0.5"),
            Decimal("0.3"),
            Decimal("0.2"),
        ]

    async def test_preview_without_fee_is_null(self, client: AsyncClient) -> None:
        resp = await client.get("/v1/prize-pool", params={"participants": 50, "fee": "0"})
        assert resp.status_code == 200
        assert resp.json() is None

    async def test_championship_prize_pool(self, client: AsyncClient) -> None:
        resp = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/prize-pool")

        assert resp.status_code == 200
        assert resp.json()["participantsCount"] == 3

    async def test_championship_prize_pool_unknown(self, client: AsyncClient) -> None:
        resp = await client.get("/v1/championships/nope/prize-pool")
        assert resp.status_code == 404

    async def test_distribute(self, client: AsyncClient) -> None:
        resp = await client.post(f"/v1/championships/{CHAMPIONSHIP_ID}/prizes/distribute")

        assert resp.status_code == 200
        body = resp.json()
        assert len(body) == 1
        assert body[0]["userEmail"] == "bob@example.com"
        assert body[0]["paid"] is False


class TestEnrollment:
    async def test_join_updates_prize_pool(self, client: AsyncClient) -> None:
        before = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/prize-pool")
        assert before.json()["participantsCount"] == 3

        resp = await client.post(
            f"/v1/championships/{CHAMPIONSHIP_ID}/participants",
            json={"userEmail": "dave@example.com"},
        )
        assert resp.status_code == 200
        assert resp.json()["changed"] is True

        after = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/prize-pool")
        assert after.json()["participantsCount"] == 4

    async def test_leave(self, client: AsyncClient) -> None:
        resp = await client.delete(f"/v1/championships/{CHAMPIONSHIP_ID}/participants/carol@example.com")

        assert resp.status_code == 200
        assert resp.json()["enrolled"] is False

        board = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/leaderboard")
        assert "carol@example.com" not in {e["userEmail"] for e in board.json()["entries"]}

    async def test_join_unknown_championship(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/v1/championships/nope/participants",
            json={"userEmail": "dave@example.com"},
        )
        assert resp.status_code == 404


class TestCollaboratorFailures:
    DOWN = "Database error 503 on championships: down"

    async def test_leaderboard_championship_lookup(self, client: AsyncClient, datasource) -> None:
        datasource.get_championship = AsyncMock(side_effect=DataSourceError(self.DOWN, status_code=503))

        resp = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/leaderboard")

        assert resp.status_code == 502
        assert resp.json()["detail"] == self.DOWN

    async def test_leaderboard_roster_lookup(self, client: AsyncClient, datasource) -> None:
        datasource.get_participants = AsyncMock(side_effect=DataSourceError("roster unavailable"))

        resp = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/leaderboard")

        assert resp.status_code == 502
        assert resp.json()["detail"] == "roster unavailable"

    async def test_championship_prize_pool(self, client: AsyncClient, datasource) -> None:
        datasource.get_participants = AsyncMock(side_effect=DataSourceError("roster unavailable"))

        resp = await client.get(f"/v1/championships/{CHAMPIONSHIP_ID}/prize-pool")

        assert resp.status_code == 502
        assert resp.json()["detail"] == "roster unavailable"

    async def test_join(self, client: AsyncClient, datasource) -> None:
        datasource.add_transaction = AsyncMock(side_effect=DataSourceError("insert rejected"))

        resp = await client.post(
            f"/v1/championships/{CHAMPIONSHIP_ID}/participants",
            json={"userEmail": "dave@example.com"},
        )

        assert resp.status_code == 502
        assert resp.json()["detail"] == "insert rejected"

    async def test_leave(self, client: AsyncClient, datasource) -> None:
        datasource.remove_participant = AsyncMock(side_effect=DataSourceError("delete rejected"))

        resp = await client.delete(f"/v1/championships/{CHAMPIONSHIP_ID}/participants/carol@example.com")

        assert resp.status_code == 502
        assert resp.json()["detail"] == "delete rejected"

    async def test_distribute(self, client: AsyncClient, datasource) -> None:
        datasource.get_championship = AsyncMock(side_effect=DataSourceError(self.DOWN))

        resp = await client.post(f"/v1/championships/{CHAMPIONSHIP_ID}/prizes/distribute")

        assert resp.status_code == 502
        assert resp.json()["detail"] == self.DOWN
