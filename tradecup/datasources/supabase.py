"""Hosted database (Supabase / PostgREST) data source implementation."""

import logging
import asyncio
from decimal import Decimal
from typing import Any, Optional

import httpx

from tradecup.errors import DataSourceError
from tradecup.models import Championship, Holding, Participant, Transaction
from .base import DataSource

logger = logging.getLogger(__name__)

# API constants
REST_PATH = "/rest/v1"
REQUEST_TIMEOUT = 30.0
MAX_RETRIES = 3
RETRY_DELAY = 2.0
RATE_LIMIT_DELAY = 0.5


class SupabaseDataSource(DataSource):
    """
    Data source backed by the hosted championship database.
    
    Talks to the PostgREST endpoint directly. Tables used: championships,
    user_profiles, holdings, transactions. Participation is implied by a
    user having holdings or transactions in a championship.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the data source.
        
        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            api_key: Service or anon key
            transport: Optional httpx transport, e.g. a MockTransport in tests
        """
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.url}{REST_PATH}",
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=REQUEST_TIMEOUT,
                transport=self.transport,
            )
        return self._client

    async def _make_request(
        self,
        method: str,
        table: str,
        params: Optional[dict[str, str]] = None,
        payload: Optional[dict[str, Any]] = None,
        retry_count: int = 0,
    ) -> Any:
        """
        Make HTTP request with timeout handling and retries.
        
        Args:
            method: HTTP method
            table: Table name
            params: PostgREST query parameters (filters, select, order)
            payload: JSON body for inserts
            retry_count: Current retry attempt
            
        Returns:
            Decoded JSON body, or None for empty responses
        """
        client = await self._get_client()
        headers = {"Prefer": "return=minimal"} if method == "POST" else None
        
        try:
            response = await client.request(
                method,
                f"/{table}",
                params=params,
                json=payload,
                headers=headers,
            )
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
            
        except httpx.TimeoutException as e:
            if retry_count < MAX_RETRIES:
                logger.warning(
                    f"Request to {table} timed out (attempt {retry_count + 1}/{MAX_RETRIES}). "
                    f"Retrying in {RETRY_DELAY}s..."
                )
                await asyncio.sleep(RETRY_DELAY)
                return await self._make_request(method, table, params, payload, retry_count + 1)
            logger.error(f"Request to {table} failed after {MAX_RETRIES} retries: {e}")
            raise DataSourceError(f"Database request to {table} timed out") from e
                
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429 and retry_count < MAX_RETRIES:
                logger.warning(
                    f"Rate limited (429) on {table} (attempt {retry_count + 1}/{MAX_RETRIES}). "
                    f"Retrying in {RATE_LIMIT_DELAY}s..."
                )
                await asyncio.sleep(RATE_LIMIT_DELAY)
                return await self._make_request(method, table, params, payload, retry_count + 1)
            
            logger.error(f"HTTP error {status} for {table}: {e.response.text}")
            raise DataSourceError(
                f"Database error {status} on {table}: {_error_message(e.response)}",
                status_code=status,
            ) from e
            
        except httpx.HTTPError as e:
            logger.error(f"Unexpected error for {table}: {e}")
            raise DataSourceError(f"Database request to {table} failed: {e}") from e

    async def get_championship(self, championship_id: str) -> Optional[Championship]:
        rows = await self._make_request(
            "GET",
            "championships",
            params={"select": "*", "id": f"eq.{championship_id}"},
        )
        if not rows:
            return None
        row = rows[0]
        return Championship(
            id=row["id"],
            name=row["name"],
            description=row.get("description"),
            startDate=row.get("start_date"),
            endDate=row.get("end_date"),
            startingCash=Decimal(str(row["starting_cash"])),
            enrollmentFee=Decimal(str(row.get("enrollment_fee") or 0)),
            status=row.get("status") or "pending",
            adminUserId=row.get("admin_user_id"),
        )

    async def get_participants(self, championship_id: str) -> list[str]:
        """
        Participants are the distinct users with holdings or transactions
        in the championship.
        """
        params = {"select": "user_email", "championship_id": f"eq.{championship_id}"}
        holdings_rows, transaction_rows = await asyncio.gather(
            self._make_request("GET", "holdings", params=params),
            self._make_request("GET", "transactions", params=params),
        )
        
        emails: dict[str, None] = {}
        for row in (holdings_rows or []) + (transaction_rows or []):
            if row.get("user_email"):
                emails[row["user_email"]] = None
        
        logger.debug(f"Found {len(emails)} participants for championship {championship_id}")
        return list(emails)

    async def get_profile(self, user_email: str) -> Optional[Participant]:
        rows = await self._make_request(
            "GET",
            "user_profiles",
            params={"select": "email,name", "email": f"eq.{user_email}"},
        )
        if not rows:
            return None
        row = rows[0]
        return Participant(
            id=row["email"],
            name=row.get("name") or user_email.split("@")[0],
        )

    async def get_holdings(self, user_email: str, championship_id: str) -> list[Holding]:
        rows = await self._make_request(
            "GET",
            "holdings",
            params={
                "select": "*",
                "user_email": f"eq.{user_email}",
                "championship_id": f"eq.{championship_id}",
            },
        )
        return [
            Holding(
                symbol=row["symbol"],
                name=row.get("name"),
                quantity=Decimal(str(row["quantity"])),
                avgPrice=Decimal(str(row["avg_price"])),
                championshipId=row.get("championship_id"),
            )
            for row in rows or []
        ]

    async def get_transactions(self, user_email: str, championship_id: str) -> list[Transaction]:
        rows = await self._make_request(
            "GET",
            "transactions",
            params={
                "select": "*",
                "user_email": f"eq.{user_email}",
                "championship_id": f"eq.{championship_id}",
                "order": "date.desc",
            },
        )
        return [_transaction_from_row(row) for row in rows or []]

    async def add_transaction(
        self,
        user_email: str,
        championship_id: str,
        transaction: Transaction,
    ) -> None:
        payload = {
            "id": transaction.id,
            "user_email": user_email,
            "type": transaction.kind.value,
            "amount": str(transaction.amount),
            "date": transaction.date,
            "status": transaction.status.value,
            "method": transaction.method,
            "symbol": transaction.symbol,
            "quantity": _optional_str(transaction.quantity),
            "price": _optional_str(transaction.price),
            "championship_id": championship_id,
        }
        await self._make_request("POST", "transactions", payload=payload)
        logger.info(f"Added {transaction.kind.value} transaction for {user_email} in {championship_id}")

    async def remove_participant(self, user_email: str, championship_id: str) -> None:
        """
        Delete holdings first, then transactions.

        PostgREST has no transaction across the two requests. If the second
        delete fails the user keeps their transactions, so they still count
        as enrolled and leaving again finishes the removal.
        """
        params = {
            "user_email": f"eq.{user_email}",
            "championship_id": f"eq.{championship_id}",
        }
        await self._make_request("DELETE", "holdings", params=params)
        await self._make_request("DELETE", "transactions", params=params)
        logger.info(f"Removed {user_email} from championship {championship_id}")

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _transaction_from_row(row: dict) -> Transaction:
    return Transaction(
        id=row.get("id"),
        type=row["type"],
        amount=Decimal(str(row["amount"])),
        date=row.get("date"),
        status=row.get("status") or "completed",
        method=row.get("method"),
        symbol=row.get("symbol"),
        quantity=_optional_decimal(row.get("quantity")),
        price=_optional_decimal(row.get("price")),
        championshipId=row.get("championship_id"),
    )


def _optional_decimal(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _optional_str(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _error_message(response: httpx.Response) -> str:
    """PostgREST errors carry a JSON body with a 'message' field."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return response.text
