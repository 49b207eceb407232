"""Alpaca market data price source."""

import logging
import asyncio
from decimal import Decimal
from typing import Optional

import httpx

from tradecup.errors import DataSourceError
from .base import PriceSource

logger = logging.getLogger(__name__)

DATA_API_URL = "https://data.alpaca.markets"
REQUEST_TIMEOUT = 10.0
MAX_RETRIES = 3
RATE_LIMIT_DELAY = 0.5

# Unknown or malformed symbols
NO_PRICE_STATUSES = (404, 422)


class AlpacaPriceSource(PriceSource):
    """
    Latest trade prices from the Alpaca market data API.
    
    The data API is the same for paper and live keys.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        api_url: str = DATA_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.transport = transport
        self.api_key = api_key
        self.api_secret = api_secret
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={
                    "APCA-API-KEY-ID": self.api_key,
                    "APCA-API-SECRET-KEY": self.api_secret,
                    "accept": "application/json",
                },
                timeout=REQUEST_TIMEOUT,
                transport=self.transport,
            )
        return self._client

    async def get_latest_price(self, symbol: str, retry_count: int = 0) -> Optional[Decimal]:
        """
        Get the price of the latest trade for a symbol.
        
        Returns None when Alpaca has no trade for the symbol.
        """
        client = await self._get_client()
        endpoint = f"/v2/stocks/{symbol.upper()}/trades/latest"
        
        try:
            response = await client.get(endpoint)
            if response.status_code in NO_PRICE_STATUSES:
                logger.debug(f"No latest trade for {symbol} ({response.status_code})")
                return None
            response.raise_for_status()
            data = response.json()
            
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429 and retry_count < MAX_RETRIES:
                logger.warning(
                    f"Rate limited (429) on {endpoint} (attempt {retry_count + 1}/{MAX_RETRIES}). "
                    f"Retrying in {RATE_LIMIT_DELAY}s..."
                )
                await asyncio.sleep(RATE_LIMIT_DELAY)
                return await self.get_latest_price(symbol, retry_count + 1)
            
            logger.error(f"HTTP error {e.response.status_code} for {endpoint}: {e}")
            raise DataSourceError(
                f"Failed to fetch price for {symbol}: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            ) from e
            
        except httpx.HTTPError as e:
            logger.error(f"Unexpected error for {endpoint}: {e}")
            raise DataSourceError(f"Failed to fetch price for {symbol}: {e}") from e
        
        trade = data.get("trade") or {}
        price = trade.get("p")
        if price is None:
            return None
        return Decimal(str(price))

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
