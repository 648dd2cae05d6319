import asyncio
import logging
import math

import aiohttp

from config import settings
from errors import OracleUnavailable

module_logger = logging.getLogger(__name__)

QUOTE_CURRENCY = "usd"


class NativePriceOracle:
    """Spot USD price of a chain's native asset from a CoinGecko-style feed."""

    def __init__(
        self,
        base_url: str | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        self.base_url = (base_url or settings.PRICE_FEED_URL).rstrip("/")
        self._session = session

    async def fetch_price(self, asset_id: str) -> float:
        if self._session is not None:
            return await self._fetch(self._session, asset_id)

        async with aiohttp.ClientSession() as client:
            return await self._fetch(client, asset_id)

    async def _fetch(self, client: aiohttp.ClientSession, asset_id: str) -> float:
        url = f"{self.base_url}/simple/price"
        params = {"ids": asset_id, "vs_currencies": QUOTE_CURRENCY}

        try:
            async with client.get(url, params=params) as resp:
                if resp.status != 200:
                    raise OracleUnavailable(
                        f"price feed answered HTTP {resp.status} for '{asset_id}'", address=url
                    )
                data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise OracleUnavailable(f"price feed request failed: {e}", address=url) from e

        try:
            price = float(data[asset_id][QUOTE_CURRENCY])
        except (KeyError, TypeError, ValueError) as e:
            raise OracleUnavailable(
                f"price feed response has no {QUOTE_CURRENCY} price for '{asset_id}'", address=url
            ) from e

        if not (math.isfinite(price) and price > 0):
            raise OracleUnavailable(f"price feed returned unusable price {price}", address=url)

        module_logger.info(f"{asset_id} = {price} USD")
        return price
