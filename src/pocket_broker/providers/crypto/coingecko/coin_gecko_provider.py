"""CoinGecko market data provider for cryptocurrencies."""
import logging
import os
from collections.abc import Callable
from typing import Any

import httpx

from pocket_broker.providers.cache import TTLCache, cache_key
from pocket_broker.providers.crypto.coingecko.models import (
    GLOBAL_TTL, MARKETS_TTL, TRENDING_TTL, CoinGeckoMarketsParams)

logger = logging.getLogger(__name__)


class CoinGeckoProvider:
    """Pass-through client for the public CoinGecko API.

    Responses are returned as parsed JSON and cached per path and params for
    a short revalidation window. Failed requests are never cached.
    """

    BASE_URL = "https://api.coingecko.com/api/v3"
    PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"

    def __init__(
        self,
        api_key: str | None = None,
        use_pro_api: bool = False,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the CoinGecko provider.

        Args:
            api_key: CoinGecko API key. Defaults to COINGECKO_API_KEY env var.
            use_pro_api: Whether to use the Pro API endpoint.
            transport: Optional httpx transport (tests pass a MockTransport).
            timeout: Request timeout in seconds.
            clock: Optional monotonic clock for the cache.
        """
        self._api_key = api_key or os.getenv("COINGECKO_API_KEY")
        self._use_pro_api = use_pro_api or bool(self._api_key)

        headers: dict[str, str] = {"Accept": "application/json"}
        if self._api_key:
            headers["x-cg-pro-api-key"] = self._api_key

        base = self.PRO_BASE_URL if self._use_pro_api else self.BASE_URL
        self._client = httpx.AsyncClient(
            base_url=base, headers=headers, timeout=timeout, transport=transport
        )
        self._cache = TTLCache(clock) if clock else TTLCache()

    async def _get_json(
        self, path: str, ttl: float, params: dict[str, Any] | None = None
    ) -> Any:
        key = cache_key(path, params)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        response = await self._client.get(path, params=params)
        response.raise_for_status()
        data = response.json()
        self._cache.set(key, data, ttl)
        return data

    async def get_global(self) -> dict[str, Any]:
        """Fetch the global market snapshot (/global)."""
        return await self._get_json("/global", GLOBAL_TTL)

    async def get_trending(self) -> dict[str, Any]:
        """Fetch trending coins (/search/trending)."""
        return await self._get_json("/search/trending", TRENDING_TTL)

    async def get_markets(self) -> list[dict[str, Any]]:
        """Fetch the top 100 coins by market cap (/coins/markets)."""
        params = CoinGeckoMarketsParams().model_dump()
        return await self._get_json("/coins/markets", MARKETS_TTL, params)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
