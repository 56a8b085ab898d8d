"""Market-data proxy service.

MarketService wraps a MarketDataProvider with response shaping and error
mapping. Upstream payloads pass through unmodified apart from the field
selection below.
"""
import asyncio
import logging
from typing import Any

import httpx

from pocket_broker.providers.core import (MarketDataProvider,
                                          ProviderErrorMapper)
from pocket_broker.schemas import (MarketMovers, MarketStats, Mover,
                                   TrendingToken)

logger = logging.getLogger(__name__)

TRENDING_LIMIT = 6
MOVERS_LIMIT = 5

# Exceptions from providers we map to API errors; all others propagate.
_PROVIDER_EXCEPTIONS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    TypeError,
    TimeoutError,
    OSError,
    asyncio.TimeoutError,
    httpx.HTTPError,
)


def _trending_token(item: dict[str, Any]) -> TrendingToken:
    data = item.get("data") or {}
    price = data.get("price")
    volume = data.get("total_volume")
    change = (data.get("price_change_percentage_24h") or {}).get("usd")
    return TrendingToken(
        id=item["id"],
        symbol=item["symbol"],
        name=item["name"],
        price=price if price is not None else "N/A",
        price_change_24h=change or 0,
        volume=volume if volume is not None else "N/A",
        market_cap_rank=item.get("market_cap_rank"),
        image=item.get("small") or item.get("thumb"),
    )


def _mover(coin: dict[str, Any]) -> Mover:
    return Mover(
        id=coin["id"],
        symbol=str(coin.get("symbol", "")).upper(),
        name=coin.get("name", ""),
        price=coin.get("current_price"),
        price_change_24h=coin.get("price_change_percentage_24h"),
        image=coin.get("image"),
        volume=coin.get("total_volume"),
    )


def split_movers(coins: list[dict[str, Any]], limit: int = MOVERS_LIMIT) -> MarketMovers:
    """Top gainers (highest change first) and losers (lowest change first).

    Coins without a 24h change are left out of both sides.
    """
    ranked = sorted(
        (c for c in coins if c.get("price_change_percentage_24h") is not None),
        key=lambda c: c["price_change_percentage_24h"],
    )
    gainers = list(reversed(ranked[-limit:])) if ranked else []
    losers = ranked[:limit]
    return MarketMovers(
        gainers=[_mover(c) for c in gainers],
        losers=[_mover(c) for c in losers],
    )


class MarketService:
    """Shapes upstream market data; maps provider errors to ApiError."""

    def __init__(
        self,
        provider: MarketDataProvider,
        error_mapper: ProviderErrorMapper | None = None,
    ) -> None:
        self._provider = provider
        self._error_mapper = error_mapper or ProviderErrorMapper(api_name="CoinGecko")

    async def stats(self) -> MarketStats:
        """Global market snapshot."""
        try:
            payload = await self._provider.get_global()
            data = payload["data"]
            return MarketStats(
                total_market_cap=(data.get("total_market_cap") or {}).get("usd"),
                total_volume=(data.get("total_volume") or {}).get("usd"),
                btc_dominance=(data.get("market_cap_percentage") or {}).get("btc"),
                active_markets=data.get("markets"),
                market_cap_change_24h=data.get("market_cap_change_percentage_24h_usd"),
            )
        except _PROVIDER_EXCEPTIONS as e:
            logger.warning("Market stats fetch failed: %s", e)
            self._error_mapper.raise_api_error(e, "Failed to fetch market stats")

    async def trending(self) -> list[TrendingToken]:
        """First trending coins with price, change and volume."""
        try:
            payload = await self._provider.get_trending()
            coins = payload.get("coins", [])[:TRENDING_LIMIT]
            return [_trending_token(entry["item"]) for entry in coins]
        except _PROVIDER_EXCEPTIONS as e:
            logger.warning("Trending tokens fetch failed: %s", e)
            self._error_mapper.raise_api_error(e, "Failed to fetch trending tokens")

    async def movers(self) -> MarketMovers:
        """Top gainers and losers over 24h among the top 100 by market cap."""
        try:
            coins = await self._provider.get_markets()
            return split_movers(coins)
        except _PROVIDER_EXCEPTIONS as e:
            logger.warning("Market movers fetch failed: %s", e)
            self._error_mapper.raise_api_error(e, "Failed to fetch market movers")

    async def close(self) -> None:
        await self._provider.close()
