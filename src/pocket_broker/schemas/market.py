"""Market-data proxy and swap-quote payloads."""
from typing import Any

from pydantic import Field

from pocket_broker.schemas.base import CamelModel


class MarketStats(CamelModel):
    """Global crypto market snapshot (CoinGecko /global)."""

    total_market_cap: float | None = None
    total_volume: float | None = None
    btc_dominance: float | None = None
    active_markets: int | None = None
    market_cap_change_24h: float | None = Field(None, alias="marketCapChange24h")


class TrendingToken(CamelModel):
    id: str
    symbol: str
    name: str
    price: float | str = "N/A"
    price_change_24h: float = Field(0.0, alias="priceChange24h")
    volume: float | str = "N/A"
    market_cap_rank: int | None = None
    image: str | None = None


class Mover(CamelModel):
    id: str
    symbol: str
    name: str
    price: float | None = None
    price_change_24h: float | None = Field(None, alias="priceChange24h")
    image: str | None = None
    volume: float | None = None


class MarketMovers(CamelModel):
    gainers: list[Mover]
    losers: list[Mover]


class SwapQuoteRequest(CamelModel):
    token_in: Any = None
    token_out: Any = None
    amount: Any = None
    slippage: Any = None
    chain_id: Any = None


class SwapRoute(CamelModel):
    protocol: str
    percentage: int


class SwapQuote(CamelModel):
    """Indicative quote; numbers come from a fixed rate table."""

    token_in: str
    token_out: str
    amount_in: str
    amount_out: str
    estimated_gas: str
    gas_cost_usd: str = Field(alias="gasCostUSD")
    price_impact: str
    route: list[SwapRoute]
    minimum_received: str
    slippage: float
    chain_id: int
    timestamp: str
