"""Models for CoinGecko provider (API params and cache windows)."""
from pydantic import BaseModel

# Revalidation windows, in seconds.
GLOBAL_TTL = 60.0
TRENDING_TTL = 300.0
MARKETS_TTL = 120.0


class CoinGeckoMarketsParams(BaseModel):
    """Params for /coins/markets (market movers)."""

    vs_currency: str = "usd"
    order: str = "market_cap_desc"
    per_page: int = 100
    page: int = 1
    sparkline: str = "false"
    price_change_percentage: str = "24h"
