"""Market data providers.

CoinGeckoProvider proxies the public CoinGecko API behind a short-lived
in-process cache. Providers return upstream JSON; the market service shapes
it into response models and maps failures to API errors.
"""
from pocket_broker.providers.cache import TTLCache
from pocket_broker.providers.core import MarketDataProvider, ProviderErrorMapper
from pocket_broker.providers.crypto import CoinGeckoProvider

__all__ = [
    "CoinGeckoProvider",
    "MarketDataProvider",
    "ProviderErrorMapper",
    "TTLCache",
]
