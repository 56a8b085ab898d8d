"""Core provider abstractions."""
from pocket_broker.providers.core.error_mapper import ProviderErrorMapper
from pocket_broker.providers.core.protocols import MarketDataProvider

__all__ = [
    "MarketDataProvider",
    "ProviderErrorMapper",
]
