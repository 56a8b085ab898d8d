"""Protocols for market data providers."""
from typing import Any, Protocol


class MarketDataProvider(Protocol):
    """Upstream crypto market-data source.

    Methods return the upstream JSON payload unmodified; shaping happens in
    the service layer.
    """

    async def get_global(self) -> dict[str, Any]:
        """Global market snapshot."""
        ...

    async def get_trending(self) -> dict[str, Any]:
        """Trending search payload."""
        ...

    async def get_markets(self) -> list[dict[str, Any]]:
        """Top coins by market cap with 24h change."""
        ...

    async def close(self) -> None:
        ...
