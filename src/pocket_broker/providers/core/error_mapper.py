"""Domain concept for mapping provider exceptions to API errors."""
import asyncio
from dataclasses import dataclass

import httpx

from pocket_broker.errors import ApiError


@dataclass(frozen=True)
class ProviderErrorMapper:
    """Maps upstream market-data exceptions to an HTTP status.

    The message shown to the client is chosen per endpoint by the caller
    (e.g. "Failed to fetch market movers"); the code is always
    ``MARKET_DATA_UNAVAILABLE``.
    """

    api_name: str = "API"
    code: str = "MARKET_DATA_UNAVAILABLE"

    def to_status(self, exc: Exception) -> int:
        """HTTP status for a provider exception.

        Upstream 404 stays 404, upstream 5xx becomes 502, timeouts become 504
        and everything else is a 500.
        """
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            if status == 404:
                return 404
            if status >= 500:
                return 502
            return 500
        if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
            return 504
        return 500

    def to_api_error(self, exc: Exception, error: str) -> ApiError:
        return ApiError(self.to_status(exc), error, self.code)

    def raise_api_error(self, exc: Exception, error: str) -> None:
        """Map provider exception and raise ApiError. Never returns."""
        raise self.to_api_error(exc, error) from exc
