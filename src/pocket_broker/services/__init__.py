"""Service layer: record services, admin reporting and market-data shaping.

Record services (``users``, ``transactions``, ...) are plain functions over a
request-scoped Session. Reporting services hold the engine and fan reads out
over their own sessions.
"""
from pocket_broker.services.admin import AdminService
from pocket_broker.services.analytics import AnalyticsService
from pocket_broker.services.market import MarketService

__all__ = [
    "AdminService",
    "AnalyticsService",
    "MarketService",
]
