"""Pydantic schemas for API payloads. Not persisted to DB."""
from pocket_broker.schemas.admin import (Activity, ActivityFeed,
                                         AdminSubscriptionRow,
                                         AdminTransaction, AdminUserRow,
                                         AlertsReport, AlertsSummary,
                                         Analytics, DailyUsers, DailyVolume,
                                         Pagination, PlatformStats,
                                         SimpleTransactionPage,
                                         SimpleTransactionRow, SimpleUserPage,
                                         SimpleUserRow, SubscriptionList,
                                         SuspiciousTransaction,
                                         TokenPopularity, TransactionPage,
                                         UserPage, UserSummary)
from pocket_broker.schemas.base import CamelModel
from pocket_broker.schemas.market import (MarketMovers, MarketStats, Mover,
                                          SwapQuote, SwapQuoteRequest,
                                          SwapRoute, TrendingToken)
from pocket_broker.schemas.records import (PortfolioCreate, PortfolioRead,
                                           PortfolioUpdate, PriceAlertCreate,
                                           PriceAlertRead, PriceAlertUpdate,
                                           SubscriptionCreate,
                                           SubscriptionRead,
                                           SubscriptionUpdate,
                                           TransactionCreate, TransactionRead,
                                           TransactionUpdate, UserCreate,
                                           UserRead, UserUpdate,
                                           WatchlistCreate, WatchlistRead,
                                           WatchlistUpdate)

__all__ = [
    "Activity",
    "ActivityFeed",
    "AdminSubscriptionRow",
    "AdminTransaction",
    "AdminUserRow",
    "AlertsReport",
    "AlertsSummary",
    "Analytics",
    "CamelModel",
    "DailyUsers",
    "DailyVolume",
    "MarketMovers",
    "MarketStats",
    "Mover",
    "Pagination",
    "PlatformStats",
    "PortfolioCreate",
    "PortfolioRead",
    "PortfolioUpdate",
    "PriceAlertCreate",
    "PriceAlertRead",
    "PriceAlertUpdate",
    "SimpleTransactionPage",
    "SimpleTransactionRow",
    "SimpleUserPage",
    "SimpleUserRow",
    "SubscriptionCreate",
    "SubscriptionList",
    "SubscriptionRead",
    "SubscriptionUpdate",
    "SuspiciousTransaction",
    "SwapQuote",
    "SwapQuoteRequest",
    "SwapRoute",
    "TokenPopularity",
    "TransactionCreate",
    "TransactionPage",
    "TransactionRead",
    "TransactionUpdate",
    "TrendingToken",
    "UserCreate",
    "UserPage",
    "UserRead",
    "UserSummary",
    "UserUpdate",
    "WatchlistCreate",
    "WatchlistRead",
    "WatchlistUpdate",
]
