"""API routers.

Includes routes for:
- /api/users, /api/portfolios, /api/transactions, /api/watchlists,
  /api/price-alerts, /api/subscriptions - record CRUD keyed by ``?id=``
- /api/admin - admin-only analytics, alerts and listings
- /api/market - CoinGecko proxies (stats, trending, movers)
- /api/swap - indicative swap quotes
"""
from pocket_broker.routers.admin import router as admin_router
from pocket_broker.routers.market import router as market_router
from pocket_broker.routers.portfolios import router as portfolios_router
from pocket_broker.routers.price_alerts import router as price_alerts_router
from pocket_broker.routers.subscriptions import router as subscriptions_router
from pocket_broker.routers.swap import router as swap_router
from pocket_broker.routers.transactions import router as transactions_router
from pocket_broker.routers.users import router as users_router
from pocket_broker.routers.watchlists import router as watchlists_router

__all__ = [
    "admin_router",
    "market_router",
    "portfolios_router",
    "price_alerts_router",
    "subscriptions_router",
    "swap_router",
    "transactions_router",
    "users_router",
    "watchlists_router",
]
