"""Main module for the PocketBroker API service."""
import logging
import os
import subprocess
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from pocket_broker.db.sessions import create_db_engine, init_db
from pocket_broker.errors import install_error_handlers
from pocket_broker.providers import CoinGeckoProvider, MarketDataProvider
from pocket_broker.routers import (admin_router, market_router,
                                   portfolios_router, price_alerts_router,
                                   subscriptions_router, swap_router,
                                   transactions_router, users_router,
                                   watchlists_router)
from pocket_broker.services import (AdminService, AnalyticsService,
                                    MarketService)

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure the root logger from LOG_LEVEL (default INFO)."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    database_url: str | None = None,
    market_provider: MarketDataProvider | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        database_url: Overrides DATABASE_URL (tests pass a SQLite file URL).
        market_provider: Overrides the CoinGecko provider.
    """

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Create the engine and services at startup; close them on shutdown."""
        engine = create_db_engine(database_url)
        init_db(engine)
        provider = market_provider or CoinGeckoProvider()

        fastapi_app.state.engine = engine
        market_service = MarketService(provider)
        fastapi_app.state.market_service = market_service
        fastapi_app.state.analytics_service = AnalyticsService(engine)
        fastapi_app.state.admin_service = AdminService(engine)

        yield

        try:
            await market_service.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing provider %s: %s", type(provider).__name__, exc)
        engine.dispose()

    fastapi_app = FastAPI(
        title="PocketBroker API",
        description="Trading dashboard backend: records, admin analytics and market data",
        version="0.1.0",
        lifespan=lifespan,
    )
    install_error_handlers(fastapi_app)

    fastapi_app.include_router(users_router)
    fastapi_app.include_router(portfolios_router)
    fastapi_app.include_router(transactions_router)
    fastapi_app.include_router(watchlists_router)
    fastapi_app.include_router(price_alerts_router)
    fastapi_app.include_router(subscriptions_router)
    fastapi_app.include_router(admin_router)
    fastapi_app.include_router(market_router)
    fastapi_app.include_router(swap_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    configure_logging()
    uvicorn.run("pocket_broker.main:app", host="127.0.0.1", port=8001)


def run_dev():
    """Run the development server with Postgres running via Docker."""
    configure_logging()
    project_root = Path(__file__).resolve().parent.parent.parent
    try:
        subprocess.run(
            ["docker", "compose", "up", "-d", "postgres"],
            cwd=project_root,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        print("Failed to start Postgres:", e.stderr or e.stdout, file=sys.stderr)
        sys.exit(1)
    uvicorn.run("pocket_broker.main:app", host="0.0.0.0", port=8000, reload=True)
