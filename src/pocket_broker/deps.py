"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

No external DI container. The lifespan (main.py) creates the database engine,
the market-data service and the reporting services once and attaches them to
app.state; these getters are used by Depends().
"""
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from pocket_broker.services import (AdminService, AnalyticsService,
                                    MarketService)


def get_session(request: Request) -> Generator[Session, None, None]:
    """Yield a request-scoped session; rolls back if the handler raised."""
    session = Session(request.app.state.engine)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_market_service(request: Request) -> MarketService:
    """Resolve the CoinGecko-backed MarketService from app.state."""
    return request.app.state.market_service


def get_analytics_service(request: Request) -> AnalyticsService:
    return request.app.state.analytics_service


def get_admin_service(request: Request) -> AdminService:
    return request.app.state.admin_service


# Type aliases for route injection
DbSession = Annotated[Session, Depends(get_session)]
MarketServiceDep = Annotated[MarketService, Depends(get_market_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
