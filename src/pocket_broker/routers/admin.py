"""Admin analytics and reporting routes (``/api/admin``).

Every route is gated by :func:`require_admin` at router level; handlers never
re-check the session themselves.
"""
from fastapi import APIRouter, Depends, Request

from pocket_broker.auth import require_admin
from pocket_broker.deps import AdminServiceDep, AnalyticsServiceDep
from pocket_broker.schemas import (ActivityFeed, AlertsReport, Analytics,
                                   PlatformStats, SimpleTransactionPage,
                                   SimpleUserPage, SubscriptionList,
                                   TransactionPage, UserPage)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/stats", response_model=PlatformStats)
async def get_stats(service: AnalyticsServiceDep) -> PlatformStats:
    """Headline platform counters."""
    return await service.platform_stats()


@router.get("/analytics", response_model=Analytics)
async def get_analytics(service: AnalyticsServiceDep) -> Analytics:
    """KPIs, token popularity and trailing-30-day series."""
    return await service.analytics()


@router.get("/alerts", response_model=AlertsReport)
async def get_alerts(service: AnalyticsServiceDep) -> AlertsReport:
    """Failed and suspicious transactions for review."""
    return await service.alerts()


@router.get("/recent-activity", response_model=ActivityFeed)
async def get_recent_activity(service: AnalyticsServiceDep) -> ActivityFeed:
    return await service.recent_activity()


@router.get("/subscriptions", response_model=SubscriptionList)
async def get_subscriptions(service: AdminServiceDep) -> SubscriptionList:
    return await service.subscriptions()


@router.get("/users", response_model=SimpleUserPage)
async def get_users(
    service: AdminServiceDep, page: str | None = None
) -> SimpleUserPage:
    return await service.simple_users(page)


@router.get("/transactions", response_model=SimpleTransactionPage)
async def get_transactions(
    service: AdminServiceDep, page: str | None = None
) -> SimpleTransactionPage:
    return await service.simple_transactions(page)


@router.get("/users/list", response_model=UserPage)
@router.get("/users-management", response_model=UserPage)
async def list_users(request: Request, service: AdminServiceDep) -> UserPage:
    """Filtered user listing: ``role``, ``premiumTier``, ``search``, ``page``, ``limit``."""
    return await service.users(request.query_params)


@router.get("/transactions/list", response_model=TransactionPage)
@router.get("/transactions-management", response_model=TransactionPage)
async def list_transactions(request: Request, service: AdminServiceDep) -> TransactionPage:
    """Filtered transaction listing.

    Query params: ``status``, ``userId``, ``walletAddress``, ``tokenSymbol``,
    ``startDate``, ``endDate``, ``search``, ``sortBy``, ``sortOrder``,
    ``page`` and ``limit``.
    """
    return await service.transactions(request.query_params)
