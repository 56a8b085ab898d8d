"""Response shapes for the admin analytics and reporting endpoints."""
from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from pocket_broker.schemas.base import CamelModel
from pocket_broker.utils import utc_iso


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class UserSummary(CamelModel):
    """Owner of a transaction, nested under ``user`` in listings."""

    id: int | None = None
    name: str | None = None
    email: str | None = None
    wallet_address: str | None = None


class AdminTransaction(CamelModel):
    id: int
    tx_hash: str
    type: str
    status: str
    token_in: str | None = None
    token_out: str | None = None
    amount_in: float | None = None
    amount_out: float | None = None
    gas_fee: float | None = None
    timestamp: str
    user: UserSummary


class SuspiciousTransaction(AdminTransaction):
    suspicious_reason: str


class TransactionPage(CamelModel):
    transactions: list[AdminTransaction]
    pagination: Pagination


class AdminUserRow(CamelModel):
    id: str
    name: str
    email: str
    wallet_address: str | None = None
    role: str
    premium_tier: str
    created_at: str
    transaction_count: int
    total_volume: float


class UserPage(CamelModel):
    users: list[AdminUserRow]
    pagination: Pagination


class SimpleUserRow(CamelModel):
    id: int
    email: str
    wallet_address: str | None = None
    premium_tier: str
    premium_expires_at: str | None = None
    created_at: str


class SimpleUserPage(CamelModel):
    users: list[SimpleUserRow]
    pagination: Pagination


class SimpleTransactionRow(CamelModel):
    id: int
    user_id: int
    user_email: str | None = None
    tx_hash: str
    type: str
    token_in: str | None = None
    token_out: str | None = None
    amount_in: float | None = None
    amount_out: float | None = None
    gas_fee: float | None = None
    status: str
    timestamp: str


class SimpleTransactionPage(CamelModel):
    transactions: list[SimpleTransactionRow]
    pagination: Pagination


class TokenPopularity(CamelModel):
    token: str
    count: int
    volume: float


class DailyVolume(CamelModel):
    date: str
    volume: float
    count: int


class DailyUsers(CamelModel):
    date: str
    new_users: int


class Analytics(CamelModel):
    total_users: int
    active_users: int
    total_transactions: int
    pending_transactions: int
    failed_transactions: int
    completed_transactions: int
    total_volume_usd: float
    most_traded_tokens: list[TokenPopularity]
    transaction_volume_by_day: list[DailyVolume]
    user_growth: list[DailyUsers]
    average_transaction_value: float
    average_gas_fee: float
    total_gas_paid: float


class AlertsSummary(CamelModel):
    total_failed: int
    total_suspicious: int
    failed_last_24h: int = Field(alias="failedLast24h")
    suspicious_last_24h: int = Field(alias="suspiciousLast24h")


class AlertsReport(CamelModel):
    failed_transactions: list[AdminTransaction]
    suspicious_transactions: list[SuspiciousTransaction]
    summary: AlertsSummary


class PlatformStats(CamelModel):
    total_users: int
    total_transactions: int
    total_transaction_volume: float
    active_subscriptions: int
    premium_users: int
    total_portfolios: int
    total_watchlists: int
    total_price_alerts: int


class Activity(CamelModel):
    id: str
    type: Literal["transaction", "new_user", "new_subscription"]
    timestamp: str
    user_id: int
    user_email: str
    details: dict[str, Any] = Field(default_factory=dict)


class ActivityFeed(CamelModel):
    activities: list[Activity]


class AdminSubscriptionRow(CamelModel):
    id: int
    user_id: int
    user_email: str | None = None
    plan: str
    status: str
    current_period_end: str
    created_at: str


class SubscriptionList(CamelModel):
    subscriptions: list[AdminSubscriptionRow]
    total: int


def iso_or_none(value: datetime | str | None) -> str | None:
    """Render an auth-side DateTime the way trading timestamps look."""
    if value is None or isinstance(value, str):
        return value
    return utc_iso(value)
