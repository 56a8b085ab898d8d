"""Platform analytics: KPI aggregation and the suspicious-transaction report.

All entry points are read-only. Independent queries of one request fan out
through :func:`gather_reads` and are composed once all of them return.
"""
import logging
import os
from collections.abc import Iterable
from datetime import datetime, timedelta

from sqlalchemy import and_, func, or_
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from pocket_broker.db.models import (AuthUser, Portfolio, PremiumTier,
                                     PriceAlert, Subscription,
                                     SubscriptionStatus, Transaction,
                                     TransactionStatus, User, Watchlist)
from pocket_broker.schemas import (Activity, ActivityFeed, AdminTransaction,
                                   AlertsReport, AlertsSummary, Analytics,
                                   DailyUsers, DailyVolume, PlatformStats,
                                   SuspiciousTransaction, TokenPopularity,
                                   UserSummary)
from pocket_broker.services.utils.fanout import gather_reads
from pocket_broker.utils import parse_iso_datetime, utc_iso, utcnow

logger = logging.getLogger(__name__)

GAS_FEE_THRESHOLD = float(os.getenv("SUSPICIOUS_GAS_FEE_THRESHOLD", "100"))
AMOUNT_THRESHOLD = float(os.getenv("SUSPICIOUS_AMOUNT_THRESHOLD", "10000"))

TRAILING_DAYS = 30
TOP_TOKENS = 10
REPORT_CAP = 100
ACTIVITY_PER_SOURCE = 10
ACTIVITY_LIMIT = 20

_REVIEWABLE_STATUSES = (TransactionStatus.CONFIRMED.value, TransactionStatus.PENDING.value)


def _fmt(threshold: float) -> str:
    return f"{threshold:g}"


def suspicious_reason(
    gas_fee: float | None,
    amount_in: float | None,
    *,
    gas_fee_threshold: float = GAS_FEE_THRESHOLD,
    amount_threshold: float = AMOUNT_THRESHOLD,
) -> str | None:
    """Which thresholds a transaction exceeds, as a review note; None if neither."""
    high_gas = (gas_fee or 0) > gas_fee_threshold
    high_amount = (amount_in or 0) > amount_threshold
    if high_gas and high_amount:
        return (
            f"High gas fee (>{_fmt(gas_fee_threshold)}) "
            f"and high amount (>{_fmt(amount_threshold)})"
        )
    if high_gas:
        return f"High gas fee (>{_fmt(gas_fee_threshold)})"
    if high_amount:
        return f"High amount (>{_fmt(amount_threshold)})"
    return None


def is_suspicious(
    status: str,
    gas_fee: float | None,
    amount_in: float | None,
    *,
    gas_fee_threshold: float = GAS_FEE_THRESHOLD,
    amount_threshold: float = AMOUNT_THRESHOLD,
) -> bool:
    """Suspicious iff a threshold is exceeded and the transaction is not failed."""
    if status not in _REVIEWABLE_STATUSES:
        return False
    reason = suspicious_reason(
        gas_fee,
        amount_in,
        gas_fee_threshold=gas_fee_threshold,
        amount_threshold=amount_threshold,
    )
    return reason is not None


def merge_token_popularity(
    token_in_rows: Iterable[tuple[str | None, int, float | None]],
    token_out_rows: Iterable[tuple[str | None, int, float | None]],
    limit: int = TOP_TOKENS,
) -> list[TokenPopularity]:
    """Merge per-side (token, count, volume) group-bys into one ranking by count."""
    merged: dict[str, TokenPopularity] = {}
    for rows in (token_in_rows, token_out_rows):
        for token, count, volume in rows:
            if not token:
                continue
            entry = merged.setdefault(token, TokenPopularity(token=token, count=0, volume=0.0))
            entry.count += int(count)
            entry.volume += float(volume or 0)
    ranked = sorted(merged.values(), key=lambda e: e.count, reverse=True)
    return ranked[:limit]


def _transaction_row(
    tx: Transaction,
    email: str | None,
    wallet_address: str | None,
    name: str | None,
    *,
    fallback_name: str,
) -> dict:
    return {
        "id": tx.id,
        "tx_hash": tx.tx_hash,
        "type": tx.type,
        "status": tx.status,
        "token_in": tx.token_in,
        "token_out": tx.token_out,
        "amount_in": tx.amount_in,
        "amount_out": tx.amount_out,
        "gas_fee": tx.gas_fee,
        "timestamp": tx.timestamp,
        "user": UserSummary(
            id=tx.user_id,
            name=name or fallback_name,
            email=email,
            wallet_address=wallet_address,
        ),
    }


def format_admin_transaction(
    tx: Transaction,
    email: str | None,
    wallet_address: str | None,
    name: str | None,
    *,
    fallback_name: str = "Unknown User",
) -> AdminTransaction:
    """Nest the owner's identity under ``user``."""
    return AdminTransaction(
        **_transaction_row(tx, email, wallet_address, name, fallback_name=fallback_name)
    )


def _with_owner():
    """Transactions joined with their trading user and the auth user's name."""
    return (
        select(Transaction, User.email, User.wallet_address, AuthUser.name)
        .outerjoin(User, Transaction.user_id == User.id)
        .outerjoin(AuthUser, AuthUser.email == User.email)
    )


class AnalyticsService:
    """Read-only KPI and reporting queries over the relational store."""

    def __init__(
        self,
        engine: Engine,
        *,
        gas_fee_threshold: float = GAS_FEE_THRESHOLD,
        amount_threshold: float = AMOUNT_THRESHOLD,
    ) -> None:
        self._engine = engine
        self._gas_fee_threshold = gas_fee_threshold
        self._amount_threshold = amount_threshold

    # ---- Suspicious-transaction heuristic ----

    def _suspicious_clause(self):
        return and_(
            or_(
                Transaction.gas_fee > self._gas_fee_threshold,
                Transaction.amount_in > self._amount_threshold,
            ),
            Transaction.status.in_(_REVIEWABLE_STATUSES),
        )

    def reason_for(self, tx: Transaction) -> str | None:
        return suspicious_reason(
            tx.gas_fee,
            tx.amount_in,
            gas_fee_threshold=self._gas_fee_threshold,
            amount_threshold=self._amount_threshold,
        )

    # ---- KPIs ----

    async def analytics(self, now: datetime | None = None) -> Analytics:
        """Platform KPIs over all time plus trailing-30-day series."""
        cutoff = utc_iso((now or utcnow()) - timedelta(days=TRAILING_DAYS))
        tx_day = func.substr(Transaction.timestamp, 1, 10)
        user_day = func.substr(User.created_at, 1, 10)

        def count_users(s: Session) -> int:
            return s.exec(select(func.count()).select_from(User)).one()

        def count_active_users(s: Session) -> int:
            return s.exec(
                select(func.count(func.distinct(Transaction.user_id)))
                .where(Transaction.timestamp >= cutoff)
            ).one()

        def transaction_stats(s: Session):
            return s.exec(
                select(
                    func.count(Transaction.id),
                    func.avg(Transaction.amount_out),
                    func.avg(Transaction.gas_fee),
                    func.sum(Transaction.gas_fee),
                )
            ).one()

        def total_volume(s: Session) -> float:
            return s.exec(select(func.coalesce(func.sum(Transaction.amount_out), 0))).one()

        def status_counts(s: Session) -> dict[str, int]:
            rows = s.exec(
                select(Transaction.status, func.count()).group_by(Transaction.status)
            ).all()
            return {status: count for status, count in rows}

        def token_in_groups(s: Session):
            return s.exec(
                select(
                    Transaction.token_in,
                    func.count(),
                    func.coalesce(func.sum(Transaction.amount_in), 0),
                )
                .where(Transaction.token_in.is_not(None))
                .group_by(Transaction.token_in)
            ).all()

        def token_out_groups(s: Session):
            return s.exec(
                select(
                    Transaction.token_out,
                    func.count(),
                    func.coalesce(func.sum(Transaction.amount_out), 0),
                )
                .where(Transaction.token_out.is_not(None))
                .group_by(Transaction.token_out)
            ).all()

        def volume_by_day(s: Session):
            return s.exec(
                select(tx_day, func.coalesce(func.sum(Transaction.amount_out), 0), func.count())
                .where(Transaction.timestamp >= cutoff)
                .group_by(tx_day)
                .order_by(tx_day.desc())
            ).all()

        def user_growth(s: Session):
            return s.exec(
                select(user_day, func.count())
                .where(User.created_at >= cutoff)
                .group_by(user_day)
                .order_by(user_day.desc())
            ).all()

        (
            total_users,
            active_users,
            stats,
            volume,
            by_status,
            token_in_rows,
            token_out_rows,
            daily_volume,
            daily_users,
        ) = await gather_reads(
            self._engine,
            count_users,
            count_active_users,
            transaction_stats,
            total_volume,
            status_counts,
            token_in_groups,
            token_out_groups,
            volume_by_day,
            user_growth,
        )
        tx_count, avg_amount, avg_gas, total_gas = stats

        return Analytics(
            total_users=total_users,
            active_users=active_users,
            total_transactions=tx_count,
            pending_transactions=by_status.get(TransactionStatus.PENDING.value, 0),
            failed_transactions=by_status.get(TransactionStatus.FAILED.value, 0),
            completed_transactions=by_status.get(TransactionStatus.CONFIRMED.value, 0),
            total_volume_usd=float(volume or 0),
            most_traded_tokens=merge_token_popularity(token_in_rows, token_out_rows),
            transaction_volume_by_day=[
                DailyVolume(date=day, volume=float(vol or 0), count=count)
                for day, vol, count in daily_volume
            ],
            user_growth=[DailyUsers(date=day, new_users=count) for day, count in daily_users],
            average_transaction_value=float(avg_amount or 0),
            average_gas_fee=float(avg_gas or 0),
            total_gas_paid=float(total_gas or 0),
        )

    async def alerts(self, now: datetime | None = None) -> AlertsReport:
        """Failed and suspicious transactions for manual review."""
        since = utc_iso((now or utcnow()) - timedelta(hours=24))
        failed = Transaction.status == TransactionStatus.FAILED.value
        suspicious = self._suspicious_clause()

        def recent(clause):
            def read(s: Session):
                return s.exec(
                    _with_owner()
                    .where(clause)
                    .order_by(Transaction.timestamp.desc(), Transaction.id.desc())
                    .limit(REPORT_CAP)
                ).all()
            return read

        def count(*clauses):
            def read(s: Session) -> int:
                return s.exec(
                    select(func.count()).select_from(Transaction).where(*clauses)
                ).one()
            return read

        (
            failed_rows,
            suspicious_rows,
            total_failed,
            total_suspicious,
            failed_24h,
            suspicious_24h,
        ) = await gather_reads(
            self._engine,
            recent(failed),
            recent(suspicious),
            count(failed),
            count(suspicious),
            count(failed, Transaction.timestamp >= since),
            count(suspicious, Transaction.timestamp >= since),
        )

        return AlertsReport(
            failed_transactions=[
                format_admin_transaction(tx, email, wallet, name, fallback_name="Unknown")
                for tx, email, wallet, name in failed_rows
            ],
            suspicious_transactions=[
                SuspiciousTransaction(
                    **_transaction_row(tx, email, wallet, name, fallback_name="Unknown"),
                    suspicious_reason=self.reason_for(tx) or "",
                )
                for tx, email, wallet, name in suspicious_rows
            ],
            summary=AlertsSummary(
                total_failed=total_failed,
                total_suspicious=total_suspicious,
                failed_last_24h=failed_24h,
                suspicious_last_24h=suspicious_24h,
            ),
        )

    async def platform_stats(self) -> PlatformStats:
        """Headline counters for the admin dashboard."""

        def count(model, *clauses):
            def read(s: Session) -> int:
                return s.exec(select(func.count()).select_from(model).where(*clauses)).one()
            return read

        def volume(s: Session) -> float:
            return s.exec(select(func.coalesce(func.sum(Transaction.amount_out), 0))).one()

        (
            users,
            transactions,
            total_volume,
            active_subscriptions,
            premium_users,
            portfolios,
            watchlists,
            price_alerts,
        ) = await gather_reads(
            self._engine,
            count(User),
            count(Transaction),
            volume,
            count(Subscription, Subscription.status == SubscriptionStatus.ACTIVE.value),
            count(User, User.premium_tier != PremiumTier.FREE.value),
            count(Portfolio),
            count(Watchlist),
            count(PriceAlert),
        )
        return PlatformStats(
            total_users=users,
            total_transactions=transactions,
            total_transaction_volume=float(total_volume or 0),
            active_subscriptions=active_subscriptions,
            premium_users=premium_users,
            total_portfolios=portfolios,
            total_watchlists=watchlists,
            total_price_alerts=price_alerts,
        )

    async def recent_activity(self) -> ActivityFeed:
        """Latest transactions, sign-ups and subscriptions as one feed."""

        def transactions(s: Session):
            return s.exec(
                select(Transaction, User.email)
                .outerjoin(User, Transaction.user_id == User.id)
                .order_by(Transaction.timestamp.desc())
                .limit(ACTIVITY_PER_SOURCE)
            ).all()

        def users(s: Session):
            return s.exec(
                select(User).order_by(User.created_at.desc()).limit(ACTIVITY_PER_SOURCE)
            ).all()

        def subscriptions(s: Session):
            return s.exec(
                select(Subscription, User.email)
                .outerjoin(User, Subscription.user_id == User.id)
                .order_by(Subscription.created_at.desc())
                .limit(ACTIVITY_PER_SOURCE)
            ).all()

        tx_rows, user_rows, sub_rows = await gather_reads(
            self._engine, transactions, users, subscriptions
        )

        activities = [
            Activity(
                id=f"transaction-{tx.id}",
                type="transaction",
                timestamp=tx.timestamp,
                user_id=tx.user_id,
                user_email=email or "",
                details={
                    "txHash": tx.tx_hash,
                    "transactionType": tx.type,
                    "tokenIn": tx.token_in,
                    "tokenOut": tx.token_out,
                    "amountOut": tx.amount_out,
                    "status": tx.status,
                },
            )
            for tx, email in tx_rows
        ]
        activities += [
            Activity(
                id=f"user-{user.id}",
                type="new_user",
                timestamp=user.created_at,
                user_id=user.id,
                user_email=user.email,
                details={"email": user.email, "joinedAt": user.created_at},
            )
            for user in user_rows
        ]
        activities += [
            Activity(
                id=f"subscription-{sub.id}",
                type="new_subscription",
                timestamp=sub.created_at,
                user_id=sub.user_id,
                user_email=email or "",
                details={"plan": sub.plan, "status": sub.status},
            )
            for sub, email in sub_rows
        ]
        activities.sort(
            key=lambda a: parse_iso_datetime(a.timestamp) or datetime.min, reverse=True
        )
        return ActivityFeed(activities=activities[:ACTIVITY_LIMIT])
