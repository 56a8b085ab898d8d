"""Admin listings: filtered transaction and user pages plus simple pages.

Each listing runs its count and its page query concurrently through
:func:`gather_reads`. The transaction listing resolves a wallet filter to
user ids first and answers an empty page, without reading transactions,
when no user has that wallet.
"""
import logging
from collections.abc import Mapping

from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from pocket_broker.db.models import (AuthUser, PremiumTier, Role,
                                     Subscription, Transaction, User)
from pocket_broker.errors import bad_request
from pocket_broker.query import (Column, InSet, PageRequest, paginate,
                                 parse_page_number, parse_page_request,
                                 parse_transaction_query, where_clauses)
from pocket_broker.query.filters import column
from pocket_broker.schemas import (AdminSubscriptionRow, AdminUserRow,
                                   SimpleTransactionPage,
                                   SimpleTransactionRow, SimpleUserPage,
                                   SimpleUserRow, SubscriptionList,
                                   TransactionPage, UserPage)
from pocket_broker.schemas.admin import iso_or_none
from pocket_broker.services.analytics import format_admin_transaction
from pocket_broker.services.utils.fanout import gather_reads

logger = logging.getLogger(__name__)

ROLES = tuple(r.value for r in Role)
PREMIUM_TIERS = tuple(t.value for t in PremiumTier)
SIMPLE_PAGE_SIZE = 50


def _user_row(user_id, name, email, wallet, role, premium_tier, created_at, tx_count, volume):
    return AdminUserRow(
        id=user_id,
        name=name,
        email=email,
        wallet_address=wallet,
        role=role or Role.USER.value,
        premium_tier=premium_tier or PremiumTier.FREE.value,
        created_at=iso_or_none(created_at) or "",
        transaction_count=tx_count or 0,
        total_volume=float(volume or 0),
    )


class AdminService:
    """Paged, read-only listings for the admin dashboard."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    async def transactions(self, params: Mapping[str, str]) -> TransactionPage:
        """Filtered, sorted transaction page with each owner nested under ``user``."""
        query = parse_transaction_query(params)
        predicates = list(query.predicates)

        if query.wallet_address is not None:
            wallet = query.wallet_address

            def user_ids(s: Session) -> list[int]:
                return list(s.exec(select(User.id).where(User.wallet_address == wallet)).all())

            (ids,) = await gather_reads(self._engine, user_ids)
            if not ids:
                logger.debug("No user for wallet filter; returning empty page")
                return TransactionPage(transactions=[], pagination=paginate(query.page, 0))
            predicates.append(InSet(Column.USER_ID, tuple(ids)))

        clauses = where_clauses(predicates)
        sort = column(query.sort_column)
        if query.descending:
            order = (sort.desc(), Transaction.id.desc())
        else:
            order = (sort.asc(), Transaction.id.asc())
        page = query.page

        def count(s: Session) -> int:
            return s.exec(select(func.count()).select_from(Transaction).where(*clauses)).one()

        def rows(s: Session):
            return s.exec(
                select(Transaction, User.email, User.wallet_address, AuthUser.name)
                .outerjoin(User, Transaction.user_id == User.id)
                .outerjoin(AuthUser, AuthUser.email == User.email)
                .where(*clauses)
                .order_by(*order)
                .limit(page.limit)
                .offset(page.offset)
            ).all()

        total, found = await gather_reads(self._engine, count, rows)
        return TransactionPage(
            transactions=[
                format_admin_transaction(tx, email, wallet, name)
                for tx, email, wallet, name in found
            ],
            pagination=paginate(page, total),
        )

    async def users(self, params: Mapping[str, str]) -> UserPage:
        """Auth users joined to trading users by email, with transaction totals."""
        page = parse_page_request(params)
        role = params.get("role") or None
        tier = params.get("premiumTier") or None
        search = params.get("search") or None

        if role is not None and role not in ROLES:
            raise bad_request(
                'Invalid role filter. Must be "user" or "admin"', "INVALID_ROLE_FILTER"
            )
        if tier is not None and tier not in PREMIUM_TIERS:
            raise bad_request(
                'Invalid premium tier filter. Must be "free", "pro", or "enterprise"',
                "INVALID_PREMIUM_TIER_FILTER",
            )

        clauses = []
        if role is not None:
            clauses.append(AuthUser.role == role)
        if tier is not None:
            clauses.append(User.premium_tier == tier)
        if search is not None:
            clauses.append(
                or_(
                    AuthUser.email.icontains(search, autoescape=True),
                    User.wallet_address.icontains(search, autoescape=True),
                )
            )

        def count(s: Session) -> int:
            return s.exec(
                select(func.count(func.distinct(AuthUser.id)))
                .select_from(AuthUser)
                .outerjoin(User, AuthUser.email == User.email)
                .where(*clauses)
            ).one()

        def rows(s: Session):
            return s.exec(
                select(
                    AuthUser.id,
                    AuthUser.name,
                    AuthUser.email,
                    User.wallet_address,
                    AuthUser.role,
                    User.premium_tier,
                    AuthUser.created_at,
                    func.count(func.distinct(Transaction.id)),
                    func.coalesce(func.sum(Transaction.amount_out), 0),
                )
                .select_from(AuthUser)
                .outerjoin(User, AuthUser.email == User.email)
                .outerjoin(Transaction, Transaction.user_id == User.id)
                .where(*clauses)
                .group_by(
                    AuthUser.id,
                    AuthUser.name,
                    AuthUser.email,
                    User.wallet_address,
                    AuthUser.role,
                    User.premium_tier,
                    AuthUser.created_at,
                )
                .order_by(AuthUser.created_at.desc(), AuthUser.id)
                .limit(page.limit)
                .offset(page.offset)
            ).all()

        total, found = await gather_reads(self._engine, count, rows)
        return UserPage(
            users=[_user_row(*row) for row in found],
            pagination=paginate(page, total),
        )

    async def simple_users(self, raw_page: str | None) -> SimpleUserPage:
        """Trading users, newest first, in fixed pages of 50."""
        page = parse_page_number(raw_page, SIMPLE_PAGE_SIZE)

        def count(s: Session) -> int:
            return s.exec(select(func.count()).select_from(User)).one()

        def rows(s: Session):
            return s.exec(
                select(User)
                .order_by(User.created_at.desc(), User.id.desc())
                .limit(page.limit)
                .offset(page.offset)
            ).all()

        total, found = await gather_reads(self._engine, count, rows)
        return SimpleUserPage(
            users=[SimpleUserRow.model_validate(user) for user in found],
            pagination=paginate(page, total),
        )

    async def simple_transactions(self, raw_page: str | None) -> SimpleTransactionPage:
        """Transactions with the owner's email, newest first, in fixed pages of 50."""
        page: PageRequest = parse_page_number(raw_page, SIMPLE_PAGE_SIZE)

        def count(s: Session) -> int:
            return s.exec(select(func.count()).select_from(Transaction)).one()

        def rows(s: Session):
            return s.exec(
                select(Transaction, User.email)
                .outerjoin(User, Transaction.user_id == User.id)
                .order_by(Transaction.timestamp.desc(), Transaction.id.desc())
                .limit(page.limit)
                .offset(page.offset)
            ).all()

        total, found = await gather_reads(self._engine, count, rows)
        return SimpleTransactionPage(
            transactions=[
                SimpleTransactionRow(
                    id=tx.id,
                    user_id=tx.user_id,
                    user_email=email,
                    tx_hash=tx.tx_hash,
                    type=tx.type,
                    token_in=tx.token_in,
                    token_out=tx.token_out,
                    amount_in=tx.amount_in,
                    amount_out=tx.amount_out,
                    gas_fee=tx.gas_fee,
                    status=tx.status,
                    timestamp=tx.timestamp,
                )
                for tx, email in found
            ],
            pagination=paginate(page, total),
        )

    async def subscriptions(self) -> SubscriptionList:
        """Every subscription with its user's email, newest first."""

        def rows(s: Session):
            return s.exec(
                select(Subscription, User.email)
                .outerjoin(User, Subscription.user_id == User.id)
                .order_by(Subscription.created_at.desc(), Subscription.id.desc())
            ).all()

        (found,) = await gather_reads(self._engine, rows)
        return SubscriptionList(
            subscriptions=[
                AdminSubscriptionRow(
                    id=sub.id,
                    user_id=sub.user_id,
                    user_email=email,
                    plan=sub.plan,
                    status=sub.status,
                    current_period_end=sub.current_period_end,
                    created_at=sub.created_at,
                )
                for sub, email in found
            ],
            total=len(found),
        )
