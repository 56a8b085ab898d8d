"""Database models for PocketBroker.

Two families of tables live side by side:

- trading-domain tables (users, portfolios, transactions, watchlists,
  price_alerts, subscriptions) whose timestamps are ISO-8601 UTC strings;
- auth-provider tables (user, session, account, verification) owned by the
  external authentication provider, with timezone-aware DateTime timestamps.

A trading ``User`` and an ``AuthUser`` describe the same person only through a
matching email; nothing enforces the link.
"""
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from pocket_broker.utils import utc_iso, utcnow

# Auth timestamps are stored and compared as aware UTC datetimes.
AwareDateTime = DateTime(timezone=True)


class PremiumTier(str, Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class TransactionType(str, Enum):
    SWAP = "swap"
    SEND = "send"
    RECEIVE = "receive"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class AlertCondition(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class SubscriptionPlan(str, Enum):
    PRO = "pro"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    PAST_DUE = "past_due"


# ---- Trading domain ----


class User(SQLModel, table=True):
    """Trading account; created on registration, updated on tier change."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    wallet_address: str | None = Field(default=None, unique=True)
    premium_tier: str = Field(default=PremiumTier.FREE.value)
    premium_expires_at: str | None = None
    created_at: str = Field(default_factory=utc_iso)
    updated_at: str = Field(default_factory=utc_iso)


class Portfolio(SQLModel, table=True):
    """Wallet snapshot; token holdings are stored as one JSON array."""

    __tablename__ = "portfolios"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    wallet_address: str
    tokens: list[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    total_value_usd: float | None = None
    last_synced_at: str | None = None
    created_at: str = Field(default_factory=utc_iso)
    updated_at: str = Field(default_factory=utc_iso)


class Transaction(SQLModel, table=True):
    """On-chain transaction record. tx_hash is globally unique."""

    __tablename__ = "transactions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    portfolio_id: int = Field(foreign_key="portfolios.id", index=True)
    tx_hash: str = Field(unique=True)
    type: str
    token_in: str | None = None
    token_out: str | None = None
    amount_in: float | None = None
    amount_out: float | None = None
    gas_fee: float | None = None
    status: str = Field(default=TransactionStatus.PENDING.value, index=True)
    timestamp: str = Field(index=True)  # event time
    created_at: str = Field(default_factory=utc_iso)


class Watchlist(SQLModel, table=True):
    """Named list of tokens a user follows."""

    __tablename__ = "watchlists"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    name: str
    tokens: list[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: str = Field(default_factory=utc_iso)
    updated_at: str = Field(default_factory=utc_iso)


class PriceAlert(SQLModel, table=True):
    """Price threshold alert for a token."""

    __tablename__ = "price_alerts"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    token_symbol: str
    token_address: str
    condition: str  # above | below
    target_price: float
    current_price: float | None = None
    triggered: bool = False
    notified: bool = False
    created_at: str = Field(default_factory=utc_iso)
    updated_at: str = Field(default_factory=utc_iso)


class Subscription(SQLModel, table=True):
    """Billing subscription mirrored from Stripe."""

    __tablename__ = "subscriptions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    stripe_customer_id: str = Field(unique=True)
    stripe_subscription_id: str = Field(unique=True)
    plan: str
    status: str = Field(default=SubscriptionStatus.ACTIVE.value)
    current_period_end: str
    created_at: str = Field(default_factory=utc_iso)
    updated_at: str = Field(default_factory=utc_iso)


# ---- Auth provider ----


class AuthUser(SQLModel, table=True):
    """Identity record of the authentication provider."""

    __tablename__ = "user"

    id: str = Field(primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    email_verified: bool = False
    image: str | None = None
    role: str = Field(default=Role.USER.value)
    created_at: datetime = Field(default_factory=utcnow, sa_type=AwareDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=AwareDateTime)


class AuthSession(SQLModel, table=True):
    """Server-side session; valid only while expires_at is in the future."""

    __tablename__ = "session"

    id: str = Field(primary_key=True)
    token: str = Field(unique=True, index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    expires_at: datetime = Field(sa_type=AwareDateTime)
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=AwareDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=AwareDateTime)


class Account(SQLModel, table=True):
    """Linked credential or OAuth account of an auth user."""

    __tablename__ = "account"

    id: str = Field(primary_key=True)
    account_id: str
    provider_id: str
    user_id: str = Field(foreign_key="user.id", index=True)
    access_token: str | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    access_token_expires_at: datetime | None = Field(default=None, sa_type=AwareDateTime)
    refresh_token_expires_at: datetime | None = Field(default=None, sa_type=AwareDateTime)
    scope: str | None = None
    password: str | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=AwareDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=AwareDateTime)


class Verification(SQLModel, table=True):
    """Email verification / reset token issued by the auth provider."""

    __tablename__ = "verification"

    id: str = Field(primary_key=True)
    identifier: str
    value: str
    expires_at: datetime = Field(sa_type=AwareDateTime)
    created_at: datetime | None = Field(default_factory=utcnow, sa_type=AwareDateTime)
    updated_at: datetime | None = Field(default_factory=utcnow, sa_type=AwareDateTime)
