"""Request bodies and row shapes for the entity CRUD endpoints.

Bodies are deliberately loose (``Any``): the services validate each field and
answer with a specific ``{error, code}`` instead of a generic schema error.
Use ``provided()`` to tell an omitted field from an explicit null.
"""
from typing import Any

from pocket_broker.schemas.base import CamelModel


class Body(CamelModel):
    """Base for request bodies."""

    def provided(self, name: str) -> bool:
        """True if the client sent the field (even as null)."""
        return name in self.model_fields_set


# ---- Rows ----


class UserRead(CamelModel):
    id: int
    email: str
    wallet_address: str | None = None
    premium_tier: str
    premium_expires_at: str | None = None
    created_at: str
    updated_at: str


class PortfolioRead(CamelModel):
    id: int
    user_id: int
    wallet_address: str
    tokens: list[Any]
    total_value_usd: float | None = None
    last_synced_at: str | None = None
    created_at: str
    updated_at: str


class TransactionRead(CamelModel):
    id: int
    user_id: int
    portfolio_id: int
    tx_hash: str
    type: str
    token_in: str | None = None
    token_out: str | None = None
    amount_in: float | None = None
    amount_out: float | None = None
    gas_fee: float | None = None
    status: str
    timestamp: str
    created_at: str


class WatchlistRead(CamelModel):
    id: int
    user_id: int
    name: str
    tokens: list[Any]
    created_at: str
    updated_at: str


class PriceAlertRead(CamelModel):
    id: int
    user_id: int
    token_symbol: str
    token_address: str
    condition: str
    target_price: float
    current_price: float | None = None
    triggered: bool
    notified: bool
    created_at: str
    updated_at: str


class SubscriptionRead(CamelModel):
    id: int
    user_id: int
    stripe_customer_id: str
    stripe_subscription_id: str
    plan: str
    status: str
    current_period_end: str
    created_at: str
    updated_at: str


# ---- Bodies ----


class UserCreate(Body):
    email: Any = None
    wallet_address: Any = None
    premium_tier: Any = None


class UserUpdate(Body):
    email: Any = None
    wallet_address: Any = None
    premium_tier: Any = None
    premium_expires_at: Any = None


class PortfolioCreate(Body):
    user_id: Any = None
    wallet_address: Any = None
    tokens: Any = None
    total_value_usd: Any = None
    last_synced_at: Any = None


class PortfolioUpdate(Body):
    wallet_address: Any = None
    tokens: Any = None
    total_value_usd: Any = None
    last_synced_at: Any = None


class TransactionCreate(Body):
    user_id: Any = None
    portfolio_id: Any = None
    tx_hash: Any = None
    type: Any = None
    timestamp: Any = None
    token_in: Any = None
    token_out: Any = None
    amount_in: Any = None
    amount_out: Any = None
    gas_fee: Any = None
    status: Any = None


class TransactionUpdate(Body):
    status: Any = None
    token_in: Any = None
    token_out: Any = None
    amount_in: Any = None
    amount_out: Any = None
    gas_fee: Any = None


class WatchlistCreate(Body):
    user_id: Any = None
    name: Any = None
    tokens: Any = None


class WatchlistUpdate(Body):
    name: Any = None
    tokens: Any = None


class PriceAlertCreate(Body):
    user_id: Any = None
    token_symbol: Any = None
    token_address: Any = None
    condition: Any = None
    target_price: Any = None
    current_price: Any = None


class PriceAlertUpdate(Body):
    token_symbol: Any = None
    token_address: Any = None
    condition: Any = None
    target_price: Any = None
    current_price: Any = None
    triggered: Any = None
    notified: Any = None


class SubscriptionCreate(Body):
    user_id: Any = None
    stripe_customer_id: Any = None
    stripe_subscription_id: Any = None
    plan: Any = None
    status: Any = None
    current_period_end: Any = None


class SubscriptionUpdate(Body):
    plan: Any = None
    status: Any = None
    current_period_end: Any = None
