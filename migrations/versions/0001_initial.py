"""Initial schema: trading tables and auth-provider tables.

Revision ID: 0001_initial
Revises:
Create Date: 2025-01-06 00:00:00
"""
from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_STR = sqlmodel.sql.sqltypes.AutoString()


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", _STR, primary_key=True),
        sa.Column("name", _STR, nullable=False),
        sa.Column("email", _STR, nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("image", _STR, nullable=True),
        sa.Column("role", _STR, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "session",
        sa.Column("id", _STR, primary_key=True),
        sa.Column("token", _STR, nullable=False),
        sa.Column("user_id", _STR, sa.ForeignKey("user.id"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", _STR, nullable=True),
        sa.Column("user_agent", _STR, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_session_token", "session", ["token"], unique=True)
    op.create_index("ix_session_user_id", "session", ["user_id"])

    op.create_table(
        "account",
        sa.Column("id", _STR, primary_key=True),
        sa.Column("account_id", _STR, nullable=False),
        sa.Column("provider_id", _STR, nullable=False),
        sa.Column("user_id", _STR, sa.ForeignKey("user.id"), nullable=False),
        sa.Column("access_token", _STR, nullable=True),
        sa.Column("refresh_token", _STR, nullable=True),
        sa.Column("id_token", _STR, nullable=True),
        sa.Column("access_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refresh_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scope", _STR, nullable=True),
        sa.Column("password", _STR, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_account_user_id", "account", ["user_id"])

    op.create_table(
        "verification",
        sa.Column("id", _STR, primary_key=True),
        sa.Column("identifier", _STR, nullable=False),
        sa.Column("value", _STR, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", _STR, nullable=False),
        sa.Column("wallet_address", _STR, nullable=True, unique=True),
        sa.Column("premium_tier", _STR, nullable=False),
        sa.Column("premium_expires_at", _STR, nullable=True),
        sa.Column("created_at", _STR, nullable=False),
        sa.Column("updated_at", _STR, nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "portfolios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("wallet_address", _STR, nullable=False),
        sa.Column("tokens", sa.JSON(), nullable=False),
        sa.Column("total_value_usd", sa.Float(), nullable=True),
        sa.Column("last_synced_at", _STR, nullable=True),
        sa.Column("created_at", _STR, nullable=False),
        sa.Column("updated_at", _STR, nullable=False),
    )
    op.create_index("ix_portfolios_user_id", "portfolios", ["user_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("portfolio_id", sa.Integer(), sa.ForeignKey("portfolios.id"), nullable=False),
        sa.Column("tx_hash", _STR, nullable=False, unique=True),
        sa.Column("type", _STR, nullable=False),
        sa.Column("token_in", _STR, nullable=True),
        sa.Column("token_out", _STR, nullable=True),
        sa.Column("amount_in", sa.Float(), nullable=True),
        sa.Column("amount_out", sa.Float(), nullable=True),
        sa.Column("gas_fee", sa.Float(), nullable=True),
        sa.Column("status", _STR, nullable=False),
        sa.Column("timestamp", _STR, nullable=False),
        sa.Column("created_at", _STR, nullable=False),
    )
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])
    op.create_index("ix_transactions_portfolio_id", "transactions", ["portfolio_id"])
    op.create_index("ix_transactions_status", "transactions", ["status"])
    op.create_index("ix_transactions_timestamp", "transactions", ["timestamp"])

    op.create_table(
        "watchlists",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", _STR, nullable=False),
        sa.Column("tokens", sa.JSON(), nullable=False),
        sa.Column("created_at", _STR, nullable=False),
        sa.Column("updated_at", _STR, nullable=False),
    )
    op.create_index("ix_watchlists_user_id", "watchlists", ["user_id"])

    op.create_table(
        "price_alerts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("token_symbol", _STR, nullable=False),
        sa.Column("token_address", _STR, nullable=False),
        sa.Column("condition", _STR, nullable=False),
        sa.Column("target_price", sa.Float(), nullable=False),
        sa.Column("current_price", sa.Float(), nullable=True),
        sa.Column("triggered", sa.Boolean(), nullable=False),
        sa.Column("notified", sa.Boolean(), nullable=False),
        sa.Column("created_at", _STR, nullable=False),
        sa.Column("updated_at", _STR, nullable=False),
    )
    op.create_index("ix_price_alerts_user_id", "price_alerts", ["user_id"])

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("stripe_customer_id", _STR, nullable=False, unique=True),
        sa.Column("stripe_subscription_id", _STR, nullable=False, unique=True),
        sa.Column("plan", _STR, nullable=False),
        sa.Column("status", _STR, nullable=False),
        sa.Column("current_period_end", _STR, nullable=False),
        sa.Column("created_at", _STR, nullable=False),
        sa.Column("updated_at", _STR, nullable=False),
    )
    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"])


def downgrade() -> None:
    for table in (
        "subscriptions",
        "price_alerts",
        "watchlists",
        "transactions",
        "portfolios",
        "users",
        "verification",
        "account",
        "session",
        "user",
    ):
        op.drop_table(table)
