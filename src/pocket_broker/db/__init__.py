"""Database package: models and session management."""
from pocket_broker.db.models import (Account, AuthSession, AuthUser, Portfolio,
                                     PriceAlert, Subscription, Transaction,
                                     User, Verification, Watchlist)

__all__ = [
    "Account",
    "AuthSession",
    "AuthUser",
    "Portfolio",
    "PriceAlert",
    "Subscription",
    "Transaction",
    "User",
    "Verification",
    "Watchlist",
]
