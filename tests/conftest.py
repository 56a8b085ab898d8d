"""Shared fixtures: an app on a temporary SQLite file and seed helpers."""
from datetime import timedelta
from itertools import count

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from pocket_broker.db.models import (AuthSession, AuthUser, Portfolio,
                                     Transaction, User)
from pocket_broker.db.sessions import create_db_engine, init_db
from pocket_broker.main import create_app
from pocket_broker.providers import CoinGeckoProvider
from pocket_broker.utils import utc_iso, utcnow

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"

_hashes = count(1)


def market_handler(request: httpx.Request) -> httpx.Response:
    """Canned CoinGecko responses keyed by path."""
    path = request.url.path
    if path.endswith("/global"):
        return httpx.Response(
            200,
            json={
                "data": {
                    "total_market_cap": {"usd": 2.5e12},
                    "total_volume": {"usd": 9.1e10},
                    "market_cap_percentage": {"btc": 52.3},
                    "markets": 1100,
                    "market_cap_change_percentage_24h_usd": -1.2,
                }
            },
        )
    if path.endswith("/search/trending"):
        coins = [
            {
                "item": {
                    "id": f"coin-{i}",
                    "symbol": f"C{i}",
                    "name": f"Coin {i}",
                    "market_cap_rank": i,
                    "small": f"https://img/{i}.png",
                    "data": {
                        "price": 1.5 * i,
                        "total_volume": 1000.0 * i,
                        "price_change_percentage_24h": {"usd": float(i)},
                    },
                }
            }
            for i in range(1, 9)
        ]
        coins[0]["item"]["data"] = {}
        return httpx.Response(200, json={"coins": coins})
    if path.endswith("/coins/markets"):
        changes = [5.0, -3.0, 12.5, -8.0, 0.5, 2.0, -1.0, 7.0, -15.0, 3.0, None]
        return httpx.Response(
            200,
            json=[
                {
                    "id": f"coin-{i}",
                    "symbol": f"c{i}",
                    "name": f"Coin {i}",
                    "current_price": 10.0 + i,
                    "price_change_percentage_24h": change,
                    "image": f"https://img/{i}.png",
                    "total_volume": 500.0,
                }
                for i, change in enumerate(changes)
            ],
        )
    return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def market_calls():
    """Records every upstream request path seen by the mock transport."""
    return []


@pytest.fixture
def market_provider(market_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        market_calls.append(request.url.path)
        return market_handler(request)

    return CoinGeckoProvider(transport=httpx.MockTransport(handler))


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'pocketbroker.db'}"


@pytest.fixture
def engine(database_url):
    engine = create_db_engine(database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(database_url, engine, market_provider):
    app = create_app(database_url=database_url, market_provider=market_provider)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session(engine):
    with Session(engine) as db_session:
        yield db_session


def add_auth_user(session: Session, user_id: str, email: str, role: str = "user",
                  token: str | None = None, expires_in: timedelta = timedelta(days=1),
                  name: str | None = None) -> AuthUser:
    user = AuthUser(id=user_id, name=name or user_id.title(), email=email, role=role)
    session.add(user)
    session.commit()
    if token is not None:
        session.add(
            AuthSession(
                id=f"session-{user_id}",
                token=token,
                user_id=user_id,
                expires_at=utcnow() + expires_in,
            )
        )
        session.commit()
    session.refresh(user)
    return user


def add_user(session: Session, email: str, wallet_address: str | None = None,
             premium_tier: str = "free", created_at: str | None = None) -> User:
    user = User(email=email, wallet_address=wallet_address, premium_tier=premium_tier)
    if created_at is not None:
        user.created_at = created_at
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def add_portfolio(session: Session, user: User) -> Portfolio:
    portfolio = Portfolio(user_id=user.id, wallet_address=user.wallet_address or "0xabc", tokens=[])
    session.add(portfolio)
    session.commit()
    session.refresh(portfolio)
    return portfolio


def add_transaction(session: Session, user: User, portfolio: Portfolio, *,
                    status: str = "confirmed", token_in: str | None = "ETH",
                    token_out: str | None = "USDC", amount_in: float | None = 1.0,
                    amount_out: float | None = 100.0, gas_fee: float | None = 1.0,
                    timestamp: str | None = None, tx_hash: str | None = None) -> Transaction:
    tx = Transaction(
        user_id=user.id,
        portfolio_id=portfolio.id,
        tx_hash=tx_hash or f"0xhash{next(_hashes)}",
        type="swap",
        token_in=token_in,
        token_out=token_out,
        amount_in=amount_in,
        amount_out=amount_out,
        gas_fee=gas_fee,
        status=status,
        timestamp=timestamp or utc_iso(),
    )
    session.add(tx)
    session.commit()
    session.refresh(tx)
    return tx


@pytest.fixture
def admin_headers(session):
    add_auth_user(session, "admin", "admin@example.com", role="admin", token=ADMIN_TOKEN,
                  name="Ada Admin")
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def user_headers(session):
    add_auth_user(session, "member", "member@example.com", token=USER_TOKEN)
    return {"Authorization": f"Bearer {USER_TOKEN}"}
