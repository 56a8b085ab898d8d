"""Portfolio snapshots; token holdings are written as one JSON array."""
from sqlmodel import Session, select

from pocket_broker.db.models import Portfolio
from pocket_broker.errors import bad_request
from pocket_broker.query import LimitOffset
from pocket_broker.schemas import (PortfolioCreate, PortfolioRead,
                                   PortfolioUpdate)
from pocket_broker.services.utils.records import (blank, delete,
                                                  fetch_or_404,
                                                  optional_float,
                                                  optional_text,
                                                  require_user, save, to_int,
                                                  token_list, touch)


def _get(session: Session, portfolio_id: int) -> Portfolio:
    return fetch_or_404(
        session, Portfolio, portfolio_id, "Portfolio not found", "PORTFOLIO_NOT_FOUND"
    )


def get_portfolio(session: Session, portfolio_id: int) -> PortfolioRead:
    return PortfolioRead.model_validate(_get(session, portfolio_id))


def list_portfolios(
    session: Session,
    page: LimitOffset,
    user_id: int | None = None,
    wallet_address: str | None = None,
) -> list[PortfolioRead]:
    statement = select(Portfolio)
    if user_id is not None:
        statement = statement.where(Portfolio.user_id == user_id)
    if wallet_address:
        statement = statement.where(Portfolio.wallet_address == wallet_address)
    rows = session.exec(
        statement.order_by(Portfolio.id).limit(page.limit).offset(page.offset)
    ).all()
    return [PortfolioRead.model_validate(row) for row in rows]


def create_portfolio(session: Session, body: PortfolioCreate) -> PortfolioRead:
    if blank(body.user_id):
        raise bad_request("userId is required", "MISSING_REQUIRED_FIELDS")
    if blank(body.wallet_address):
        raise bad_request("walletAddress is required", "MISSING_REQUIRED_FIELDS")
    if body.tokens is None:
        raise bad_request("tokens is required", "MISSING_REQUIRED_FIELDS")
    user_id = to_int(body.user_id, "userId must be a valid integer", "INVALID_USER_ID")
    tokens = token_list(body.tokens)
    require_user(session, user_id)
    portfolio = Portfolio(
        user_id=user_id,
        wallet_address=str(body.wallet_address).strip(),
        tokens=tokens,
        total_value_usd=optional_float(
            body.total_value_usd, "totalValueUsd must be a valid number", "INVALID_VALUE"
        ),
        last_synced_at=optional_text(body.last_synced_at),
    )
    return PortfolioRead.model_validate(save(session, portfolio))


def update_portfolio(session: Session, portfolio_id: int, body: PortfolioUpdate) -> PortfolioRead:
    portfolio = _get(session, portfolio_id)
    if body.provided("wallet_address") and not blank(body.wallet_address):
        portfolio.wallet_address = str(body.wallet_address).strip()
    if body.provided("tokens"):
        # Reassign so the JSON column is flagged dirty.
        portfolio.tokens = list(token_list(body.tokens))
    if body.provided("total_value_usd"):
        portfolio.total_value_usd = optional_float(
            body.total_value_usd, "totalValueUsd must be a valid number", "INVALID_VALUE"
        )
    if body.provided("last_synced_at"):
        portfolio.last_synced_at = optional_text(body.last_synced_at)
    touch(portfolio)
    return PortfolioRead.model_validate(save(session, portfolio))


def delete_portfolio(session: Session, portfolio_id: int) -> PortfolioRead:
    return delete(
        session,
        _get(session, portfolio_id),
        PortfolioRead,
        in_use=("Portfolio still has transactions", "PORTFOLIO_HAS_DEPENDENTS"),
    )
