"""Portfolio routes (``/api/portfolios``)."""
from typing import Any

from fastapi import APIRouter, Query

from pocket_broker.deps import DbSession
from pocket_broker.query import parse_id, parse_limit_offset, parse_optional_id
from pocket_broker.schemas import (PortfolioCreate, PortfolioRead,
                                   PortfolioUpdate)
from pocket_broker.services import portfolios as service

router = APIRouter(prefix="/api/portfolios", tags=["portfolios"])


@router.get("", response_model=PortfolioRead | list[PortfolioRead])
def get_portfolios(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
    user_id: str | None = Query(None, alias="userId"),
    wallet_address: str | None = Query(None, alias="walletAddress"),
    limit: str | None = None,
    offset: str | None = None,
) -> PortfolioRead | list[PortfolioRead]:
    if record_id is not None:
        return service.get_portfolio(session, parse_id(record_id))
    return service.list_portfolios(
        session,
        parse_limit_offset(limit, offset),
        user_id=parse_optional_id(user_id, error="Valid userId is required", code="INVALID_USER_ID"),
        wallet_address=wallet_address,
    )


@router.post("", response_model=PortfolioRead, status_code=201)
def create_portfolio(body: PortfolioCreate, session: DbSession) -> PortfolioRead:
    return service.create_portfolio(session, body)


@router.put("", response_model=PortfolioRead)
def update_portfolio(
    body: PortfolioUpdate,
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> PortfolioRead:
    return service.update_portfolio(session, parse_id(record_id), body)


@router.delete("")
def delete_portfolio(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    portfolio = service.delete_portfolio(session, parse_id(record_id))
    return {
        "message": "Portfolio deleted successfully",
        "portfolio": portfolio.model_dump(mode="json", by_alias=True),
    }
