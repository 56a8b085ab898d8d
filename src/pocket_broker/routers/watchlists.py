"""Watchlist routes (``/api/watchlists``)."""
from typing import Any

from fastapi import APIRouter, Query

from pocket_broker.deps import DbSession
from pocket_broker.query import parse_id, parse_limit_offset, parse_optional_id
from pocket_broker.schemas import (WatchlistCreate, WatchlistRead,
                                   WatchlistUpdate)
from pocket_broker.services import watchlists as service

router = APIRouter(prefix="/api/watchlists", tags=["watchlists"])


@router.get("", response_model=WatchlistRead | list[WatchlistRead])
def get_watchlists(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
    user_id: str | None = Query(None, alias="userId"),
    search: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
) -> WatchlistRead | list[WatchlistRead]:
    if record_id is not None:
        return service.get_watchlist(session, parse_id(record_id))
    return service.list_watchlists(
        session,
        parse_limit_offset(limit, offset),
        user_id=parse_optional_id(user_id, error="Valid user ID is required", code="INVALID_USER_ID"),
        search=search,
    )


@router.post("", response_model=WatchlistRead, status_code=201)
def create_watchlist(body: WatchlistCreate, session: DbSession) -> WatchlistRead:
    return service.create_watchlist(session, body)


@router.put("", response_model=WatchlistRead)
def update_watchlist(
    body: WatchlistUpdate,
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> WatchlistRead:
    return service.update_watchlist(session, parse_id(record_id), body)


@router.delete("")
def delete_watchlist(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    watchlist = service.delete_watchlist(session, parse_id(record_id))
    return {
        "message": "Watchlist deleted successfully",
        "watchlist": watchlist.model_dump(mode="json", by_alias=True),
    }
