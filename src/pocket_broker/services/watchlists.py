"""Named token watchlists."""
from sqlmodel import Session, select

from pocket_broker.db.models import Watchlist
from pocket_broker.errors import bad_request
from pocket_broker.query import LimitOffset
from pocket_broker.schemas import (WatchlistCreate, WatchlistRead,
                                   WatchlistUpdate)
from pocket_broker.services.utils.records import (blank, delete,
                                                  fetch_or_404, require_user,
                                                  save, to_int, touch)


def _get(session: Session, watchlist_id: int) -> Watchlist:
    return fetch_or_404(
        session, Watchlist, watchlist_id, "Watchlist not found", "WATCHLIST_NOT_FOUND"
    )


def _tokens(value) -> list:
    if not isinstance(value, list):
        raise bad_request("Tokens must be a valid JSON array", "INVALID_JSON")
    return list(value)


def _name(value) -> str:
    name = str(value).strip() if value is not None else ""
    if not name:
        raise bad_request("Name cannot be empty", "MISSING_REQUIRED_FIELDS")
    return name


def get_watchlist(session: Session, watchlist_id: int) -> WatchlistRead:
    return WatchlistRead.model_validate(_get(session, watchlist_id))


def list_watchlists(
    session: Session,
    page: LimitOffset,
    user_id: int | None = None,
    search: str | None = None,
) -> list[WatchlistRead]:
    """Newest first; ``search`` matches a substring of the name."""
    statement = select(Watchlist)
    if user_id is not None:
        statement = statement.where(Watchlist.user_id == user_id)
    if search:
        statement = statement.where(Watchlist.name.icontains(search, autoescape=True))
    rows = session.exec(
        statement.order_by(Watchlist.created_at.desc(), Watchlist.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    ).all()
    return [WatchlistRead.model_validate(row) for row in rows]


def create_watchlist(session: Session, body: WatchlistCreate) -> WatchlistRead:
    if blank(body.user_id):
        raise bad_request("User ID is required", "MISSING_REQUIRED_FIELDS")
    if body.name is None:
        raise bad_request("Name is required", "MISSING_REQUIRED_FIELDS")
    if body.tokens is None:
        raise bad_request("Tokens are required", "MISSING_REQUIRED_FIELDS")
    user_id = to_int(body.user_id, "Valid user ID is required", "INVALID_USER_ID")
    tokens = _tokens(body.tokens)
    name = _name(body.name)
    require_user(session, user_id)
    watchlist = Watchlist(user_id=user_id, name=name, tokens=tokens)
    return WatchlistRead.model_validate(save(session, watchlist))


def update_watchlist(session: Session, watchlist_id: int, body: WatchlistUpdate) -> WatchlistRead:
    watchlist = _get(session, watchlist_id)
    if body.provided("name"):
        watchlist.name = _name(body.name)
    if body.provided("tokens"):
        watchlist.tokens = _tokens(body.tokens)
    touch(watchlist)
    return WatchlistRead.model_validate(save(session, watchlist))


def delete_watchlist(session: Session, watchlist_id: int) -> WatchlistRead:
    return delete(session, _get(session, watchlist_id), WatchlistRead)
