"""Trading-user routes (``/api/users``)."""
from typing import Any

from fastapi import APIRouter, Query

from pocket_broker.deps import DbSession
from pocket_broker.query import parse_id, parse_limit_offset
from pocket_broker.schemas import UserCreate, UserRead, UserUpdate
from pocket_broker.services import users as service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserRead | list[UserRead])
def get_users(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
    wallet_address: str | None = Query(None, alias="walletAddress"),
    search: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
) -> UserRead | list[UserRead]:
    """One user by ``id`` or ``walletAddress``, otherwise a page of users."""
    if record_id is not None:
        return service.get_user(session, parse_id(record_id))
    if wallet_address:
        return service.get_user_by_wallet(session, wallet_address)
    return service.list_users(session, parse_limit_offset(limit, offset), search)


@router.post("", response_model=UserRead, status_code=201)
def create_user(body: UserCreate, session: DbSession) -> UserRead:
    return service.create_user(session, body)


@router.put("", response_model=UserRead)
def update_user(
    body: UserUpdate,
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> UserRead:
    return service.update_user(session, parse_id(record_id), body)


@router.delete("")
def delete_user(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    user = service.delete_user(session, parse_id(record_id))
    return {
        "message": "User deleted successfully",
        "user": user.model_dump(mode="json", by_alias=True),
    }
