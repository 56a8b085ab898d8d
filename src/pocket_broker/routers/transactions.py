"""Transaction routes (``/api/transactions``)."""
from typing import Any

from fastapi import APIRouter, Query

from pocket_broker.deps import DbSession
from pocket_broker.query import parse_id, parse_limit_offset, parse_optional_id
from pocket_broker.schemas import (TransactionCreate, TransactionRead,
                                   TransactionUpdate)
from pocket_broker.services import transactions as service

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=TransactionRead | list[TransactionRead])
def get_transactions(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
    tx_hash: str | None = Query(None, alias="txHash"),
    user_id: str | None = Query(None, alias="userId"),
    portfolio_id: str | None = Query(None, alias="portfolioId"),
    status: str | None = None,
    tx_type: str | None = Query(None, alias="type"),
    search: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
) -> TransactionRead | list[TransactionRead]:
    """One transaction by ``id`` or ``txHash``, otherwise a filtered page, newest first."""
    if record_id is not None:
        return service.get_transaction(session, parse_id(record_id))
    if tx_hash:
        return service.get_transaction_by_hash(session, tx_hash)
    return service.list_transactions(
        session,
        parse_limit_offset(limit, offset),
        user_id=parse_optional_id(user_id, error="Valid userId is required", code="INVALID_USER_ID"),
        portfolio_id=parse_optional_id(
            portfolio_id, error="Valid portfolioId is required", code="INVALID_PORTFOLIO_ID"
        ),
        status=status or None,
        tx_type=tx_type or None,
        search=search,
    )


@router.post("", response_model=TransactionRead, status_code=201)
def create_transaction(body: TransactionCreate, session: DbSession) -> TransactionRead:
    return service.create_transaction(session, body)


@router.put("", response_model=TransactionRead)
def update_transaction(
    body: TransactionUpdate,
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> TransactionRead:
    return service.update_transaction(session, parse_id(record_id), body)


@router.delete("")
def delete_transaction(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    transaction = service.delete_transaction(session, parse_id(record_id))
    return {
        "message": "Transaction deleted successfully",
        "transaction": transaction.model_dump(mode="json", by_alias=True),
    }
