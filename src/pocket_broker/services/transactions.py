"""On-chain transaction records and their status lifecycle.

A transaction starts ``pending`` and may move once to ``confirmed`` or
``failed``. Re-sending the current status is accepted as a no-op; any other
change is rejected with INVALID_STATUS_TRANSITION.
"""
from sqlalchemy import or_
from sqlmodel import Session, select

from pocket_broker.db.models import (Portfolio, Transaction,
                                     TransactionStatus, TransactionType)
from pocket_broker.errors import bad_request, not_found
from pocket_broker.query import LimitOffset
from pocket_broker.schemas import (TransactionCreate, TransactionRead,
                                   TransactionUpdate)
from pocket_broker.services.utils.records import (blank, delete,
                                                  fetch_or_404, iso_timestamp,
                                                  one_of, optional_float,
                                                  optional_text,
                                                  require_fields,
                                                  require_user, save, to_int)

TYPES = tuple(t.value for t in TransactionType)
STATUSES = tuple(s.value for s in TransactionStatus)

_TYPE_ERROR = f"Invalid type. Must be one of: {', '.join(TYPES)}"
_STATUS_ERROR = f"Invalid status. Must be one of: {', '.join(STATUSES)}"

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    TransactionStatus.PENDING.value: frozenset(
        {TransactionStatus.CONFIRMED.value, TransactionStatus.FAILED.value}
    ),
    TransactionStatus.CONFIRMED.value: frozenset(),
    TransactionStatus.FAILED.value: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS.get(current, frozenset())


def _get(session: Session, transaction_id: int) -> Transaction:
    return fetch_or_404(
        session, Transaction, transaction_id, "Transaction not found", "TRANSACTION_NOT_FOUND"
    )


def _amount(value, field: str) -> float | None:
    return optional_float(value, f"{field} must be a valid number", "INVALID_AMOUNT")


def get_transaction(session: Session, transaction_id: int) -> TransactionRead:
    return TransactionRead.model_validate(_get(session, transaction_id))


def get_transaction_by_hash(session: Session, tx_hash: str) -> TransactionRead:
    tx = session.exec(select(Transaction).where(Transaction.tx_hash == tx_hash)).first()
    if tx is None:
        raise not_found("Transaction not found", "TRANSACTION_NOT_FOUND")
    return TransactionRead.model_validate(tx)


def list_transactions(
    session: Session,
    page: LimitOffset,
    *,
    user_id: int | None = None,
    portfolio_id: int | None = None,
    status: str | None = None,
    tx_type: str | None = None,
    search: str | None = None,
) -> list[TransactionRead]:
    """Newest first by event time; ``search`` matches tokenIn or tokenOut."""
    if status is not None:
        one_of(status, STATUSES, _STATUS_ERROR, "INVALID_STATUS")
    if tx_type is not None:
        one_of(tx_type, TYPES, _TYPE_ERROR, "INVALID_TYPE")
    statement = select(Transaction)
    if user_id is not None:
        statement = statement.where(Transaction.user_id == user_id)
    if portfolio_id is not None:
        statement = statement.where(Transaction.portfolio_id == portfolio_id)
    if status is not None:
        statement = statement.where(Transaction.status == status)
    if tx_type is not None:
        statement = statement.where(Transaction.type == tx_type)
    if search:
        statement = statement.where(
            or_(
                Transaction.token_in.icontains(search, autoescape=True),
                Transaction.token_out.icontains(search, autoescape=True),
            )
        )
    rows = session.exec(
        statement.order_by(Transaction.timestamp.desc(), Transaction.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    ).all()
    return [TransactionRead.model_validate(row) for row in rows]


def create_transaction(session: Session, body: TransactionCreate) -> TransactionRead:
    """Insert one transaction; a repeated txHash is a 400 DUPLICATE_TX_HASH."""
    require_fields(
        body,
        "Missing required fields: userId, portfolioId, txHash, type, timestamp",
        "user_id", "portfolio_id", "tx_hash", "type", "timestamp",
    )
    user_id = to_int(body.user_id, "userId must be a valid integer", "INVALID_USER_ID")
    portfolio_id = to_int(
        body.portfolio_id, "portfolioId must be a valid integer", "INVALID_PORTFOLIO_ID"
    )
    tx_type = one_of(body.type, TYPES, _TYPE_ERROR, "INVALID_TYPE")
    status = TransactionStatus.PENDING.value
    if not blank(body.status):
        status = one_of(body.status, STATUSES, _STATUS_ERROR, "INVALID_STATUS")
    timestamp = iso_timestamp(
        body.timestamp, "timestamp must be an ISO date string", "INVALID_TIMESTAMP"
    )

    require_user(session, user_id)
    if session.get(Portfolio, portfolio_id) is None:
        raise bad_request("Portfolio not found", "PORTFOLIO_NOT_FOUND")

    tx = Transaction(
        user_id=user_id,
        portfolio_id=portfolio_id,
        tx_hash=str(body.tx_hash).strip(),
        type=tx_type,
        token_in=optional_text(body.token_in),
        token_out=optional_text(body.token_out),
        amount_in=_amount(body.amount_in, "amountIn"),
        amount_out=_amount(body.amount_out, "amountOut"),
        gas_fee=_amount(body.gas_fee, "gasFee"),
        status=status,
        timestamp=timestamp,
    )
    return TransactionRead.model_validate(save(session, tx))


def update_transaction(
    session: Session, transaction_id: int, body: TransactionUpdate
) -> TransactionRead:
    if not blank(body.status):
        one_of(body.status, STATUSES, _STATUS_ERROR, "INVALID_STATUS")
    tx = _get(session, transaction_id)
    if body.provided("status") and not blank(body.status):
        if not can_transition(tx.status, body.status):
            raise bad_request(
                f"Cannot change status from {tx.status} to {body.status}",
                "INVALID_STATUS_TRANSITION",
            )
        tx.status = body.status
    if body.provided("token_in"):
        tx.token_in = optional_text(body.token_in)
    if body.provided("token_out"):
        tx.token_out = optional_text(body.token_out)
    if body.provided("amount_in"):
        tx.amount_in = _amount(body.amount_in, "amountIn")
    if body.provided("amount_out"):
        tx.amount_out = _amount(body.amount_out, "amountOut")
    if body.provided("gas_fee"):
        tx.gas_fee = _amount(body.gas_fee, "gasFee")
    return TransactionRead.model_validate(save(session, tx))


def delete_transaction(session: Session, transaction_id: int) -> TransactionRead:
    return delete(session, _get(session, transaction_id), TransactionRead)
