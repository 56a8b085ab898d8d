"""Typed predicates for transaction listings and the parser that builds them.

Query-string filters become a list of tagged predicates over a fixed column
set; :func:`to_clause` is the only place they turn into SQL, so no caller
interpolates user input into query text.
"""
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from pocket_broker.db.models import Transaction, TransactionStatus
from pocket_broker.errors import bad_request
from pocket_broker.query.pagination import (PageRequest, parse_int,
                                            parse_page_request)
from pocket_broker.utils import parse_iso_datetime, utc_iso


class Column(str, Enum):
    STATUS = "status"
    USER_ID = "user_id"
    TX_HASH = "tx_hash"
    TOKEN_IN = "token_in"
    TOKEN_OUT = "token_out"
    TIMESTAMP = "timestamp"
    AMOUNT_IN = "amount_in"
    AMOUNT_OUT = "amount_out"
    GAS_FEE = "gas_fee"


_COLUMNS = {
    Column.STATUS: Transaction.status,
    Column.USER_ID: Transaction.user_id,
    Column.TX_HASH: Transaction.tx_hash,
    Column.TOKEN_IN: Transaction.token_in,
    Column.TOKEN_OUT: Transaction.token_out,
    Column.TIMESTAMP: Transaction.timestamp,
    Column.AMOUNT_IN: Transaction.amount_in,
    Column.AMOUNT_OUT: Transaction.amount_out,
    Column.GAS_FEE: Transaction.gas_fee,
}

# Public sortBy value -> column.
SORT_FIELDS = {
    "timestamp": Column.TIMESTAMP,
    "amountIn": Column.AMOUNT_IN,
    "amountOut": Column.AMOUNT_OUT,
    "gasFee": Column.GAS_FEE,
}

STATUSES = tuple(s.value for s in TransactionStatus)


@dataclass(frozen=True)
class Equals:
    column: Column
    value: Any


@dataclass(frozen=True)
class Like:
    """Case-insensitive substring match on any of the columns."""

    columns: tuple[Column, ...]
    needle: str


@dataclass(frozen=True)
class Range:
    """Inclusive bounds; either side may be open."""

    column: Column
    lower: Any = None
    upper: Any = None


@dataclass(frozen=True)
class InSet:
    column: Column
    values: tuple[Any, ...]


Predicate = Equals | Like | Range | InSet


def column(col: Column):
    return _COLUMNS[col]


def to_clause(predicate: Predicate) -> ColumnElement[bool]:
    """Render one predicate as a SQLAlchemy boolean clause."""
    if isinstance(predicate, Equals):
        return column(predicate.column) == predicate.value
    if isinstance(predicate, Like):
        return or_(
            *(column(c).icontains(predicate.needle, autoescape=True) for c in predicate.columns)
        )
    if isinstance(predicate, Range):
        bounds = []
        if predicate.lower is not None:
            bounds.append(column(predicate.column) >= predicate.lower)
        if predicate.upper is not None:
            bounds.append(column(predicate.column) <= predicate.upper)
        return and_(*bounds)
    if isinstance(predicate, InSet):
        return column(predicate.column).in_(predicate.values)
    raise TypeError(f"Unknown predicate: {predicate!r}")


def where_clauses(predicates: Sequence[Predicate]) -> list[ColumnElement[bool]]:
    return [to_clause(p) for p in predicates]


@dataclass
class TransactionQuery:
    """Validated transaction-listing request.

    ``wallet_address`` is kept apart from ``predicates``: it has to be resolved
    to user ids against the users table before it can become an InSet.
    """

    page: PageRequest
    predicates: list[Predicate] = field(default_factory=list)
    wallet_address: str | None = None
    sort_column: Column = Column.TIMESTAMP
    descending: bool = True


def _date_bound(raw: str, error: str, code: str) -> str:
    parsed = parse_iso_datetime(raw)
    if parsed is None:
        raise bad_request(error, code)
    return utc_iso(parsed)


def parse_transaction_query(params: Mapping[str, str]) -> TransactionQuery:
    """Validate listing query params; raises a 400 ApiError on the first bad value."""
    page = parse_page_request(params)

    status = params.get("status") or None
    user_id_raw = params.get("userId") or None
    wallet_address = params.get("walletAddress") or None
    token_symbol = params.get("tokenSymbol") or None
    start_raw = params.get("startDate") or None
    end_raw = params.get("endDate") or None
    sort_by = params.get("sortBy") or "timestamp"
    sort_order = params.get("sortOrder") or "desc"
    search = params.get("search") or None

    if status is not None and status not in STATUSES:
        raise bad_request(
            "Invalid status. Must be one of: pending, confirmed, failed", "INVALID_STATUS"
        )
    if sort_by not in SORT_FIELDS:
        raise bad_request(
            f"Invalid sortBy field. Must be one of: {', '.join(SORT_FIELDS)}",
            "INVALID_SORT_FIELD",
        )
    if sort_order not in ("asc", "desc"):
        raise bad_request("Invalid sortOrder. Must be asc or desc", "INVALID_SORT_ORDER")

    start = end = None
    if start_raw is not None:
        start = _date_bound(start_raw, "Invalid startDate format. Use ISO date string", "INVALID_START_DATE")
    if end_raw is not None:
        end = _date_bound(end_raw, "Invalid endDate format. Use ISO date string", "INVALID_END_DATE")

    user_id = None
    if user_id_raw is not None:
        user_id = parse_int(user_id_raw)
        if user_id is None:
            raise bad_request("Invalid userId. Must be a valid integer", "INVALID_USER_ID")

    predicates: list[Predicate] = []
    if status is not None:
        predicates.append(Equals(Column.STATUS, status))
    if user_id is not None:
        predicates.append(Equals(Column.USER_ID, user_id))
    if token_symbol is not None:
        predicates.append(Like((Column.TOKEN_IN, Column.TOKEN_OUT), token_symbol))
    if start is not None or end is not None:
        predicates.append(Range(Column.TIMESTAMP, lower=start, upper=end))
    if search is not None:
        predicates.append(Like((Column.TX_HASH, Column.TOKEN_IN, Column.TOKEN_OUT), search))

    return TransactionQuery(
        page=page,
        predicates=predicates,
        wallet_address=wallet_address,
        sort_column=SORT_FIELDS[sort_by],
        descending=sort_order == "desc",
    )
