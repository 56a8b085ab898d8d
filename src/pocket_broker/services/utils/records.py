"""Shared helpers for the entity CRUD services.

Bodies arrive loosely typed; these helpers coerce and validate individual
fields and raise a 400 ApiError with a field-specific code on bad input.
"""
import json
import logging
import math
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel

from pocket_broker.db.models import User
from pocket_broker.errors import (bad_request, conflict_from_integrity_error,
                                 not_found)
from pocket_broker.query import parse_int
from pocket_broker.utils import parse_iso_datetime, utc_iso

logger = logging.getLogger(__name__)

Row = TypeVar("Row", bound=SQLModel)
Read = TypeVar("Read", bound=BaseModel)


def blank(value: Any) -> bool:
    """Missing for required-field purposes: None, empty or whitespace-only text."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def require_fields(body: Any, message: str, *names: str) -> None:
    if any(blank(getattr(body, name)) for name in names):
        raise bad_request(message, "MISSING_REQUIRED_FIELDS")


def to_int(value: Any, error: str, code: str) -> int:
    """Integer from an int or integer-looking text; bools are rejected."""
    if isinstance(value, bool):
        raise bad_request(error, code)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    parsed = parse_int(value) if isinstance(value, str) else None
    if parsed is None:
        raise bad_request(error, code)
    return parsed


def to_float(value: Any, error: str, code: str) -> float:
    if isinstance(value, bool):
        raise bad_request(error, code)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise bad_request(error, code) from exc
    if not math.isfinite(number):
        raise bad_request(error, code)
    return number


def optional_float(value: Any, error: str, code: str) -> float | None:
    """None for null or empty input, otherwise a finite float."""
    if value is None or value == "":
        return None
    return to_float(value, error, code)


def optional_text(value: Any) -> str | None:
    """Trimmed text, or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_bool(value: Any, error: str, code: str) -> bool:
    if isinstance(value, bool):
        return value
    if value in ("true", "false"):
        return value == "true"
    raise bad_request(error, code)


def parse_bool_param(value: str | None) -> bool | None:
    """``true``/``false`` query flag; anything else means no filter."""
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def token_list(value: Any) -> list[Any]:
    """A JSON array, given either as a list or as JSON-encoded text."""
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError as exc:
            raise bad_request("tokens must be valid JSON", "INVALID_JSON") from exc
        if isinstance(parsed, list):
            return parsed
    raise bad_request("tokens must be a JSON array", "INVALID_JSON")


def iso_timestamp(value: Any, error: str, code: str) -> str:
    """Normalize an ISO date/datetime to the stored ``...Z`` form."""
    parsed = parse_iso_datetime(value) if isinstance(value, str) else None
    if parsed is None:
        raise bad_request(error, code)
    return utc_iso(parsed)


def one_of(value: Any, allowed: tuple[str, ...], error: str, code: str) -> str:
    if value not in allowed:
        raise bad_request(error, code)
    return value


def fetch_or_404(session: Session, model: type[Row], row_id: int, error: str, code: str) -> Row:
    row = session.get(model, row_id)
    if row is None:
        raise not_found(error, code)
    return row


def require_user(session: Session, user_id: int) -> User:
    """The referenced trading user; 400 when it does not exist."""
    user = session.get(User, user_id)
    if user is None:
        raise bad_request("User not found", "USER_NOT_FOUND")
    return user


def save(session: Session, row: Row) -> Row:
    """Insert or update one row; unique-key violations become 400 ApiErrors."""
    session.add(row)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        conflict = conflict_from_integrity_error(exc)
        if conflict is None:
            raise
        logger.info("Rejected %s write: %s", type(row).__name__, conflict.code)
        raise conflict from exc
    session.refresh(row)
    return row


def delete(
    session: Session,
    row: SQLModel,
    read_model: type[Read],
    *,
    in_use: tuple[str, str] | None = None,
) -> Read:
    """Delete one row without cascading; returns its last state as read_model.

    A row still referenced by child rows is refused by the foreign keys;
    with ``in_use`` given as (message, code) that becomes a 400 ApiError.
    """
    snapshot = read_model.model_validate(row)
    session.delete(row)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if in_use is None or "foreign key" not in str(exc.orig).lower():
            raise
        logger.info("Refused %s delete: %s", type(row).__name__, in_use[1])
        raise bad_request(*in_use) from exc
    return snapshot


def touch(row: SQLModel) -> None:
    row.updated_at = utc_iso()
