"""Price alert routes (``/api/price-alerts``)."""
from typing import Any

from fastapi import APIRouter, Query

from pocket_broker.deps import DbSession
from pocket_broker.query import parse_id, parse_limit_offset, parse_optional_id
from pocket_broker.schemas import (PriceAlertCreate, PriceAlertRead,
                                   PriceAlertUpdate)
from pocket_broker.services import price_alerts as service
from pocket_broker.services.utils.records import parse_bool_param

router = APIRouter(prefix="/api/price-alerts", tags=["price-alerts"])


@router.get("", response_model=PriceAlertRead | list[PriceAlertRead])
def get_price_alerts(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
    user_id: str | None = Query(None, alias="userId"),
    search: str | None = None,
    triggered: str | None = None,
    notified: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
) -> PriceAlertRead | list[PriceAlertRead]:
    if record_id is not None:
        return service.get_price_alert(session, parse_id(record_id))
    return service.list_price_alerts(
        session,
        parse_limit_offset(limit, offset),
        user_id=parse_optional_id(user_id, error="Valid userId is required", code="INVALID_USER_ID"),
        search=search,
        triggered=parse_bool_param(triggered),
        notified=parse_bool_param(notified),
    )


@router.post("", response_model=PriceAlertRead, status_code=201)
def create_price_alert(body: PriceAlertCreate, session: DbSession) -> PriceAlertRead:
    return service.create_price_alert(session, body)


@router.put("", response_model=PriceAlertRead)
def update_price_alert(
    body: PriceAlertUpdate,
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> PriceAlertRead:
    return service.update_price_alert(session, parse_id(record_id), body)


@router.delete("")
def delete_price_alert(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    alert = service.delete_price_alert(session, parse_id(record_id))
    return {
        "message": "Price alert deleted successfully",
        "alert": alert.model_dump(mode="json", by_alias=True),
    }
