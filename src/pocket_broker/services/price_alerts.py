"""Token price alerts."""
from sqlmodel import Session, select

from pocket_broker.db.models import AlertCondition, PriceAlert
from pocket_broker.errors import bad_request
from pocket_broker.query import LimitOffset
from pocket_broker.schemas import (PriceAlertCreate, PriceAlertRead,
                                   PriceAlertUpdate)
from pocket_broker.services.utils.records import (blank, delete,
                                                  fetch_or_404, one_of,
                                                  optional_float,
                                                  require_user, save,
                                                  to_bool, to_float, to_int,
                                                  touch)

CONDITIONS = tuple(c.value for c in AlertCondition)
_CONDITION_ERROR = 'condition must be either "above" or "below"'
_TARGET_ERROR = "targetPrice must be a valid number greater than 0"
_CURRENT_ERROR = "currentPrice must be a valid number"


def _get(session: Session, alert_id: int) -> PriceAlert:
    return fetch_or_404(session, PriceAlert, alert_id, "Price alert not found", "ALERT_NOT_FOUND")


def _target_price(value) -> float:
    price = to_float(value, _TARGET_ERROR, "INVALID_PRICE")
    if price <= 0:
        raise bad_request(_TARGET_ERROR, "INVALID_PRICE")
    return price


def get_price_alert(session: Session, alert_id: int) -> PriceAlertRead:
    return PriceAlertRead.model_validate(_get(session, alert_id))


def list_price_alerts(
    session: Session,
    page: LimitOffset,
    *,
    user_id: int | None = None,
    search: str | None = None,
    triggered: bool | None = None,
    notified: bool | None = None,
) -> list[PriceAlertRead]:
    """Newest first; ``search`` matches a substring of the token symbol."""
    statement = select(PriceAlert)
    if user_id is not None:
        statement = statement.where(PriceAlert.user_id == user_id)
    if search:
        statement = statement.where(PriceAlert.token_symbol.icontains(search, autoescape=True))
    if triggered is not None:
        statement = statement.where(PriceAlert.triggered == triggered)
    if notified is not None:
        statement = statement.where(PriceAlert.notified == notified)
    rows = session.exec(
        statement.order_by(PriceAlert.created_at.desc(), PriceAlert.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    ).all()
    return [PriceAlertRead.model_validate(row) for row in rows]


def create_price_alert(session: Session, body: PriceAlertCreate) -> PriceAlertRead:
    for field, label in (
        ("user_id", "userId"),
        ("token_symbol", "tokenSymbol"),
        ("token_address", "tokenAddress"),
        ("condition", "condition"),
        ("target_price", "targetPrice"),
    ):
        if blank(getattr(body, field)):
            raise bad_request(f"{label} is required", "MISSING_REQUIRED_FIELDS")
    user_id = to_int(body.user_id, "userId must be a valid integer", "INVALID_USER_ID")
    condition = one_of(body.condition, CONDITIONS, _CONDITION_ERROR, "INVALID_CONDITION")
    target_price = _target_price(body.target_price)
    current_price = optional_float(body.current_price, _CURRENT_ERROR, "INVALID_PRICE")
    require_user(session, user_id)
    alert = PriceAlert(
        user_id=user_id,
        token_symbol=str(body.token_symbol).strip(),
        token_address=str(body.token_address).strip(),
        condition=condition,
        target_price=target_price,
        current_price=current_price,
    )
    return PriceAlertRead.model_validate(save(session, alert))


def update_price_alert(session: Session, alert_id: int, body: PriceAlertUpdate) -> PriceAlertRead:
    alert = _get(session, alert_id)
    if body.provided("token_symbol") and not blank(body.token_symbol):
        alert.token_symbol = str(body.token_symbol).strip()
    if body.provided("token_address") and not blank(body.token_address):
        alert.token_address = str(body.token_address).strip()
    if body.provided("condition"):
        alert.condition = one_of(body.condition, CONDITIONS, _CONDITION_ERROR, "INVALID_CONDITION")
    if body.provided("target_price"):
        alert.target_price = _target_price(body.target_price)
    if body.provided("current_price"):
        alert.current_price = optional_float(body.current_price, _CURRENT_ERROR, "INVALID_PRICE")
    if body.provided("triggered"):
        alert.triggered = to_bool(body.triggered, "triggered must be a boolean", "INVALID_FLAG")
    if body.provided("notified"):
        alert.notified = to_bool(body.notified, "notified must be a boolean", "INVALID_FLAG")
    touch(alert)
    return PriceAlertRead.model_validate(save(session, alert))


def delete_price_alert(session: Session, alert_id: int) -> PriceAlertRead:
    return delete(session, _get(session, alert_id), PriceAlertRead)
