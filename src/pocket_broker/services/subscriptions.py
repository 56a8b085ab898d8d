"""Billing subscriptions mirrored from Stripe."""
from sqlmodel import Session, select

from pocket_broker.db.models import (Subscription, SubscriptionPlan,
                                     SubscriptionStatus)
from pocket_broker.errors import not_found
from pocket_broker.query import LimitOffset
from pocket_broker.schemas import (SubscriptionCreate, SubscriptionRead,
                                   SubscriptionUpdate)
from pocket_broker.services.utils.records import (blank, delete,
                                                  fetch_or_404, one_of,
                                                  require_fields,
                                                  require_user, save, to_int,
                                                  touch)

PLANS = tuple(p.value for p in SubscriptionPlan)
STATUSES = tuple(s.value for s in SubscriptionStatus)
_PLAN_ERROR = f"Invalid plan. Must be one of: {', '.join(PLANS)}"
_STATUS_ERROR = f"Invalid status. Must be one of: {', '.join(STATUSES)}"


def _get(session: Session, subscription_id: int) -> Subscription:
    return fetch_or_404(
        session, Subscription, subscription_id, "Subscription not found", "SUBSCRIPTION_NOT_FOUND"
    )


def get_subscription(session: Session, subscription_id: int) -> SubscriptionRead:
    return SubscriptionRead.model_validate(_get(session, subscription_id))


def get_subscription_by_stripe(
    session: Session,
    *,
    customer_id: str | None = None,
    subscription_id: str | None = None,
) -> SubscriptionRead:
    """Look up by Stripe customer id or Stripe subscription id."""
    statement = select(Subscription)
    if customer_id is not None:
        statement = statement.where(Subscription.stripe_customer_id == customer_id)
    else:
        statement = statement.where(Subscription.stripe_subscription_id == subscription_id)
    row = session.exec(statement).first()
    if row is None:
        raise not_found("Subscription not found", "SUBSCRIPTION_NOT_FOUND")
    return SubscriptionRead.model_validate(row)


def list_subscriptions(
    session: Session,
    page: LimitOffset,
    *,
    user_id: int | None = None,
    status: str | None = None,
    plan: str | None = None,
) -> list[SubscriptionRead]:
    statement = select(Subscription)
    if user_id is not None:
        statement = statement.where(Subscription.user_id == user_id)
    if status:
        statement = statement.where(Subscription.status == status)
    if plan:
        statement = statement.where(Subscription.plan == plan)
    rows = session.exec(
        statement.order_by(Subscription.id).limit(page.limit).offset(page.offset)
    ).all()
    return [SubscriptionRead.model_validate(row) for row in rows]


def create_subscription(session: Session, body: SubscriptionCreate) -> SubscriptionRead:
    require_fields(
        body,
        "Missing required fields: userId, stripeCustomerId, stripeSubscriptionId, plan, currentPeriodEnd",
        "user_id", "stripe_customer_id", "stripe_subscription_id", "plan", "current_period_end",
    )
    user_id = to_int(body.user_id, "userId must be a valid integer", "INVALID_USER_ID")
    plan = one_of(body.plan, PLANS, _PLAN_ERROR, "INVALID_PLAN")
    status = SubscriptionStatus.ACTIVE.value
    if not blank(body.status):
        status = one_of(body.status, STATUSES, _STATUS_ERROR, "INVALID_STATUS")
    require_user(session, user_id)
    subscription = Subscription(
        user_id=user_id,
        stripe_customer_id=str(body.stripe_customer_id).strip(),
        stripe_subscription_id=str(body.stripe_subscription_id).strip(),
        plan=plan,
        status=status,
        current_period_end=str(body.current_period_end),
    )
    return SubscriptionRead.model_validate(save(session, subscription))


def update_subscription(
    session: Session, subscription_id: int, body: SubscriptionUpdate
) -> SubscriptionRead:
    if not blank(body.plan):
        one_of(body.plan, PLANS, _PLAN_ERROR, "INVALID_PLAN")
    if not blank(body.status):
        one_of(body.status, STATUSES, _STATUS_ERROR, "INVALID_STATUS")
    subscription = _get(session, subscription_id)
    if not blank(body.plan):
        subscription.plan = body.plan
    if not blank(body.status):
        subscription.status = body.status
    if not blank(body.current_period_end):
        subscription.current_period_end = str(body.current_period_end)
    touch(subscription)
    return SubscriptionRead.model_validate(save(session, subscription))


def delete_subscription(session: Session, subscription_id: int) -> SubscriptionRead:
    return delete(session, _get(session, subscription_id), SubscriptionRead)
