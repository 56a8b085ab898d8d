"""Subscription routes (``/api/subscriptions``)."""
from typing import Any

from fastapi import APIRouter, Query

from pocket_broker.deps import DbSession
from pocket_broker.query import parse_id, parse_limit_offset, parse_optional_id
from pocket_broker.schemas import (SubscriptionCreate, SubscriptionRead,
                                   SubscriptionUpdate)
from pocket_broker.services import subscriptions as service

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])


@router.get("", response_model=SubscriptionRead | list[SubscriptionRead])
def get_subscriptions(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
    stripe_customer_id: str | None = Query(None, alias="stripeCustomerId"),
    stripe_subscription_id: str | None = Query(None, alias="stripeSubscriptionId"),
    user_id: str | None = Query(None, alias="userId"),
    status: str | None = None,
    plan: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
) -> SubscriptionRead | list[SubscriptionRead]:
    """One subscription by ``id`` or a Stripe id, otherwise a filtered page."""
    if record_id is not None:
        return service.get_subscription(session, parse_id(record_id))
    if stripe_customer_id:
        return service.get_subscription_by_stripe(session, customer_id=stripe_customer_id)
    if stripe_subscription_id:
        return service.get_subscription_by_stripe(
            session, subscription_id=stripe_subscription_id
        )
    return service.list_subscriptions(
        session,
        parse_limit_offset(limit, offset),
        user_id=parse_optional_id(user_id, error="Valid userId is required", code="INVALID_USER_ID"),
        status=status,
        plan=plan,
    )


@router.post("", response_model=SubscriptionRead, status_code=201)
def create_subscription(body: SubscriptionCreate, session: DbSession) -> SubscriptionRead:
    return service.create_subscription(session, body)


@router.put("", response_model=SubscriptionRead)
def update_subscription(
    body: SubscriptionUpdate,
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> SubscriptionRead:
    return service.update_subscription(session, parse_id(record_id), body)


@router.delete("")
def delete_subscription(
    session: DbSession,
    record_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    subscription = service.delete_subscription(session, parse_id(record_id))
    return {
        "message": "Subscription deleted successfully",
        "subscription": subscription.model_dump(mode="json", by_alias=True),
    }
