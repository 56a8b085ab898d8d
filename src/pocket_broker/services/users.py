"""Trading-user records: lookup, listing and single-row writes."""
from sqlmodel import Session, select

from pocket_broker.db.models import PremiumTier, User
from pocket_broker.errors import bad_request, not_found
from pocket_broker.query import LimitOffset
from pocket_broker.schemas import UserCreate, UserRead, UserUpdate
from pocket_broker.services.utils.records import (blank, delete,
                                                  fetch_or_404, one_of,
                                                  optional_text, save, touch)

PREMIUM_TIERS = tuple(t.value for t in PremiumTier)
_TIER_ERROR = f"Premium tier must be one of: {', '.join(PREMIUM_TIERS)}"


def _get(session: Session, user_id: int) -> User:
    return fetch_or_404(session, User, user_id, "User not found", "USER_NOT_FOUND")


def get_user(session: Session, user_id: int) -> UserRead:
    return UserRead.model_validate(_get(session, user_id))


def get_user_by_wallet(session: Session, wallet_address: str) -> UserRead:
    user = session.exec(select(User).where(User.wallet_address == wallet_address)).first()
    if user is None:
        raise not_found("User not found", "USER_NOT_FOUND")
    return UserRead.model_validate(user)


def list_users(session: Session, page: LimitOffset, search: str | None = None) -> list[UserRead]:
    """Users by id; ``search`` is a case-insensitive substring of the email."""
    statement = select(User)
    if search:
        statement = statement.where(User.email.icontains(search, autoescape=True))
    rows = session.exec(statement.order_by(User.id).limit(page.limit).offset(page.offset)).all()
    return [UserRead.model_validate(row) for row in rows]


def create_user(session: Session, body: UserCreate) -> UserRead:
    if blank(body.email) or not isinstance(body.email, str):
        raise bad_request(
            "Email is required and must be a non-empty string", "MISSING_REQUIRED_FIELDS"
        )
    tier = PremiumTier.FREE.value
    if body.premium_tier:
        tier = one_of(body.premium_tier, PREMIUM_TIERS, _TIER_ERROR, "INVALID_PREMIUM_TIER")
    user = User(
        email=body.email.strip().lower(),
        wallet_address=optional_text(body.wallet_address),
        premium_tier=tier,
    )
    return UserRead.model_validate(save(session, user))


def update_user(session: Session, user_id: int, body: UserUpdate) -> UserRead:
    if body.premium_tier:
        one_of(body.premium_tier, PREMIUM_TIERS, _TIER_ERROR, "INVALID_PREMIUM_TIER")
    user = _get(session, user_id)
    if body.provided("email") and not blank(body.email):
        user.email = str(body.email).strip().lower()
    if body.provided("wallet_address"):
        user.wallet_address = optional_text(body.wallet_address)
    if body.provided("premium_tier") and body.premium_tier:
        user.premium_tier = body.premium_tier
    if body.provided("premium_expires_at"):
        user.premium_expires_at = optional_text(body.premium_expires_at)
    touch(user)
    return UserRead.model_validate(save(session, user))


def delete_user(session: Session, user_id: int) -> UserRead:
    """Remove a user that owns no portfolios, transactions or other child rows."""
    return delete(
        session,
        _get(session, user_id),
        UserRead,
        in_use=("User still has dependent records", "USER_HAS_DEPENDENTS"),
    )
