"""Session/role authentication for bearer session tokens.

A bearer token is an opaque session token, not a self-contained credential:
every check is a store round-trip (session by token, then auth user by id).

:func:`authenticate` and :func:`authorize_admin` return one of the typed
results below instead of raising, so the HTTP mapping lives in one place
(:func:`require_admin`, the dependency applied to the whole admin router).
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from fastapi import Request
from sqlmodel import Session, select

from pocket_broker.db.models import AuthSession, AuthUser, Role
from pocket_broker.deps import DbSession
from pocket_broker.errors import ApiError
from pocket_broker.utils import as_utc, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unauthenticated:
    """No token, or no session with that token."""

    token_present: bool = False


@dataclass(frozen=True)
class Expired:
    """Session found but its expiry has passed."""


@dataclass(frozen=True)
class UserNotFound:
    """Session found but its auth user row is gone."""


@dataclass(frozen=True)
class Forbidden:
    """Valid session whose user lacks the required role."""

    user: AuthUser


@dataclass(frozen=True)
class Authorized:
    user: AuthUser


AuthResult = Unauthenticated | Expired | UserNotFound | Forbidden | Authorized


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


def authenticate(
    session: Session, token: str | None, now: datetime | None = None
) -> AuthResult:
    """Resolve a session token to its auth user."""
    if token is None:
        return Unauthenticated()
    record = session.exec(select(AuthSession).where(AuthSession.token == token)).first()
    if record is None:
        return Unauthenticated(token_present=True)
    if as_utc(record.expires_at) <= as_utc(now or utcnow()):
        return Expired()
    user = session.get(AuthUser, record.user_id)
    if user is None:
        return UserNotFound()
    return Authorized(user)


def authorize_admin(
    session: Session, token: str | None, now: datetime | None = None
) -> AuthResult:
    """Like :func:`authenticate`, but non-admin users come back Forbidden."""
    result = authenticate(session, token, now)
    if isinstance(result, Authorized) and result.user.role != Role.ADMIN.value:
        return Forbidden(result.user)
    return result


def result_to_error(result: AuthResult) -> ApiError | None:
    """HTTP error for a failed result; None when authorized."""
    if isinstance(result, Authorized):
        return None
    if isinstance(result, Unauthenticated):
        if result.token_present:
            return ApiError(401, "Invalid or expired token", "INVALID_TOKEN")
        return ApiError(401, "Authentication required", "AUTH_REQUIRED")
    if isinstance(result, Expired):
        return ApiError(401, "Session expired", "SESSION_EXPIRED")
    if isinstance(result, UserNotFound):
        return ApiError(401, "User not found", "USER_NOT_FOUND")
    return ApiError(403, "Admin access required", "FORBIDDEN")


def require_admin(request: Request, session: DbSession) -> AuthUser:
    """FastAPI dependency: the authenticated admin, or a 401/403 ApiError."""
    token = bearer_token(request.headers.get("Authorization"))
    result = authorize_admin(session, token)
    error = result_to_error(result)
    if error is not None:
        logger.debug("Admin access denied on %s: %s", request.url.path, type(result).__name__)
        raise error
    return result.user

