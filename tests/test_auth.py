"""Session/role authentication and the admin gate."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text
from sqlmodel import Session, create_engine

from conftest import ADMIN_TOKEN, USER_TOKEN, add_auth_user
from pocket_broker.auth import (Authorized, Expired, Forbidden,
                                Unauthenticated, UserNotFound, authenticate,
                                authorize_admin, bearer_token,
                                result_to_error)
from pocket_broker.db.models import AuthSession
from pocket_broker.utils import utcnow

ADMIN_ENDPOINTS = [
    "/api/admin/stats",
    "/api/admin/analytics",
    "/api/admin/alerts",
    "/api/admin/recent-activity",
    "/api/admin/subscriptions",
    "/api/admin/users",
    "/api/admin/transactions",
    "/api/admin/users/list",
    "/api/admin/users-management",
    "/api/admin/transactions/list",
    "/api/admin/transactions-management",
]


class TestBearerToken:
    def test_extracts_token(self):
        assert bearer_token("Bearer abc123") == "abc123"

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "bearer abc"])
    def test_rejects_missing_or_other_schemes(self, header):
        assert bearer_token(header) is None


class TestAuthenticate:
    """Typed results of the session lookup."""

    def test_no_token(self, session: Session):
        assert authenticate(session, None) == Unauthenticated()

    def test_unknown_token(self, session: Session):
        assert authenticate(session, "nope") == Unauthenticated(token_present=True)

    def test_expired_session(self, session: Session):
        add_auth_user(session, "old", "old@example.com", token="stale",
                      expires_in=timedelta(minutes=-5))
        assert isinstance(authenticate(session, "stale"), Expired)

    def test_missing_auth_user(self, engine, database_url):
        # A store without foreign key enforcement can hold a session whose user is gone.
        loose = create_engine(database_url, connect_args={"check_same_thread": False})
        try:
            with Session(loose) as loose_session:
                loose_session.add(
                    AuthSession(id="orphan", token="orphan-token", user_id="ghost",
                                expires_at=utcnow() + timedelta(hours=1))
                )
                loose_session.commit()
                assert isinstance(authenticate(loose_session, "orphan-token"), UserNotFound)
        finally:
            loose.dispose()

    def test_naive_clock_is_compared_as_utc(self, session: Session):
        add_auth_user(session, "member", "member@example.com", token=USER_TOKEN,
                      expires_in=timedelta(hours=1))
        naive_now = datetime.now(timezone.utc).replace(tzinfo=None)
        assert isinstance(authenticate(session, USER_TOKEN, now=naive_now), Authorized)
        later = naive_now + timedelta(hours=2)
        assert isinstance(authenticate(session, USER_TOKEN, now=later), Expired)

    def test_authorized(self, session: Session):
        add_auth_user(session, "member", "member@example.com", token=USER_TOKEN)
        result = authenticate(session, USER_TOKEN)
        assert isinstance(result, Authorized)
        assert result.user.email == "member@example.com"

    def test_non_admin_is_forbidden(self, session: Session):
        add_auth_user(session, "member", "member@example.com", token=USER_TOKEN)
        assert isinstance(authorize_admin(session, USER_TOKEN), Forbidden)

    def test_admin_is_authorized(self, session: Session):
        add_auth_user(session, "admin", "admin@example.com", role="admin", token=ADMIN_TOKEN)
        assert isinstance(authorize_admin(session, ADMIN_TOKEN), Authorized)

    def test_error_mapping(self, session: Session):
        assert result_to_error(Unauthenticated()).code == "AUTH_REQUIRED"
        assert result_to_error(Unauthenticated(token_present=True)).code == "INVALID_TOKEN"
        assert result_to_error(Expired()).code == "SESSION_EXPIRED"
        assert result_to_error(UserNotFound()).code == "USER_NOT_FOUND"
        forbidden = result_to_error(Forbidden(user=None))
        assert (forbidden.status_code, forbidden.code) == (403, "FORBIDDEN")


class TestAdminGate:
    """Every admin endpoint goes through the same gate."""

    @pytest.mark.parametrize("path", ADMIN_ENDPOINTS)
    def test_non_admin_gets_403(self, client, user_headers, path):
        response = client.get(path, headers=user_headers)
        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required", "code": "FORBIDDEN"}

    @pytest.mark.parametrize("path", ADMIN_ENDPOINTS)
    def test_missing_header_gets_401(self, client, path):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_REQUIRED"

    def test_unknown_token_gets_401(self, client):
        response = client.get("/api/admin/stats", headers={"Authorization": "Bearer bogus"})
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

    def test_expired_session_gets_401(self, client, session):
        add_auth_user(session, "late", "late@example.com", role="admin", token="late-token",
                      expires_in=timedelta(seconds=-1))
        response = client.get("/api/admin/stats", headers={"Authorization": "Bearer late-token"})
        assert response.status_code == 401
        assert response.json()["code"] == "SESSION_EXPIRED"

    def test_admin_passes(self, client, admin_headers):
        response = client.get("/api/admin/stats", headers=admin_headers)
        assert response.status_code == 200


def insert_raw_session(engine, user_id: str, token: str, expires_at: str, role: str = "admin"):
    """Write auth rows the way an external auth service would, with naive timestamps."""
    with engine.begin() as connection:
        connection.execute(
            text(
                'INSERT INTO "user" (id, name, email, email_verified, role, created_at, updated_at) '
                "VALUES (:id, :name, :email, 0, :role, :stamp, :stamp)"
            ),
            {"id": user_id, "name": user_id.title(), "email": f"{user_id}@example.com",
             "role": role, "stamp": "2024-01-01 00:00:00"},
        )
        connection.execute(
            text(
                'INSERT INTO "session" (id, token, user_id, expires_at, created_at, updated_at) '
                "VALUES (:id, :token, :user_id, :expires_at, :stamp, :stamp)"
            ),
            {"id": f"session-{user_id}", "token": token, "user_id": user_id,
             "expires_at": expires_at, "stamp": "2024-01-01 00:00:00"},
        )


class TestExternallyWrittenSessions:
    """Rows stored without a UTC offset are read back as UTC."""

    def test_live_session_reaches_admin_routes(self, client, engine):
        insert_raw_session(engine, "ops", "ops-token", "2099-01-01 00:00:00")
        headers = {"Authorization": "Bearer ops-token"}
        assert client.get("/api/admin/stats", headers=headers).status_code == 200
        assert client.get("/api/admin/recent-activity", headers=headers).status_code == 200
        users = client.get("/api/admin/users/list", headers=headers)
        assert users.status_code == 200
        assert users.json()["users"][0]["createdAt"] == "2024-01-01T00:00:00.000Z"

    def test_past_session_is_expired(self, client, engine):
        insert_raw_session(engine, "gone", "gone-token", "2000-01-01 00:00:00")
        response = client.get("/api/admin/stats", headers={"Authorization": "Bearer gone-token"})
        assert response.status_code == 401
        assert response.json()["code"] == "SESSION_EXPIRED"

    def test_non_admin_row_is_forbidden(self, client, engine):
        insert_raw_session(engine, "viewer", "viewer-token", "2099-01-01 00:00:00", role="user")
        response = client.get("/api/admin/stats", headers={"Authorization": "Bearer viewer-token"})
        assert response.status_code == 403
