"""Session token and route guard tests."""

import asyncio
from datetime import timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import (
    ADMIN_LANDING,
    USER_LANDING,
    create_access_token,
    create_session_token,
    decode_token,
    get_current_session,
    landing_route,
    require_admin,
    require_portal_user,
)
from app.models.user import SessionUser


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def session(role, **fields):
    return SessionUser(name="Test", email=f"{role}@pstu.ac.bd", role=role, **fields)


class TestTokens:

    def test_round_trip(self):
        token = create_session_token(session("teacher", id="u1", department_id="d1"))
        payload = decode_token(token)
        assert payload["sub"] == "u1"
        assert payload["role"] == "teacher"
        assert payload["department_id"] == "d1"

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "u1", "role": "admin"}, expires_delta=timedelta(minutes=-1))
        assert decode_token(token) is None

    def test_tampered_token_rejected(self):
        token = create_session_token(session("admin"))
        assert decode_token(token[:-2] + "xx") is None


class TestLandingRoute:

    def test_admin(self):
        assert landing_route("admin") == ADMIN_LANDING

    def test_teacher_and_staff(self):
        assert landing_route("teacher") == USER_LANDING
        assert landing_route("staff") == USER_LANDING

    def test_other_roles(self):
        assert landing_route("student") is None
        assert landing_route("") is None


class TestGuards:

    def test_missing_credentials(self):
        with pytest.raises(AuthenticationError):
            asyncio.run(get_current_session(None))

    def test_invalid_token(self):
        with pytest.raises(AuthenticationError) as exc_info:
            asyncio.run(get_current_session(bearer("not-a-token")))
        assert exc_info.value.error_code == "INVALID_TOKEN"

    def test_session_from_token(self):
        token = create_session_token(session("staff", id="u2", office_id="o1"))
        current = asyncio.run(get_current_session(bearer(token)))
        assert current.role == "staff"
        assert current.office_id == "o1"

    def test_admin_guard(self):
        assert asyncio.run(require_admin(session("admin"))).role == "admin"
        with pytest.raises(AuthorizationError):
            asyncio.run(require_admin(session("teacher")))

    def test_portal_guard(self):
        assert asyncio.run(require_portal_user(session("teacher"))).role == "teacher"
        with pytest.raises(AuthorizationError):
            asyncio.run(require_portal_user(session("admin")))
