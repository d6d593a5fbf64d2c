from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from app.auth import errors as auth_errors
from app.auth.jwt import decode_jwt
from app.core.config import get_config
from app.core.exceptions import AuthenticationError
from app.models import UserRole
from app.services.auth_service import AuthService

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _service(session, **overrides):
    settings = dataclasses.replace(
        get_config(),
        JWT_SECRET="unit-test-secret",
        AUTH_MAX_FAILED_ATTEMPTS=3,
        AUTH_LOCKOUT_MINUTES=15,
        **overrides,
    )
    return AuthService(db=session, settings=settings)


def _code(excinfo) -> str:
    return excinfo.value.code


def test_sign_up_normalizes_email_and_hashes_password(session):
    service = _service(session)
    user = service.sign_up(" Rep@Example.com ", "correct-horse", "Sales Rep")

    assert user.email == "rep@example.com"
    assert user.role == UserRole.SALES
    assert user.password_hash and "correct-horse" not in user.password_hash


@pytest.mark.parametrize(
    ("email", "password", "code"),
    [
        ("not-an-email", "correct-horse", auth_errors.INVALID_EMAIL),
        ("rep@example.com", "short", auth_errors.WEAK_PASSWORD),
    ],
)
def test_sign_up_rejects_bad_input(session, email, password, code):
    with pytest.raises(AuthenticationError) as excinfo:
        _service(session).sign_up(email, password, "Rep")
    assert _code(excinfo) == code


def test_sign_up_rejects_duplicate_email(session):
    service = _service(session)
    service.sign_up("rep@example.com", "correct-horse", "Rep")
    with pytest.raises(AuthenticationError) as excinfo:
        service.sign_up("REP@example.com", "another-pass", "Rep Two")
    assert _code(excinfo) == auth_errors.EMAIL_ALREADY_IN_USE
    assert str(excinfo.value) == "An account with this email already exists."


def test_login_issues_tokens_with_role_claims(session):
    service = _service(session)
    service.sign_up("boss@example.com", "correct-horse", "Boss", role=UserRole.MANAGER)

    user, tokens = service.login("boss@example.com", "correct-horse", now=NOW)

    claims = decode_jwt(tokens.access_token, secret="unit-test-secret")
    assert claims["sub"] == str(user.id)
    assert claims["role"] == "manager"
    assert user.last_login_at is not None


def test_login_unknown_user_and_disabled_account(session):
    service = _service(session)
    with pytest.raises(AuthenticationError) as excinfo:
        service.login("ghost@example.com", "whatever1", now=NOW)
    assert _code(excinfo) == auth_errors.USER_NOT_FOUND

    user = service.sign_up("rep@example.com", "correct-horse", "Rep")
    user.is_active = False
    session.commit()
    with pytest.raises(AuthenticationError) as excinfo:
        service.login("rep@example.com", "correct-horse", now=NOW)
    assert _code(excinfo) == auth_errors.USER_DISABLED


def test_repeated_failures_lock_the_account(session):
    service = _service(session)
    service.sign_up("rep@example.com", "correct-horse", "Rep")

    for _ in range(2):
        with pytest.raises(AuthenticationError) as excinfo:
            service.login("rep@example.com", "wrong-pass", now=NOW)
        assert _code(excinfo) == auth_errors.WRONG_PASSWORD

    with pytest.raises(AuthenticationError) as excinfo:
        service.login("rep@example.com", "wrong-pass", now=NOW)
    assert _code(excinfo) == auth_errors.TOO_MANY_REQUESTS

    with pytest.raises(AuthenticationError) as excinfo:
        service.login("rep@example.com", "correct-horse", now=NOW + timedelta(minutes=5))
    assert _code(excinfo) == auth_errors.TOO_MANY_REQUESTS

    user, _ = service.login("rep@example.com", "correct-horse", now=NOW + timedelta(minutes=16))
    assert user.failed_login_count == 0
    assert user.locked_until is None


def test_password_provider_can_be_disabled(session):
    service = _service(session, AUTH_PROVIDERS=("google",))
    assert service.providers() == [
        {"provider": "google", "enabled": True},
        {"provider": "password", "enabled": False},
    ]
    with pytest.raises(AuthenticationError) as excinfo:
        service.sign_up("rep@example.com", "correct-horse", "Rep")
    assert _code(excinfo) == auth_errors.OPERATION_NOT_ALLOWED


def test_refresh_requires_refresh_token(session):
    service = _service(session)
    service.sign_up("rep@example.com", "correct-horse", "Rep")
    _, tokens = service.login("rep@example.com", "correct-horse", now=NOW)

    renewed = service.refresh(tokens.refresh_token)
    assert decode_jwt(renewed.access_token, secret="unit-test-secret")["token_use"] == "access"

    with pytest.raises(AuthenticationError, match="not a refresh token"):
        service.refresh(tokens.access_token)
