from __future__ import annotations

from app.auth.errors import (
    EMAIL_ALREADY_IN_USE,
    GENERIC_AUTH_MESSAGE,
    TOO_MANY_REQUESTS,
    USER_NOT_FOUND,
    WEAK_PASSWORD,
    WRONG_PASSWORD,
    describe_auth_error,
)


def test_known_codes_map_to_specific_messages():
    assert describe_auth_error(USER_NOT_FOUND) == "No account found with this email address."
    assert describe_auth_error(WRONG_PASSWORD) == "Incorrect password."
    assert describe_auth_error(TOO_MANY_REQUESTS).startswith("Too many failed attempts")
    assert describe_auth_error(EMAIL_ALREADY_IN_USE) == "An account with this email already exists."
    assert "8 characters" in describe_auth_error(WEAK_PASSWORD)


def test_unknown_or_missing_code_falls_back_to_generic_message():
    assert describe_auth_error("auth/network-request-failed") == GENERIC_AUTH_MESSAGE
    assert describe_auth_error(None) == GENERIC_AUTH_MESSAGE
