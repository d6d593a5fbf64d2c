"""Auth error codes and the user-facing messages shown for them."""

from __future__ import annotations

USER_NOT_FOUND = "auth/user-not-found"
WRONG_PASSWORD = "auth/wrong-password"
TOO_MANY_REQUESTS = "auth/too-many-requests"
USER_DISABLED = "auth/user-disabled"
EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
WEAK_PASSWORD = "auth/weak-password"
INVALID_EMAIL = "auth/invalid-email"
OPERATION_NOT_ALLOWED = "auth/operation-not-allowed"

GENERIC_AUTH_MESSAGE = "Failed to sign in. Please try again."

AUTH_ERROR_MESSAGES: dict[str, str] = {
    USER_NOT_FOUND: "No account found with this email address.",
    WRONG_PASSWORD: "Incorrect password.",
    TOO_MANY_REQUESTS: "Too many failed attempts. Please try again later.",
    USER_DISABLED: "This account has been disabled.",
    EMAIL_ALREADY_IN_USE: "An account with this email already exists.",
    WEAK_PASSWORD: "Password must be at least 8 characters.",
    INVALID_EMAIL: "Please enter a valid email address.",
    OPERATION_NOT_ALLOWED: "This sign-in method is not enabled.",
}


def describe_auth_error(code: str | None) -> str:
    """Map an auth error code to the message shown to the user."""
    if code is None:
        return GENERIC_AUTH_MESSAGE
    return AUTH_ERROR_MESSAGES.get(code, GENERIC_AUTH_MESSAGE)
