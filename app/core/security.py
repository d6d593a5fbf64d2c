"""Security primitives for password workflows."""

from __future__ import annotations

import hashlib
import hmac
import secrets

PBKDF2_ITERATIONS = 240_000
MIN_PASSWORD_LENGTH = 8


def hash_password(password: str, pepper: str = "", salt: str | None = None) -> str:
    """Return a salted PBKDF2-SHA256 hash encoded as ``iterations$salt$digest``."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        f"{pepper}:{password}".encode("utf-8"),
        salt.encode("ascii"),
        PBKDF2_ITERATIONS,
    )
    return f"{PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, hashed_password: str, pepper: str = "") -> bool:
    """Constant-time comparison for hashed password values."""
    try:
        iterations, salt, expected = hashed_password.split("$", 2)
        rounds = int(iterations)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        f"{pepper}:{password}".encode("utf-8"),
        salt.encode("ascii"),
        rounds,
    )
    return hmac.compare_digest(digest.hex(), expected)


def is_strong_enough(password: str) -> bool:
    return len(password or "") >= MIN_PASSWORD_LENGTH
