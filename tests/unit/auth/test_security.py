from __future__ import annotations

from app.core.security import hash_password, is_strong_enough, verify_password


def test_password_hash_verifies_with_same_pepper_only():
    hashed = hash_password("s3cret-pass", pepper="pep")
    assert hashed.count("$") == 2
    assert verify_password("s3cret-pass", hashed, pepper="pep")
    assert not verify_password("s3cret-pass", hashed, pepper="other")
    assert not verify_password("wrong-pass", hashed, pepper="pep")


def test_hashes_are_salted():
    assert hash_password("same-password") != hash_password("same-password")


def test_malformed_hash_does_not_verify():
    assert not verify_password("anything", "not-a-hash")


def test_password_strength_requires_eight_characters():
    assert not is_strong_enough("short")
    assert not is_strong_enough("")
    assert is_strong_enough("longenough")
