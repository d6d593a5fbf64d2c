from __future__ import annotations

from datetime import timedelta

import pytest

from app.auth.jwt import create_token_pair, decode_jwt, encode_jwt
from app.auth.rbac import get_scopes_for_role, has_scopes, require_scopes
from app.core.exceptions import AuthenticationError, AuthorizationError


def test_jwt_roundtrip_contains_required_claims():
    tokens = create_token_pair(user_id=10, email="rep@example.com", role="sales", secret="test-secret")
    claims = decode_jwt(tokens.access_token, secret="test-secret")
    assert claims["sub"] == "10"
    assert claims["email"] == "rep@example.com"
    assert claims["role"] == "sales"
    assert claims["token_use"] == "access"
    assert "exp" in claims
    assert "iat" in claims
    assert "jti" in claims

    refresh_claims = decode_jwt(tokens.refresh_token, secret="test-secret")
    assert refresh_claims["token_use"] == "refresh"


def test_jwt_rejects_wrong_secret_and_expired_tokens():
    tokens = create_token_pair(user_id=1, email="a@example.com", role="admin", secret="one")
    with pytest.raises(AuthenticationError, match="signature"):
        decode_jwt(tokens.access_token, secret="two")

    expired = encode_jwt({"sub": "1"}, secret="one", ttl=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError, match="expired"):
        decode_jwt(expired, secret="one")


def test_jwt_rejects_malformed_token():
    with pytest.raises(AuthenticationError, match="format"):
        decode_jwt("not-a-token", secret="s")


def test_rbac_admin_has_every_scope():
    assert has_scopes("admin", ["products.write", "anything.at.all"])


def test_rbac_sales_cannot_manage_catalog():
    require_scopes("sales", ["deals.write", "products.read"])
    with pytest.raises(AuthorizationError, match="products.write"):
        require_scopes("sales", ["products.write"])


def test_rbac_manager_extends_sales():
    assert get_scopes_for_role("sales") < get_scopes_for_role("manager")
    assert has_scopes("manager", ["stages.write", "company.write"])


def test_rbac_unknown_role_has_no_scopes():
    assert get_scopes_for_role("viewer") == set()
    with pytest.raises(AuthorizationError):
        require_scopes("viewer", ["customers.read"])
