"""Shared authorization and error mapping helpers for API v1 route modules."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from app.auth.rbac import require_scopes
from app.core.config import get_config
from app.core.dependencies import CurrentUser, get_current_user
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    CRMException,
    DatabaseError,
    NotFoundError,
    StorageError,
    ValidationError,
)


def _extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header is required.")
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Authorization header must use Bearer token.")
    return parts[1].strip()


def authorize(authorization: str | None, scopes: list[str]) -> CurrentUser:
    token = _extract_bearer_token(authorization)
    user = get_current_user(token=token, settings=get_config())
    require_scopes(user.role, scopes)
    return user


def map_auth_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, AuthenticationError):
        return 401, str(exc)
    if isinstance(exc, AuthorizationError):
        return 403, str(exc)
    return 401, "Unauthorized."


def authorize_or_raise(authorization: str | None, scopes: list[str]) -> CurrentUser:
    try:
        return authorize(authorization=authorization, scopes=scopes)
    except (AuthenticationError, AuthorizationError) as exc:
        code, detail = map_auth_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc


_ERROR_STATUS: tuple[tuple[type[CRMException], int], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (DatabaseError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def map_service_error(exc: CRMException) -> tuple[int, str]:
    for error_type, code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return code, str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error."


@contextmanager
def service_errors() -> Iterator[None]:
    """Translate service-layer exceptions into HTTP errors."""
    try:
        yield
    except CRMException as exc:
        code, detail = map_service_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc


def not_found(entity: str, entity_id: object) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found: {entity_id}")
