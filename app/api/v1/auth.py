"""Auth endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise
from app.core.dependencies import get_db_session
from app.core.exceptions import AuthenticationError
from app.schemas.auth import (
    AuthProviderStatus,
    LoginRequest,
    RefreshRequest,
    SignUpRequest,
    TokenResponse,
    UserResponse,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

_SIGNUP_REJECTIONS = {"auth/email-already-in-use": status.HTTP_409_CONFLICT}


def _token_response(tokens) -> TokenResponse:
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
    )


@router.get("/providers", response_model=list[AuthProviderStatus])
def list_providers(db: Session = Depends(get_db_session)) -> list[AuthProviderStatus]:
    return [AuthProviderStatus(**item) for item in AuthService(db).providers()]


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignUpRequest, db: Session = Depends(get_db_session)) -> UserResponse:
    try:
        user = AuthService(db).sign_up(email=payload.email, password=payload.password, name=payload.name)
    except AuthenticationError as exc:
        code = _SIGNUP_REJECTIONS.get(exc.code, status.HTTP_400_BAD_REQUEST)
        raise HTTPException(status_code=code, detail={"code": exc.code, "message": str(exc)}) from exc
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db_session)) -> TokenResponse:
    try:
        _, tokens = AuthService(db).login(email=payload.email, password=payload.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": exc.code, "message": str(exc)},
        ) from exc
    return _token_response(tokens)


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db_session)) -> TokenResponse:
    try:
        tokens = AuthService(db).refresh(payload.refresh_token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return _token_response(tokens)


@router.get("/me", response_model=UserResponse)
def me(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> UserResponse:
    current = authorize_or_raise(authorization, scopes=[])
    user = AuthService(db).get_user(current.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User no longer exists.")
    return UserResponse.model_validate(user)
