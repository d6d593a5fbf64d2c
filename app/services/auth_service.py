"""Password sign-up and sign-in issuing JWT token pairs."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from app.auth import errors as auth_errors
from app.auth.jwt import REFRESH_TOKEN, TokenPair, create_token_pair, decode_jwt
from app.core.config import Config, get_config
from app.core.exceptions import AuthenticationError
from app.core.security import hash_password, is_strong_enough, verify_password
from app.models import User, UserRole
from app.services.base_service import BaseService
from app.utils.dates import ensure_utc
from app.utils.validators import is_valid_email

logger = logging.getLogger(__name__)

PASSWORD_PROVIDER = "password"


def _fail(code: str) -> AuthenticationError:
    return AuthenticationError(auth_errors.describe_auth_error(code), code=code)


class AuthService(BaseService):
    """Service for user accounts and token issuance."""

    def __init__(self, db=None, settings: Config | None = None) -> None:
        super().__init__(db)
        self.settings = settings or get_config()

    def providers(self) -> list[dict]:
        configured = list(self.settings.AUTH_PROVIDERS)
        statuses = [{"provider": name, "enabled": True} for name in configured]
        if PASSWORD_PROVIDER not in configured:
            statuses.append({"provider": PASSWORD_PROVIDER, "enabled": False})
        return statuses

    def _require_password_provider(self) -> None:
        if PASSWORD_PROVIDER not in self.settings.AUTH_PROVIDERS:
            raise _fail(auth_errors.OPERATION_NOT_ALLOWED)

    def get_user(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def issue_tokens(self, user: User) -> TokenPair:
        return create_token_pair(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
            secret=self.settings.JWT_SECRET,
            permissions_version=self.settings.JWT_PERMISSIONS_VERSION,
            access_ttl_minutes=self.settings.JWT_ACCESS_TTL_MINUTES,
            refresh_ttl_days=self.settings.JWT_REFRESH_TTL_DAYS,
        )

    def sign_up(self, email: str, password: str, name: str, role: UserRole = UserRole.SALES) -> User:
        self._require_password_provider()
        if not is_valid_email(email):
            raise _fail(auth_errors.INVALID_EMAIL)
        if not is_strong_enough(password):
            raise _fail(auth_errors.WEAK_PASSWORD)
        if self.get_user_by_email(email) is not None:
            raise _fail(auth_errors.EMAIL_ALREADY_IN_USE)

        user = User(
            email=email.strip().lower(),
            name=name.strip(),
            role=role,
            password_hash=hash_password(password, pepper=self.settings.PASSWORD_PEPPER),
            auth_provider=PASSWORD_PROVIDER,
            is_active=True,
            failed_login_count=0,
        )
        user = self.save(user)
        logger.info("auth.signup.completed", extra={"event": "auth.signup.completed", "user_id": user.id})
        return user

    def login(self, email: str, password: str, now: datetime | None = None) -> tuple[User, TokenPair]:
        """Check credentials; repeated failures lock the account for a while."""
        self._require_password_provider()
        current = now or datetime.now(timezone.utc)
        user = self.get_user_by_email(email)
        if user is None:
            logger.info("auth.login.unknown_user", extra={"event": "auth.login.unknown_user"})
            raise _fail(auth_errors.USER_NOT_FOUND)
        if not user.is_active:
            raise _fail(auth_errors.USER_DISABLED)

        locked_until = ensure_utc(user.locked_until)
        if locked_until is not None and locked_until > current:
            raise _fail(auth_errors.TOO_MANY_REQUESTS)

        if not user.password_hash or not verify_password(password, user.password_hash, pepper=self.settings.PASSWORD_PEPPER):
            user.failed_login_count = (user.failed_login_count or 0) + 1
            code = auth_errors.WRONG_PASSWORD
            if user.failed_login_count >= self.settings.AUTH_MAX_FAILED_ATTEMPTS:
                user.locked_until = current + timedelta(minutes=self.settings.AUTH_LOCKOUT_MINUTES)
                user.failed_login_count = 0
                code = auth_errors.TOO_MANY_REQUESTS
                logger.warning("auth.login.locked", extra={"event": "auth.login.locked", "user_id": user.id})
            self.commit()
            raise _fail(code)

        user.failed_login_count = 0
        user.locked_until = None
        user.last_login_at = current
        self.commit()
        self.db.refresh(user)
        logger.info("auth.login.succeeded", extra={"event": "auth.login.succeeded", "user_id": user.id})
        return user, self.issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        claims = decode_jwt(refresh_token, secret=self.settings.JWT_SECRET)
        if claims.get("token_use") != REFRESH_TOKEN:
            raise AuthenticationError("Token is not a refresh token.")
        try:
            user_id = int(claims["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid auth claims.") from exc

        user = self.get_user(user_id)
        if user is None:
            raise _fail(auth_errors.USER_NOT_FOUND)
        if not user.is_active:
            raise _fail(auth_errors.USER_DISABLED)
        return self.issue_tokens(user)
