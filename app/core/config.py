"""Configuration module for the PipeDesk CRM application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from app.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_list(value: str | None, default: str) -> tuple[str, ...]:
    raw = value if value is not None else default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    JWT_SECRET: str
    JWT_ACCESS_TTL_MINUTES: int
    JWT_REFRESH_TTL_DAYS: int
    JWT_PERMISSIONS_VERSION: int
    PASSWORD_PEPPER: str
    AUTH_PROVIDERS: tuple[str, ...]
    AUTH_MAX_FAILED_ATTEMPTS: int
    AUTH_LOCKOUT_MINUTES: int
    STORAGE_DIR: str
    MAX_UPLOAD_BYTES: int
    INVOICE_TAX_RATE: float
    FORECAST_MONTHS: int
    API_HOST: str
    API_PORT: int
    API_PREFIX: str
    CORS_ORIGINS: tuple[str, ...]
    LOG_LEVEL: str
    LOG_FILE: str

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=(resolved_env != "production"))

    config = Config(
        APP_NAME="PipeDesk",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./pipedesk.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        JWT_SECRET=os.getenv("JWT_SECRET", "change_me_jwt_secret"),
        JWT_ACCESS_TTL_MINUTES=int(os.getenv("JWT_ACCESS_TTL_MINUTES", "15")),
        JWT_REFRESH_TTL_DAYS=int(os.getenv("JWT_REFRESH_TTL_DAYS", "14")),
        JWT_PERMISSIONS_VERSION=int(os.getenv("JWT_PERMISSIONS_VERSION", "1")),
        PASSWORD_PEPPER=os.getenv("PASSWORD_PEPPER", ""),
        AUTH_PROVIDERS=_as_list(os.getenv("AUTH_PROVIDERS"), default="password"),
        AUTH_MAX_FAILED_ATTEMPTS=int(os.getenv("AUTH_MAX_FAILED_ATTEMPTS", "5")),
        AUTH_LOCKOUT_MINUTES=int(os.getenv("AUTH_LOCKOUT_MINUTES", "15")),
        STORAGE_DIR=os.getenv("STORAGE_DIR", "./storage"),
        MAX_UPLOAD_BYTES=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
        INVOICE_TAX_RATE=float(os.getenv("INVOICE_TAX_RATE", "0")),
        FORECAST_MONTHS=int(os.getenv("FORECAST_MONTHS", "6")),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=int(os.getenv("API_PORT", "8000")),
        API_PREFIX=os.getenv("API_PREFIX", "/api/v1"),
        CORS_ORIGINS=_as_list(
            os.getenv("CORS_ORIGINS"), default="http://127.0.0.1:3000,http://localhost:3000"
        ),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", "pipedesk.log"),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.JWT_ACCESS_TTL_MINUTES < 1:
        raise ConfigurationError("JWT_ACCESS_TTL_MINUTES must be >= 1.")
    if config.JWT_REFRESH_TTL_DAYS < 1:
        raise ConfigurationError("JWT_REFRESH_TTL_DAYS must be >= 1.")
    if not config.AUTH_PROVIDERS:
        raise ConfigurationError("AUTH_PROVIDERS must list at least one provider.")
    if config.AUTH_MAX_FAILED_ATTEMPTS < 1:
        raise ConfigurationError("AUTH_MAX_FAILED_ATTEMPTS must be >= 1.")
    if config.AUTH_LOCKOUT_MINUTES < 0:
        raise ConfigurationError("AUTH_LOCKOUT_MINUTES must be >= 0.")
    if config.MAX_UPLOAD_BYTES < 1:
        raise ConfigurationError("MAX_UPLOAD_BYTES must be >= 1.")
    if not 0 <= config.INVOICE_TAX_RATE <= 1:
        raise ConfigurationError("INVOICE_TAX_RATE must be a fraction between 0 and 1.")
    if config.FORECAST_MONTHS < 1:
        raise ConfigurationError("FORECAST_MONTHS must be >= 1.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production and "change_me" in config.JWT_SECRET:
        raise ConfigurationError("Production JWT_SECRET uses the placeholder value.")
    if config.is_production and "change_me" in config.DATABASE_URL.lower():
        raise ConfigurationError("Production DATABASE_URL uses placeholder credentials.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
