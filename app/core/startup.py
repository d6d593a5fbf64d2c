"""Boot-time checks for the CRM API: database, blob store and billing settings."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from app.core.config import get_config
from app.core.exceptions import ConfigurationError, StorageError
from app.core.logging_config import configure_logging
from app.database.db import get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)

# Forecast buckets beyond two years are almost always a typo in FORECAST_MONTHS.
FORECAST_MONTHS_SOFT_LIMIT = 24


@dataclass
class StartupReport:
    database_scheme: str
    database_reachable: bool
    storage_dir: str
    warnings: list[str] = field(default_factory=list)


def check_database(config) -> tuple[bool, str]:
    reachable = verify_database_connection()
    scheme = get_active_database_url().split("://", 1)[0]
    if not reachable and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    return reachable, scheme


def check_blob_store(storage_dir: str) -> Path:
    """Create the blob directory and prove it accepts writes."""
    root = Path(storage_dir)
    try:
        root.mkdir(parents=True, exist_ok=True)
        marker = root / f".write-check-{uuid.uuid4().hex}"
        marker.write_bytes(b"")
        marker.unlink()
    except OSError as exc:
        raise StorageError(f"Blob store {root} is not writable: {exc}") from exc
    return root


def check_billing_settings(config) -> list[str]:
    """Return warnings for tax and forecast values that are valid but suspicious."""
    if not 0 <= config.INVOICE_TAX_RATE <= 1:
        raise ConfigurationError("INVOICE_TAX_RATE must be a fraction between 0 and 1.")
    if config.FORECAST_MONTHS < 1:
        raise ConfigurationError("FORECAST_MONTHS must be >= 1.")

    warnings: list[str] = []
    if config.is_production and config.INVOICE_TAX_RATE == 0:
        warnings.append("invoice_tax_rate_zero")
    if config.FORECAST_MONTHS > FORECAST_MONTHS_SOFT_LIMIT:
        warnings.append("forecast_months_large")
    return warnings


def validate_startup_config() -> StartupReport:
    config = get_config()
    reachable, scheme = check_database(config)
    root = check_blob_store(config.STORAGE_DIR)
    report = StartupReport(
        database_scheme=scheme,
        database_reachable=reachable,
        storage_dir=str(root),
        warnings=check_billing_settings(config),
    )
    if not reachable:
        report.warnings.append("database_unreachable")
    if config.is_production and scheme == "sqlite":
        report.warnings.append("sqlite_in_production")

    for warning in report.warnings:
        logger.warning(f"startup.{warning}", extra={"event": f"startup.{warning}"})
    logger.info(
        "startup.ready",
        extra={
            "event": "startup.ready",
            "env": config.ENV,
            "database_scheme": scheme,
            "storage_dir": report.storage_dir,
            "invoice_tax_rate": config.INVOICE_TAX_RATE,
            "forecast_months": config.FORECAST_MONTHS,
            "auth_providers": list(config.AUTH_PROVIDERS),
        },
    )
    return report


def bootstrap() -> StartupReport:
    configure_logging()
    return validate_startup_config()
