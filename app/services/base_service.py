"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import app.database.db as db_module
from app.core.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or db_module.SessionLocal()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(
                "database.commit.integrity_error",
                extra={"event": "database.commit.integrity_error", "service": type(self).__name__},
            )
            raise ConflictError("Operation conflicts with existing records.") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(
                "database.commit.failed",
                extra={"event": "database.commit.failed", "service": type(self).__name__},
            )
            raise DatabaseError("Database write failed.") from exc

    def save(self, instance: Any) -> Any:
        """Add, commit and refresh a single ORM instance."""
        self.db.add(instance)
        self.commit()
        self.db.refresh(instance)
        return instance

    def remove(self, instance: Any) -> None:
        self.db.delete(instance)
        self.commit()

    @staticmethod
    def apply_changes(instance: Any, changes: dict[str, Any]) -> None:
        for key, value in changes.items():
            setattr(instance, key, value)

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
