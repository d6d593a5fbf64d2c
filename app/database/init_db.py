"""Bring the database schema to the latest Alembic revision.

Run with ``python -m app.database.init_db``.
"""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import inspect

import app.database.db as db_module
from app.core.startup import bootstrap
from app.models import Base

logger = logging.getLogger(__name__)
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _build_alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def _requires_baseline_stamp() -> bool:
    """Tables created with ``create_all`` but never versioned by Alembic."""
    table_names = set(inspect(db_module.get_engine()).get_table_names())
    managed = set(Base.metadata.tables)
    return bool(table_names & managed) and "alembic_version" not in table_names


def init_db() -> None:
    bootstrap()
    active_url = db_module.get_active_database_url()
    alembic_cfg = _build_alembic_config(active_url)
    if _requires_baseline_stamp():
        Base.metadata.create_all(bind=db_module.get_engine())
        command.stamp(alembic_cfg, "head")
        logger.info("database.schema.stamped", extra={"event": "database.schema.stamped", "revision": "head"})
    else:
        command.upgrade(alembic_cfg, "head")

    logger.info(
        "database.schema.ready",
        extra={
            "event": "database.schema.ready",
            "database_url_scheme": active_url.split("://", 1)[0],
        },
    )


if __name__ == "__main__":
    init_db()
