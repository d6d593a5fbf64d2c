from __future__ import annotations

import dataclasses
from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.jwt import create_token_pair
from app.core.config import get_config
from app.core.dependencies import get_db_session
from app.models import Base


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def storage_dir(tmp_path, monkeypatch):
    import app.services.storage_service as storage_module

    cfg = dataclasses.replace(get_config(), STORAGE_DIR=str(tmp_path / "storage"))
    monkeypatch.setattr(storage_module, "get_config", lambda: cfg)
    return tmp_path / "storage"


@pytest.fixture
def api_client(session, storage_dir):
    from app.main import create_app

    application = create_app(run_startup=False)

    def _override_db():
        yield session

    application.dependency_overrides[get_db_session] = _override_db
    with TestClient(application) as client:
        yield client
    application.dependency_overrides.clear()


@pytest.fixture
def auth_header() -> Callable[..., dict[str, str]]:
    def _build(role: str = "admin", user_id: int = 1, email: str = "admin@example.com") -> dict[str, str]:
        cfg = get_config()
        tokens = create_token_pair(
            user_id=user_id,
            email=email,
            role=role,
            secret=cfg.JWT_SECRET,
            permissions_version=cfg.JWT_PERMISSIONS_VERSION,
        )
        return {"Authorization": f"Bearer {tokens.access_token}"}

    return _build
