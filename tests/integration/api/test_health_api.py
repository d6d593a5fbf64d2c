from __future__ import annotations

import app.api.v1.health as health_module


def test_health_reports_database_status(api_client, monkeypatch):
    monkeypatch.setattr(health_module, "verify_database_connection", lambda: True)
    body = api_client.get("/api/v1/health").json()
    assert body["status"] == "ok"
    assert body["database"] == "ok"

    monkeypatch.setattr(health_module, "verify_database_connection", lambda: False)
    assert api_client.get("/api/v1/health").json()["database"] == "unavailable"


def test_root_describes_service(api_client):
    body = api_client.get("/").json()
    assert body["api_prefix"] == "/api/v1"
