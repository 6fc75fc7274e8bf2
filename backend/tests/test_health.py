"""
Tests for GET /api/v1/health
============================
Public liveness check: no auth, fixed payload.
Also covers the ``mindful-ai-api`` launch script.

Run: pytest tests/test_health.py -v
"""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient


def test_health_is_public():
    from app.main import app
    client = TestClient(app)

    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "mindful-ai-api"}


def test_serve_launches_uvicorn_with_settings():
    from app import main

    with patch("app.main.uvicorn.run") as run:
        main.serve()

    run.assert_called_once_with(
        "app.main:app",
        host=main.settings.api_host,
        port=main.settings.api_port,
        reload=main.settings.environment == "development",
    )
