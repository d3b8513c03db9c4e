"""Tests for the health endpoint."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tendril import __version__
from tendril.main import app

client = TestClient(app)


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert data["behaviors_registered"] == 25
