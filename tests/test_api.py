"""
API Integration Tests — Endpoint Verification

Tests every public API endpoint using FastAPI's TestClient.

These tests catch:
  - Schema mismatches (response model vs actual data)
  - Route registration issues
  - Middleware bugs
  - Response format regressions
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from groundcheck.config import settings


# --- Fixtures ---

@pytest.fixture(scope="module")
def client():
    """Create a test client for the GroundCheck API."""
    from api.main import app
    with TestClient(app) as c:
        yield c


# ============================================================
# HEALTH & META
# ============================================================

class TestHealth:

    def test_health_returns_200(self, client):
        assert client.get("/health").status_code == 200

    def test_health_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["core_version"] == "1.0.0"
        assert "version" in data

    def test_version_headers(self, client):
        r = client.get("/health")
        assert r.headers["X-Core-Version"] == "1.0.0"
        assert "X-GroundCheck-Version" in r.headers
        assert r.headers["X-Content-Type-Options"] == "nosniff"


# ============================================================
# DETECT
# ============================================================

class TestDetect:

    def test_clean_text(self, client):
        r = client.post("/detect", json={"text": "I ran the tests and read the output."})
        assert r.status_code == 200
        data = r.json()
        assert data["matches"] == []
        assert data["kinds"] == []
        assert data["blocked"] is False

    def test_flagged_text(self, client):
        r = client.post("/detect", json={"text": "It probably fails because the mock is wrong."})
        data = r.json()
        assert data["blocked"] is True
        assert data["kinds"] == ["speculation_language", "causality_language"]
        assert {"kind": "causality_language", "evidence": "because"} in data["matches"]

    def test_empty_text_rejected(self, client):
        assert client.post("/detect", json={"text": ""}).status_code == 422

    def test_missing_text_rejected(self, client):
        assert client.post("/detect", json={}).status_code == 422

    def test_oversized_text_rejected(self, client):
        text = "a" * (settings.MAX_TEXT_CHARS + 1)
        assert client.post("/detect", json={"text": text}).status_code == 422


# ============================================================
# SCORE
# ============================================================

class TestScore:

    def test_default_weights(self, client, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        r = client.post("/score", json={"text": "The port is 8080. I think it works."})
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 2
        assert data["results"][0]["label"] == "GROUNDED"
        assert data["results"][1]["scores"]["speculation_language"] == 1
        assert data["worst_label"] == "GROUNDED"
        assert data["weights"]["causality_language"] == 0.30

    def test_request_weights(self, client):
        r = client.post("/score", json={
            "text": "I think it works.",
            "weights": {"speculation_language": 1, "causality_language": "bad", "extra": 2},
        })
        data = r.json()
        assert data["weights"]["speculation_language"] == 1.0
        assert data["weights"]["causality_language"] == 0.30
        assert "extra" not in data["weights"]
        assert data["results"][0]["aggregate_score"] == pytest.approx(1 / 1.75)

    def test_weights_file_applies(self, client, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / settings.WEIGHTS_FILE).write_text(
            json.dumps({"weights": {"speculation_language": 5.0}}),
        )
        data = client.post("/score", json={"text": "I think it works."}).json()
        assert data["weights"]["speculation_language"] == 5.0
        assert data["worst_label"] == "HALLUCINATED"

    def test_result_fields(self, client):
        data = client.post("/score", json={"text": "One. Two."}).json()
        result = data["results"][1]
        assert result["index"] == 1
        assert result["total"] == 2
        assert result["sentence"] == "Two."

    def test_empty_text_rejected(self, client):
        assert client.post("/score", json={"text": ""}).status_code == 422


# ============================================================
# WEIGHTS & PATTERNS
# ============================================================

class TestWeights:

    def test_defaults_present(self, client, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        data = client.get("/weights").json()
        assert data["weights"] == data["defaults"]
        assert data["defaults"]["fabricated_source"] == 0.10


class TestPatterns:

    def test_patterns_listed(self, client):
        data = client.get("/patterns").json()
        assert data["core_version"] == "1.0.0"
        assert data["total_patterns"] == len(data["patterns"])
        assert data["total_patterns"] > 50

    def test_pattern_entries(self, client):
        for entry in client.get("/patterns").json()["patterns"]:
            assert {"kind", "type", "pattern"} <= set(entry)
