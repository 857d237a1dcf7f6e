"""
Tests for the compliance scanner API.
"""

import pytest
from conftest import FakeAnalyzer
from fastapi.testclient import TestClient

from compliance_scanner.api.app import create_app
from compliance_scanner.repositories import InMemoryAnalysisCacheRepository

ADMIN_KEY = "admin-secret"


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def repository(timer):
    return InMemoryAnalysisCacheRepository(timer=timer)


@pytest.fixture
def client(repository, analyzer):
    """Create a test client running the app lifespan."""
    app = create_app(repository=repository, analyzer=analyzer, admin_api_key=ADMIN_KEY)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Compliance Scanner API"
    assert data["endpoints"]["analysis"] == "/analysis"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache_healthy"] is True
    assert data["analyzer_available"] is True
    assert data["uptime_seconds"] >= 0
    assert data["cache"]["backend"] == "memory"


def test_health_degraded_without_analyzer(repository):
    app = create_app(repository=repository, analyzer=FakeAnalyzer(available=False), admin_api_key=ADMIN_KEY)
    with TestClient(app) as client:
        assert client.get("/health").json()["status"] == "degraded"


def test_analysis_miss_then_hit(client, analyzer):
    """Identical requests are served from the cache."""
    body = {"text": "Guaranteed 12% returns!", "content_type": "social_media"}

    first = client.post("/analysis", json=body)
    assert first.status_code == 200
    first_data = first.json()
    assert first_data["cache_used"] is False
    assert first_data["key"].startswith("analysis:")
    assert first_data["key"].count(":") == 3
    assert first_data["result"]["complianceScore"] == 72
    assert first_data["result"]["overallStatus"] == "needs_review"

    second = client.post("/analysis", json=body).json()
    assert second["cache_used"] is True
    assert second["key"] == first_data["key"]
    assert len(analyzer.calls) == 1


def test_analysis_expires_after_ttl(client, analyzer, timer):
    client.post("/analysis", json={"text": "same"})
    timer.advance(601)
    assert client.post("/analysis", json={"text": "same"}).json()["cache_used"] is False
    assert len(analyzer.calls) == 2


def test_analysis_rejects_empty_text(client):
    response = client.post("/analysis", json={"text": ""})
    assert response.status_code == 422


def test_analyzer_failure_returns_502(client, analyzer):
    analyzer.fail = True
    response = client.post("/analysis", json={"text": "anything"})
    assert response.status_code == 502
    assert "AI analysis failed" in response.json()["detail"]


def test_admin_routes_require_key(client):
    assert client.get("/admin/cache").status_code == 401
    assert client.get("/admin/cache", headers={"X-Admin-Key": "wrong"}).status_code == 401
    assert client.delete("/admin/cache").status_code == 401


def test_cache_stats(client, admin_headers):
    client.post("/analysis", json={"text": "one"})
    client.post("/analysis", json={"text": "one"})

    response = client.get("/admin/cache", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["backend"] == "memory"
    assert data["keys"] == 1
    assert data["hits"] == 1
    assert data["misses"] == 1
    assert data["ttl_seconds"] == 600


def test_delete_entry(client, admin_headers):
    key = client.post("/analysis", json={"text": "one"}).json()["key"]

    response = client.delete(f"/admin/cache/{key}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "key": key}

    again = client.delete(f"/admin/cache/{key}", headers=admin_headers)
    assert again.status_code == 404


def test_clear_cache(client, admin_headers, analyzer):
    client.post("/analysis", json={"text": "one"})
    client.post("/analysis", json={"text": "two"})

    response = client.delete("/admin/cache", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 2

    assert client.post("/analysis", json={"text": "one"}).json()["cache_used"] is False
    assert len(analyzer.calls) == 3


def test_admin_open_without_configured_key(repository, analyzer):
    app = create_app(repository=repository, analyzer=analyzer)
    app.state.admin_api_key = None
    with TestClient(app) as client:
        assert client.get("/admin/cache").status_code == 200
