import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import create_app
from utils.config import settings
from utils.middleware.deprecation import is_legacy_path


@pytest.mark.parametrize(
    "path, legacy",
    [("/api/tables", True), ("/api/v1/tables", False), ("/health", False), ("/apis", False)],
)
def test_is_legacy_path(path, legacy):
    assert is_legacy_path(path) is legacy


def test_legacy_prefix_still_works_with_deprecation_headers(client):
    resp = client.get("/api/categories")
    assert resp.status_code == 200
    assert resp.headers["X-API-Deprecated"] == "true"
    assert resp.headers["X-API-Migration-Guide"] == "Replace /api/categories with /api/v1/categories"

    resp = client.get("/api/v1/categories")
    assert "X-API-Deprecated" not in resp.headers


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_rate_limit(db, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_MAX", 2)
    app = create_app(redis_client=fakeredis.aioredis.FakeRedis())
    app.dependency_overrides[get_db] = lambda: db

    with TestClient(app) as client:
        assert client.get("/api/v1/categories").status_code == 200
        assert client.get("/api/v1/categories").status_code == 200
        resp = client.get("/api/v1/categories")
        assert resp.status_code == 429
        assert resp.json()["code"] == "RATE_LIMIT_EXCEEDED"
        assert int(resp.headers["Retry-After"]) > 0
        # only the api is limited
        assert client.get("/health").status_code == 200


def test_rejected_requests_do_not_extend_the_window(db, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_MAX", 2)
    server = fakeredis.FakeServer()
    app = create_app(redis_client=fakeredis.aioredis.FakeRedis(server=server))
    app.dependency_overrides[get_db] = lambda: db

    with TestClient(app) as client:
        statuses = [client.get("/api/v1/categories").status_code for _ in range(6)]
    assert statuses == [200, 200, 429, 429, 429, 429]
    # only the two accepted requests are recorded
    assert fakeredis.FakeRedis(server=server).zcard("ratelimit:testclient") == 2
