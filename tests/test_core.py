import logging

import pytest

from core import db as core_db
from store import Store


def test_sanitize_database_url_drops_sslmode():
    url = "postgresql://u:p@db:5432/app?sslmode=disable&application_name=starboard"
    assert core_db._sanitize_database_url(url) == "postgresql://u:p@db:5432/app?application_name=starboard"
    assert core_db._sanitize_database_url("postgresql://db/app") == "postgresql://db/app"


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        core_db.database_url()


def test_affected_rows():
    assert core_db.affected_rows("DELETE 3") == 3
    assert core_db.affected_rows("INSERT 0 1") == 1
    assert core_db.affected_rows("UPDATE 0") == 0
    assert core_db.affected_rows("") == 0


def test_pool_must_be_connected():
    with pytest.raises(RuntimeError):
        core_db.Database("postgresql://db/app").pool


def test_store_builds_all_repositories():
    store = Store.build(core_db.Database("postgresql://db/app"))
    assert type(store.users).__name__ == "UserRepository"
    assert type(store.posts).__name__ == "PostRepository"
    assert type(store.stars).__name__ == "StarRepository"


def test_health_and_request_id(client):
    first = client.get("/health")
    second = client.get("/health")
    assert first.status_code == 200
    assert first.json() == {"status": "ok"}
    assert first.headers["x-request-id"]
    assert first.headers["x-request-id"] != second.headers["x-request-id"]


def test_error_responses_carry_request_id(client):
    resp = client.get("/private/whoami")
    assert resp.status_code == 401
    assert resp.headers["x-request-id"]


def test_cors_allows_single_origin(client):
    resp = client.options(
        "/private/posts",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert resp.headers["access-control-allow-credentials"] == "true"

    resp = client.get("/health", headers={"Origin": "http://evil.example"})
    assert resp.headers.get("access-control-allow-origin") != "http://evil.example"


def test_unexpected_errors_are_generic(client, store, monkeypatch, caplog):
    async def _boom(**_):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(store.posts, "find_all", _boom)
    caplog.set_level(logging.INFO, logger="core.middleware")
    resp = client.get("/posts", headers={"Origin": "http://localhost:3000"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "internal server error"}
    assert "connection reset" not in resp.text

    # Still wrapped by the request-id, CORS and logging middleware.
    assert resp.headers["x-request-id"]
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
    completed = [r for r in caplog.records if r.getMessage().startswith("completed with 500")]
    assert completed and completed[0].levelno == logging.ERROR
    assert resp.headers["x-request-id"] in completed[0].getMessage()


def test_requests_are_logged(client, caplog):
    caplog.set_level(logging.INFO, logger="core.middleware")
    client.get("/private/whoami")

    messages = [r.getMessage() for r in caplog.records if r.name == "core.middleware"]
    assert any(m.startswith("started GET /private/whoami") for m in messages)
    completed = [r for r in caplog.records if r.getMessage().startswith("completed with 401")]
    assert completed and completed[0].levelno == logging.WARNING
