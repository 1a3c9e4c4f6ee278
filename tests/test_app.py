# tests/test_app.py

import pytest
from fastapi.testclient import TestClient

from taskboard import app as app_module
from taskboard.app import create_app, run_server

from .fakes import FailingStore


@pytest.fixture()
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture()
def failing_client(settings, failing_store: FailingStore):
    app = create_app(settings, store=failing_store)
    with TestClient(app) as test_client:
        yield test_client


# ===== SERVICE ROUTES =====

def test_index_serves_frontend(client) -> None:
    resp = client.get("/")

    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "Task Board" in resp.text


def test_index_missing_frontend(settings) -> None:
    settings.index_path.unlink()
    app = create_app(settings)

    with TestClient(app) as client:
        resp = client.get("/")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Frontend not found"}


def test_health_check(client) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["service"] == "Task Board API"


def test_unknown_route_uses_error_shape(client) -> None:
    resp = client.get("/api/unknown")

    assert resp.status_code == 404
    assert set(resp.json()) == {"error"}


def test_requests_carry_process_time_header(client) -> None:
    resp = client.get("/api/tasks")

    assert "x-process-time" in resp.headers


# ===== STORE FAILURES =====

@pytest.mark.parametrize(
    "method, path, body, message",
    [
        ("GET", "/api/tasks", None, "Failed to fetch tasks"),
        ("GET", "/api/tasks/1", None, "Failed to fetch task"),
        ("POST", "/api/tasks", {"title": "Buy milk"}, "Failed to create task"),
        ("PUT", "/api/tasks/1", {"title": "Renamed"}, "Failed to update task"),
        ("DELETE", "/api/tasks/1", None, "Failed to delete task"),
        ("PATCH", "/api/tasks/1/status", {"status": "DONE"}, "Failed to update task status"),
    ],
)
def test_store_failure_is_500(failing_client, failing_store, method, path, body, message) -> None:
    resp = failing_client.request(method, path, json=body)

    assert resp.status_code == 500
    assert resp.json() == {"error": message}
    assert len(failing_store.calls) == 1


def test_validation_happens_before_store_call(failing_client, failing_store) -> None:
    assert failing_client.post("/api/tasks", json={"title": " "}).status_code == 400
    assert failing_client.put("/api/tasks/1", json={}).status_code == 400
    assert failing_client.patch("/api/tasks/1/status", json={"status": "NOPE"}).status_code == 400
    assert failing_store.calls == []


def test_health_check_reports_unavailable_database(failing_client) -> None:
    resp = failing_client.get("/health")

    assert resp.status_code == 503
    assert resp.json() == {"error": "Database unavailable"}


def test_startup_survives_connection_failure(settings) -> None:
    store = FailingStore(fail_connect=True)
    app = create_app(settings, store=store)

    with TestClient(app) as client:
        resp = client.get("/api/tasks")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch tasks"}
    assert store.closed


def test_shutdown_closes_store(settings, failing_store) -> None:
    app = create_app(settings, store=failing_store)

    with TestClient(app):
        assert not failing_store.closed

    assert failing_store.closed


# ===== RUN =====

def test_import_does_not_build_an_app() -> None:
    assert not hasattr(app_module, "app")


def test_run_server_builds_app_through_factory(monkeypatch, settings) -> None:
    captured = {}

    def fake_run(target, **kwargs):
        captured["target"] = target
        captured.update(kwargs)

    monkeypatch.setattr(app_module, "get_settings", lambda: settings)
    monkeypatch.setattr(app_module.uvicorn, "run", fake_run)

    run_server(port=8123)

    assert captured["target"] == "taskboard.app:create_app"
    assert captured["factory"] is True
    assert captured["port"] == 8123
    assert captured["host"] == settings.HOST
