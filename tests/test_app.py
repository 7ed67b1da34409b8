"""Tests for application startup and the request-context middleware."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.concurrency import run_in_threadpool
from fastapi.testclient import TestClient

from expense_tracker.api import app as app_module
from expense_tracker.api.app import create_app
from expense_tracker.api.context import resolve_request_context
from expense_tracker.containers import AppContainer
from expense_tracker.domain.errors import DatabaseConnectionError
from expense_tracker.domain.sessions import SessionRecord
from expense_tracker.services.sessions import SessionService
from tests.conftest import InMemorySessionRepository, register_and_login


@dataclass
class BrokenSessionRepository(InMemorySessionRepository):
    """Session store whose reads always fail."""

    def get_session(self, session_id: str) -> SessionRecord | None:
        raise RuntimeError("session store unavailable")


def test_startup_purges_expired_sessions(
    container: AppContainer, session_repository: InMemorySessionRepository
) -> None:
    session_repository.sessions["stale"] = SessionRecord(
        id="stale",
        user_id=uuid4(),
        expires_at=datetime.now(tz=UTC) - timedelta(minutes=5),
    )

    with TestClient(create_app(container)) as client:
        assert client.get("/health").status_code == 200

    assert session_repository.sessions == {}


def test_startup_fails_when_database_unreachable(container: AppContainer) -> None:
    def failing_check() -> None:
        raise DatabaseConnectionError("connection refused")

    app = create_app(replace(container, check_connection=failing_check))

    with pytest.raises(DatabaseConnectionError), TestClient(app):
        pass


def test_session_lookup_failure_is_treated_as_anonymous(
    container: AppContainer,
) -> None:
    broken = replace(
        container,
        session_service=SessionService(
            repository=BrokenSessionRepository(), secret="test-secret"
        ),
    )
    cookie = broken.session_service.sign("anything")

    context = resolve_request_context(broken, cookie)

    assert context.current_user is None
    assert context.is_authenticated is False


def test_session_for_deleted_user_has_no_identity(
    client: TestClient, user_repository
) -> None:
    register_and_login(client, "ada@example.com")
    user_repository.users.clear()

    response = client.get("/api/expenses")

    assert response.status_code == 401


def test_static_assets_are_public(client: TestClient) -> None:
    response = client.get("/static/app.css")

    assert response.status_code == 200


def test_login_page_keeps_credential_errors_on_screen(client: TestClient) -> None:
    script = client.get("/static/app.js").text
    page = client.get("/login").text
    rejected = client.post(
        "/login", json={"email": "nobody@example.com", "password": "wrong-pass"}
    )

    assert "res.status === 401 && redirectOnUnauthorized" in script
    assert "redirectOnUnauthorized: false" in page
    assert rejected.status_code == 401
    assert rejected.json()["detail"] == "Invalid email or password"


def test_session_lookup_runs_off_the_event_loop(
    container: AppContainer, monkeypatch: pytest.MonkeyPatch
) -> None:
    offloaded = []

    async def recording_threadpool(func, *args):  # type: ignore[no-untyped-def]
        offloaded.append(func)
        return await run_in_threadpool(func, *args)

    monkeypatch.setattr(app_module, "run_in_threadpool", recording_threadpool)
    client = TestClient(create_app(container))
    register_and_login(client, "ada@example.com")

    assert client.get("/api/expenses").status_code == 200
    assert offloaded
    assert set(offloaded) == {resolve_request_context}
