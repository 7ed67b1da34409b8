"""Tests for the server entrypoint."""

from dataclasses import replace

import pytest

from expense_tracker import main as main_module
from expense_tracker.domain.errors import DatabaseConnectionError


def test_main_exits_when_configuration_missing(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_KEY", "SESSION_SECRET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda *_args, **_kwargs: pytest.fail("started")
    )

    with pytest.raises(SystemExit) as excinfo:
        main_module.main()

    assert excinfo.value.code == 1


def test_main_exits_when_database_unreachable(monkeypatch, settings, container) -> None:
    def failing_check() -> None:
        raise DatabaseConnectionError("connection refused")

    monkeypatch.setattr(main_module, "load_settings", lambda: settings)
    monkeypatch.setattr(
        main_module,
        "build_container",
        lambda _settings: replace(container, check_connection=failing_check),
    )
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda *_args, **_kwargs: pytest.fail("started")
    )

    with pytest.raises(SystemExit) as excinfo:
        main_module.main()

    assert excinfo.value.code == 1


def test_main_serves_on_configured_port(monkeypatch, settings, container) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(main_module, "load_settings", lambda: settings)
    monkeypatch.setattr(main_module, "build_container", lambda _settings: container)
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda _app, **kwargs: calls.append(kwargs)
    )

    main_module.main()

    assert calls == [{"host": "0.0.0.0", "port": 5002}]
