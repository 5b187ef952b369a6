"""Tests for the command-line entry point."""

import logging

import httpx
import pytest

import main
from core.models import UserPreferences


def test_check_backend_healthy(monkeypatch, api):
    monkeypatch.setattr(main, "api", api)
    monkeypatch.setattr("sys.argv", ["doppio-coffee-mcp", "--check-backend"])

    assert main.main() == 0


def test_check_backend_unreachable(monkeypatch, client_for):
    monkeypatch.setattr(main, "api", client_for(lambda request: httpx.Response(500)))
    monkeypatch.setattr("sys.argv", ["doppio-coffee-mcp", "--check-backend"])

    assert main.main() == 1


def test_clear_preferences(monkeypatch, store):
    store.save(UserPreferences(preparation="espresso"))
    monkeypatch.setattr(main, "preferences", store)
    monkeypatch.setattr("sys.argv", ["doppio-coffee-mcp", "--clear-preferences"])

    assert main.main() == 0
    assert store.get().is_empty()


def test_version_flag(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["doppio-coffee-mcp", "--version"])

    with pytest.raises(SystemExit) as excinfo:
        main.main()

    assert excinfo.value.code == 0
    assert "doppio-coffee-mcp 1.0.0" in capsys.readouterr().out


def test_default_mode_runs_stdio_server(monkeypatch, mocker):
    run = mocker.patch.object(main.mcp, "run")
    monkeypatch.setattr("sys.argv", ["doppio-coffee-mcp"])

    assert main.main() == 0
    run.assert_called_once_with(show_banner=False)


def test_missing_api_key_folds_into_single_startup_line(monkeypatch, mocker, caplog):
    mocker.patch.object(main.mcp, "run")
    monkeypatch.setattr(main.config, "API_KEY", "")
    monkeypatch.setattr("sys.argv", ["doppio-coffee-mcp"])

    with caplog.at_level(logging.INFO):
        main.main()

    assert len(caplog.records) == 1
    assert "running on stdio" in caplog.text
    assert "DOPPIO_API_KEY" in caplog.text
