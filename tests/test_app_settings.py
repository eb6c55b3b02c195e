from __future__ import annotations

import pytest

from utils import app_settings


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("ERP_DATA_DIR", str(tmp_path))
    for name in ("ERP_API_BASE_URL", "ERP_API_TIMEOUT", "ERP_DEV"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _write_ini(tmp_path, text: str) -> None:
    (tmp_path / "app.ini").write_text(text, encoding="utf-8")


def test_defaults_without_env_or_ini():
    assert app_settings.resolve_api_base_url() == "http://127.0.0.1:8000"
    assert app_settings.resolve_timeout() == 15.0
    assert app_settings.resolve_dev_mode() is False


def test_ini_values_are_used(tmp_path):
    _write_ini(tmp_path, "[api]\nbase_url = https://erp.example.com/\ntimeout = 20\n\n[app]\ndev = yes\n")
    assert app_settings.resolve_api_base_url() == "https://erp.example.com"
    assert app_settings.resolve_timeout() == 20.0
    assert app_settings.resolve_dev_mode() is True


def test_environment_wins_over_ini(tmp_path, monkeypatch):
    _write_ini(tmp_path, "[api]\nbase_url = https://ini.example.com\n")
    monkeypatch.setenv("ERP_API_BASE_URL", "https://env.example.com")
    assert app_settings.resolve_api_base_url() == "https://env.example.com"


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_timeout_falls_back(monkeypatch, raw):
    monkeypatch.setenv("ERP_API_TIMEOUT", raw)
    assert app_settings.resolve_timeout() == app_settings.DEFAULT_TIMEOUT_SECONDS


def test_get_file_url():
    assert app_settings.get_file_url(None) is None
    assert app_settings.get_file_url("") is None
    assert app_settings.get_file_url("https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"
    assert app_settings.get_file_url("/uploads/a.png", "http://api.test/") == "http://api.test/uploads/a.png"
    assert app_settings.get_file_url("uploads/a.png", "http://api.test") == "http://api.test/uploads/a.png"
