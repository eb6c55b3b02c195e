"""Application settings resolved from the environment and ``data/app.ini``.

Each setting is looked up in the process environment first, then in the
INI file inside the data directory, then falls back to a default.  The INI
may contain sections like::

    [api]
    base_url = https://erp.example.com
    timeout = 20

    [app]
    dev = true
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path

DEFAULT_API_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT_SECONDS = 15.0

_TRUTHY = {"1", "true", "yes", "on"}


def data_dir() -> Path:
    return Path(os.environ.get("ERP_DATA_DIR", "data"))


def _read_ini_value(section: str, key: str) -> str | None:
    """Return ``[section] key`` from ``data/app.ini`` or ``None``."""
    ini_path = data_dir() / "app.ini"
    if not ini_path.exists():
        return None
    cp = configparser.ConfigParser()
    try:
        cp.read(ini_path, encoding="utf-8")
    except configparser.Error:
        return None
    raw = cp.get(section, key, fallback="").strip()
    return raw or None


def resolve_api_base_url() -> str:
    value = os.environ.get("ERP_API_BASE_URL") or _read_ini_value("api", "base_url")
    return (value or DEFAULT_API_BASE_URL).rstrip("/")


def resolve_timeout() -> float:
    raw = os.environ.get("ERP_API_TIMEOUT") or _read_ini_value("api", "timeout")
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def resolve_dev_mode() -> bool:
    raw = os.environ.get("ERP_DEV") or _read_ini_value("app", "dev") or "0"
    return raw.strip().lower() in _TRUTHY


def get_file_url(url: str | None, base_url: str | None = None) -> str | None:
    """Return an absolute URL for an attachment path returned by the backend.

    Cloud storage links are already absolute and pass through untouched;
    backend-served paths such as ``/uploads/a.png`` are joined onto the API
    base URL.
    """
    if not url:
        return None
    if url.startswith("http://") or url.startswith("https://"):
        return url
    base = (base_url or resolve_api_base_url()).rstrip("/")
    return f"{base}{url if url.startswith('/') else '/' + url}"


DEV_MODE: bool = resolve_dev_mode()


__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEV_MODE",
    "data_dir",
    "get_file_url",
    "resolve_api_base_url",
    "resolve_dev_mode",
    "resolve_timeout",
]
