from __future__ import annotations

import json
import os
from typing import Any, Callable

import pytest

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import httpx  # noqa: E402
from PySide6.QtCore import QSettings  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def qt_app():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def settings(tmp_path) -> QSettings:
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


class DeferredDispatcher:
    """Holds dispatched tasks until the test settles them explicitly."""

    def __init__(self) -> None:
        self.pending: list[tuple[int, Callable[[], Any], Callable, Callable]] = []

    def __call__(self, ticket, task, on_completed, on_failed) -> None:
        self.pending.append((ticket, task, on_completed, on_failed))

    def settle(self, index: int = 0) -> None:
        ticket, task, on_completed, on_failed = self.pending.pop(index)
        try:
            result = task()
        except Exception as exc:
            on_failed(ticket, exc)
        else:
            on_completed(ticket, result)

    def settle_all(self) -> None:
        while self.pending:
            self.settle(0)


@pytest.fixture
def deferred() -> DeferredDispatcher:
    return DeferredDispatcher()


class RecordingBackend:
    """``httpx.MockTransport`` handler that records requests and replays routes."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response] | httpx.Response] = {}

    def route(self, method: str, path: str, response) -> None:
        self.routes[(method.upper(), path)] = response

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if callable(handler):
            return handler(request)
        # Hand out a fresh response each time; httpx binds a response to one request.
        return httpx.Response(handler.status_code, headers=handler.headers, content=handler.content)


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def make_client(backend):
    from services.api_client import ApiClient

    clients = []

    def _make(session=None, handler=None):
        client = ApiClient(
            "http://erp.test",
            session=session,
            timeout=5,
            transport=httpx.MockTransport(handler or backend),
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
