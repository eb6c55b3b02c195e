from __future__ import annotations

import httpx
import pytest

from services.api_client import ApiError, clean_query
from utils.app_signals import app_signals
from utils.session import SessionContext


def test_clean_query_drops_none_and_renders_bools():
    assert clean_query({"skip": 0, "limit": 10, "search": None, "active": True, "archived": False}) == {
        "skip": 0,
        "limit": 10,
        "active": "true",
        "archived": "false",
    }
    assert clean_query(None) == {}


def test_get_sends_query_and_bearer_token(qt_app, settings, backend, make_client):
    session = SessionContext(settings)
    session.set_token("tok-1")
    backend.route("GET", "/api/vehicles", httpx.Response(200, json=[{"id": 1}]))
    client = make_client(session=session)

    result = client.get("/api/vehicles", query={"skip": 10, "limit": 10, "search": None})

    assert result == [{"id": 1}]
    request = backend.requests[-1]
    assert request.headers["Authorization"] == "Bearer tok-1"
    assert request.headers["Accept"] == "application/json"
    assert dict(request.url.params) == {"skip": "10", "limit": "10"}


def test_no_authorization_header_without_token(qt_app, backend, make_client):
    backend.route("GET", "/ping", httpx.Response(200, json={"ok": True}))
    make_client().get("/ping")
    assert "Authorization" not in backend.requests[-1].headers


def test_post_and_put_send_json(backend, make_client):
    backend.route("POST", "/api/items", httpx.Response(201, json={"id": 7, "name": "Gloves"}))
    backend.route("PUT", "/api/items/7", httpx.Response(200, json={"id": 7, "name": "Boots"}))
    client = make_client()

    assert client.post("/api/items", {"name": "Gloves"}) == {"id": 7, "name": "Gloves"}
    assert backend.json_body() == {"name": "Gloves"}
    assert client.put("/api/items/7", {"name": "Boots"})["name"] == "Boots"
    assert backend.requests[-1].method == "PUT"


def test_delete_with_no_content_returns_none(backend, make_client):
    backend.route("DELETE", "/api/items/7", httpx.Response(204))
    assert make_client().delete("/api/items/7") is None


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (httpx.Response(400, json={"detail": "Vehicle ID already exists"}), "Vehicle ID already exists"),
        (
            httpx.Response(
                422,
                json={"detail": [{"loc": ["body", "year"], "msg": "too old"}, {"msg": "missing plate"}]},
            ),
            "too old; missing plate",
        ),
        (httpx.Response(500, json={"message": "Database unavailable"}), "Database unavailable"),
        (httpx.Response(502, text="Bad gateway"), "Request failed with status 502"),
    ],
)
def test_error_messages(backend, make_client, response, expected):
    backend.route("GET", "/boom", response)
    with pytest.raises(ApiError) as info:
        make_client().get("/boom")
    assert info.value.message == expected
    assert str(info.value) == expected
    assert info.value.status_code == response.status_code


def test_network_error_becomes_api_error(make_client):
    def _raise(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as info:
        make_client(handler=_raise).get("/anything")
    assert info.value.status_code is None
    assert "Unable to reach the server" in info.value.message


def test_invalid_json_body(backend, make_client):
    backend.route("GET", "/html", httpx.Response(200, text="<html></html>"))
    with pytest.raises(ApiError, match="Invalid response from server"):
        make_client().get("/html")


def test_unauthorized_emits_app_signal(qt_app, backend, make_client):
    backend.route("GET", "/api/clients", httpx.Response(401, json={"detail": "Not authenticated"}))
    paths: list[str] = []

    def _on_unauthorized(path: str) -> None:
        paths.append(path)

    app_signals.unauthorized.connect(_on_unauthorized)
    try:
        with pytest.raises(ApiError) as info:
            make_client().get("/api/clients")
    finally:
        app_signals.unauthorized.disconnect(_on_unauthorized)

    assert info.value.is_unauthorized
    assert paths == ["/api/clients"]
