"""HTTP transport for the ERP REST backend.

Every request goes through :class:`ApiClient`, which resolves paths against
the configured base URL, attaches the session's bearer token and turns any
failure into an :class:`ApiError` carrying a human readable message.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

import httpx

from utils import app_settings
from utils.app_signals import app_signals
from utils.session import SessionContext

logger = logging.getLogger(__name__)

QueryValue = Union[str, int, float, bool, None]
QueryParams = Mapping[str, QueryValue]

USER_AGENT = "ERP-Console/1.0"


class ApiError(Exception):
    """Raised for any failed request; ``message`` is safe to show to users."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def clean_query(query: QueryParams | None) -> dict[str, str | int | float]:
    """Drop ``None`` entries and render booleans the way the backend expects."""
    params: dict[str, str | int | float] = {}
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        else:
            params[key] = value
    return params


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    fallback = f"Request failed with status {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return fallback, response.text or None

    if not isinstance(payload, dict):
        return fallback, payload

    detail = payload.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail, detail
    if isinstance(detail, list):
        # FastAPI validation errors: [{"loc": [...], "msg": "...", "type": "..."}]
        messages = [str(item.get("msg")) for item in detail if isinstance(item, dict) and item.get("msg")]
        if messages:
            return "; ".join(messages), detail
    message = payload.get("message")
    if isinstance(message, str) and message.strip():
        return message, payload
    return fallback, payload


class ApiClient:
    """Thin wrapper around httpx for simpler mocking in tests."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        session: SessionContext | None = None,
        timeout: Optional[float] = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or app_settings.resolve_api_base_url()).rstrip("/")
        self._session = session
        seconds = timeout if timeout is not None else app_settings.resolve_timeout()
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(seconds, connect=min(5.0, seconds)),
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            transport=transport,
        )

    @property
    def session(self) -> SessionContext | None:
        return self._session

    # ------------------------------------------------------------------ verbs
    def get(self, path: str, query: QueryParams | None = None) -> Any:
        return self._request("GET", path, query=query)

    def post(self, path: str, body: Any = None) -> Any:
        return self._request("POST", path, body=body)

    def put(self, path: str, body: Any = None) -> Any:
        return self._request("PUT", path, body=body)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------ internals
    def _auth_headers(self) -> dict[str, str]:
        token = self._session.token if self._session is not None else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(
        self,
        method: str,
        path: str,
        *,
        query: QueryParams | None = None,
        body: Any = None,
    ) -> Any:
        params = clean_query(query)
        logger.debug("%s %s params=%s", method, path, params)
        kwargs: dict[str, Any] = {"params": params, "headers": self._auth_headers()}
        if body is not None:
            kwargs["json"] = body
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Unable to reach the server: {exc}") from exc

        if response.is_error:
            message, detail = _error_message(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            if response.status_code == 401:
                app_signals.unauthorized.emit(path)
            raise ApiError(message, status_code=response.status_code, detail=detail)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("Invalid response from server", status_code=response.status_code) from exc


__all__ = ["ApiClient", "ApiError", "QueryParams", "QueryValue", "clean_query"]
